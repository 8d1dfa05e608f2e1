from .decoder import DecodeDiagnostic, DecodeResult, TableLiteralDecoder, decode, js_number
from .normalizer import normalize, normalize_unit_def
from .unit_names import parse_unit_names

__all__ = [
    "DecodeDiagnostic",
    "DecodeResult",
    "TableLiteralDecoder",
    "decode",
    "js_number",
    "normalize",
    "normalize_unit_def",
    "parse_unit_names",
]
