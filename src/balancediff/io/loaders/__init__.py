from .errors import LoaderError
from .manifest_loader import load_manifest
from .names_loader import load_unit_names
from .schema_loader import DEFAULT_SCHEMA_PATH, load_property_schema
from .settings_loader import load_settings

__all__ = [
    "LoaderError",
    "load_manifest",
    "load_unit_names",
    "load_property_schema",
    "load_settings",
    "DEFAULT_SCHEMA_PATH",
]
