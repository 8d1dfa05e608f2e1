from .classifier import ChangeClassifier, ClassifyContext, array_change, value_change_kind
from .differ import LEAF_CHANGED, DiffMarker, StructuralDifference, diff, is_array_shaped

__all__ = [
    "ChangeClassifier",
    "ClassifyContext",
    "array_change",
    "value_change_kind",
    "LEAF_CHANGED",
    "DiffMarker",
    "StructuralDifference",
    "diff",
    "is_array_shaped",
]
