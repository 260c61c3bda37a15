"""Form structures, the per-document cache, sections and structural matching."""

from .cache import FormCache
from .classification import ClassificationEntry, FieldClassifier, apply_classification
from .fields import (
    MIN_FILLABLE_FIELDS,
    CachedField,
    CachedForm,
    FieldIdentity,
    LiveField,
    LiveForm,
    SelectOption,
)
from .matching import Correspondence, align_fields, section_is_autofilled
from .sections import Section, find_section_bounds
from .types import ControlKind, FieldType, FieldTypeGroup, FieldTypeSubgroup, equivalent_type

__all__ = [
    "FormCache",
    "ClassificationEntry",
    "FieldClassifier",
    "apply_classification",
    "MIN_FILLABLE_FIELDS",
    "CachedField",
    "CachedForm",
    "FieldIdentity",
    "LiveField",
    "LiveForm",
    "SelectOption",
    "Correspondence",
    "align_fields",
    "section_is_autofilled",
    "Section",
    "find_section_bounds",
    "ControlKind",
    "FieldType",
    "FieldTypeGroup",
    "FieldTypeSubgroup",
    "equivalent_type",
]
