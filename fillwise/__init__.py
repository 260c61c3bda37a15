"""Reconciling live web forms with cached, classified ones and filling them from saved records."""

from .config import Settings, get_settings
from .errors import (
    ContractViolationError,
    FillwiseError,
    IdentifierOverflowError,
    SectionBoundsError,
    UnknownIdentifierError,
)
from .fill import IdentifierCodec, SuggestionList
from .forms import CachedForm, FieldType, FormCache, LiveField, LiveForm
from .manager import AutofillManager, SubmittedForm
from .records import IdentityProfile, InMemoryRecordStore, PaymentCard

__all__ = [
	"AutofillManager",
	"SubmittedForm",
	"Settings",
	"get_settings",
	"ContractViolationError",
	"FillwiseError",
	"IdentifierOverflowError",
	"SectionBoundsError",
	"UnknownIdentifierError",
	"IdentifierCodec",
	"SuggestionList",
	"CachedForm",
	"FieldType",
	"FormCache",
	"LiveField",
	"LiveForm",
	"IdentityProfile",
	"InMemoryRecordStore",
	"PaymentCard",
]
