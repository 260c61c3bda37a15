"""Identity and payment records plus the store contract the engine reads them through."""

from .labels import create_inferred_labels
from .models import IdentityProfile, MailingAddress, PaymentCard, PhoneParts, Record
from .store import InMemoryRecordStore, RecordKind, RecordStore, find_card, find_profile, records_of_kind

__all__ = [
    "create_inferred_labels",
    "IdentityProfile",
    "MailingAddress",
    "PaymentCard",
    "PhoneParts",
    "Record",
    "InMemoryRecordStore",
    "RecordKind",
    "RecordStore",
    "find_card",
    "find_profile",
    "records_of_kind",
]
