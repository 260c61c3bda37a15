"""Turning a record and a field type into the text placed in a field."""
from __future__ import annotations

import logging
from typing import Optional

from ..forms.fields import LiveField
from ..forms.types import ControlKind, FieldType
from ..records.models import PaymentCard, Record
from .select_control import match_select_option

logger = logging.getLogger(__name__)

# Phone numbers of exactly PREFIX + SUFFIX digits may be split across two inputs
# whose max lengths give the segment away.
PHONE_PREFIX_OFFSET = 0
PHONE_PREFIX_LENGTH = 3
PHONE_SUFFIX_OFFSET = PHONE_PREFIX_LENGTH
PHONE_SUFFIX_LENGTH = 7


def split_phone_number(number: str, max_length: int) -> str:
    """Return the segment of ``number`` that fits a field of ``max_length``."""

    if len(number) != PHONE_PREFIX_LENGTH + PHONE_SUFFIX_LENGTH:
        return number
    if max_length == PHONE_PREFIX_LENGTH:
        return number[PHONE_PREFIX_OFFSET:PHONE_PREFIX_OFFSET + PHONE_PREFIX_LENGTH]
    if max_length == PHONE_SUFFIX_LENGTH:
        return number[PHONE_SUFFIX_OFFSET:PHONE_SUFFIX_OFFSET + PHONE_SUFFIX_LENGTH]
    return number


def _year_month(record: Record) -> Optional[str]:
    year = record.field_text(FieldType.CREDIT_CARD_EXP_4_DIGIT_YEAR)
    month = record.field_text(FieldType.CREDIT_CARD_EXP_MONTH)
    # A partial date is worse than none.
    if not year or not month:
        return None
    return f"{year}-{month}"


def resolve_fill_value(record: Record, field_type: FieldType, live_field: LiveField) -> Optional[str]:
    """Return the text to write into ``live_field``, or ``None`` to leave it alone."""

    if field_type.is_phone_number:
        return split_phone_number(record.field_text(field_type), live_field.max_length)

    kind = live_field.control_kind
    if kind is ControlKind.SELECT_ONE:
        choice = match_select_option(record.field_text(field_type), live_field.options, field_type)
        if choice is None:
            logger.debug(f"No option of {live_field.name!r} matches the stored {field_type.value}")
        return choice
    if kind is ControlKind.MONTH and field_type.is_expiration:
        return _year_month(record)
    if kind in (ControlKind.CHECKBOX, ControlKind.RADIO, ControlKind.HIDDEN, ControlKind.OTHER):
        return None
    return record.field_text(field_type)


def fill_field(record: Record, field_type: FieldType, live_field: LiveField) -> LiveField:
    """Return ``live_field`` with the resolved value applied, or unchanged."""

    value = resolve_fill_value(record, field_type, live_field)
    if value is None:
        return live_field
    return live_field.with_value(value)


def display_value(record: Record, field_type: FieldType) -> str:
    """Text shown in a suggestion; card numbers are masked."""

    if isinstance(record, PaymentCard) and field_type is FieldType.CREDIT_CARD_NUMBER:
        return record.masked_number()
    return record.field_text(field_type)


__all__ = [
    "PHONE_PREFIX_LENGTH",
    "PHONE_PREFIX_OFFSET",
    "PHONE_SUFFIX_LENGTH",
    "PHONE_SUFFIX_OFFSET",
    "display_value",
    "fill_field",
    "resolve_fill_value",
    "split_phone_number",
]
