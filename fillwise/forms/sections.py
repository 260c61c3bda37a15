"""Splitting a cached form into logical fill sections."""
from __future__ import annotations

import logging
from typing import Set, Tuple

from ..errors import SectionBoundsError
from .fields import CachedForm
from .types import FieldType, FieldTypeGroup, equivalent_type

logger = logging.getLogger(__name__)

Section = Tuple[int, int]
"""Half-open ``[start, end)`` range of field indices."""

# Forms routinely ask for several phone numbers (daytime, evening, ...) and phone/fax
# detection is noisy, so repeats of these never split a section.
_REPEATABLE_GROUPS = frozenset({FieldTypeGroup.PHONE_HOME, FieldTypeGroup.PHONE_FAX})


def find_section_bounds(form: CachedForm, field_index: int, filling_payment: bool) -> Section:
    """Return the section of ``form`` that contains the field at ``field_index``.

    A section holds only payment fields when ``filling_payment`` is true (only
    non-payment fields otherwise) and never repeats a field type, phone and fax
    numbers excepted. Fields of unknown type do not influence the boundaries.

    Raises :class:`SectionBoundsError` if the initiating field cannot be placed in
    the returned range, which means the caller asked to fill a field with the wrong
    kind of record.
    """

    start, end = 0, len(form.fields)
    seen_types: Set[FieldType] = set()
    initiating_in_section = False

    for index, cached in enumerate(form.fields):
        current_type = equivalent_type(cached.field_type)
        if not current_type.is_known:
            if index == field_index:
                initiating_in_section = True
            continue

        group = current_type.group
        already_seen = current_type in seen_types and group not in _REPEATABLE_GROUPS
        is_appropriate = (group is FieldTypeGroup.CREDIT_CARD) == filling_payment

        if already_seen or not is_appropriate:
            if initiating_in_section:
                end = index
                break

            seen_types.clear()
            if not is_appropriate:
                start = index + 1
                continue
            start = index

        seen_types.add(current_type)
        if index == field_index:
            initiating_in_section = True

    if not initiating_in_section or not start <= field_index < end:
        raise SectionBoundsError(
            "Initiating field is outside its computed section",
            data={
                "form": form.signature,
                "field_index": field_index,
                "section": (start, end),
                "filling_payment": filling_payment,
            },
        )

    logger.debug(f"Section [{start}, {end}) of form {form.signature} contains field {field_index}")
    return start, end


__all__ = ["Section", "find_section_bounds"]
