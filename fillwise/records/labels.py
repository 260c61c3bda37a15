"""Inferring short labels that tell otherwise identical profile suggestions apart."""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from ..forms.types import FieldType, equivalent_type
from .models import IdentityProfile

LABEL_SEPARATOR = ", "

DEFAULT_LABEL_TYPES: Tuple[FieldType, ...] = (
    FieldType.ADDRESS_HOME_LINE1,
    FieldType.ADDRESS_HOME_CITY,
    FieldType.ADDRESS_HOME_STATE,
    FieldType.ADDRESS_HOME_ZIP,
    FieldType.EMAIL_ADDRESS,
    FieldType.PHONE_HOME_WHOLE_NUMBER,
    FieldType.NAME_FULL,
    FieldType.COMPANY_NAME,
)


def _label_types(form_field_types: Sequence[FieldType], main_type: FieldType) -> List[FieldType]:
    excluded = equivalent_type(main_type)
    ordered: List[FieldType] = []
    for field_type in list(form_field_types) + list(DEFAULT_LABEL_TYPES):
        candidate = equivalent_type(field_type)
        if not candidate.is_known or candidate.is_payment or candidate is excluded:
            continue
        if candidate not in ordered:
            ordered.append(candidate)
    return ordered


def _label_values(profile: IdentityProfile, label_types: Sequence[FieldType]) -> List[str]:
    values: List[str] = []
    for field_type in label_types:
        text = profile.field_text(field_type).strip()
        if text and text not in values:
            values.append(text)
    return values


def create_inferred_labels(
    profiles: Sequence[IdentityProfile],
    form_field_types: Sequence[FieldType],
    main_type: FieldType,
    minimal_fields: int = 1,
) -> List[str]:
    """Return one label per profile, in order.

    Label fields come from the form's own field types first (so the label shows what
    the user is about to fill) and then a default order. Every label starts with
    ``minimal_fields`` values; profiles whose suggestion value and label still
    collide get one more value at a time until they differ or run out.
    """

    label_types = _label_types(form_field_types, main_type)
    candidates = [_label_values(profile, label_types) for profile in profiles]
    main_values = [profile.field_text(main_type) for profile in profiles]
    counts = [max(minimal_fields, 0)] * len(profiles)

    while True:
        labels = [LABEL_SEPARATOR.join(values[:count]) for values, count in zip(candidates, counts)]
        collisions: Dict[Tuple[str, str], List[int]] = defaultdict(list)
        for index, label in enumerate(labels):
            collisions[(main_values[index].lower(), label)].append(index)

        grew = False
        for members in collisions.values():
            if len(members) < 2:
                continue
            for index in members:
                if counts[index] < len(candidates[index]):
                    counts[index] += 1
                    grew = True
        if not grew:
            return labels


__all__ = ["DEFAULT_LABEL_TYPES", "LABEL_SEPARATOR", "create_inferred_labels"]
