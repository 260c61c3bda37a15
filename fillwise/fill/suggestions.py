"""Building the suggestion list shown for a queried field."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NamedTuple, Sequence, Set, Tuple

from ..forms.fields import CachedForm, LiveField
from ..forms.types import FieldType
from ..records.labels import create_inferred_labels
from ..records.models import IdentityProfile, PaymentCard
from .ids import IdentifierCodec
from .values import display_value

CARD_LABEL_PREFIX = "*"
WARNING_ID = -1

WARNING_FORM_DISABLED = "This webpage has disabled automatic filling for this form."
WARNING_INSECURE_CONNECTION = (
    "Automatic credit card filling is disabled because this form does not use a secure connection."
)


class Suggestion(NamedTuple):
    value: str
    label: str
    icon: str
    unique_id: int


@dataclass
class SuggestionList:
    """Four parallel sequences; entry ``i`` of each describes one suggestion."""

    values: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    icons: List[str] = field(default_factory=list)
    unique_ids: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        sizes = {len(self.values), len(self.labels), len(self.icons), len(self.unique_ids)}
        if len(sizes) > 1:
            raise ValueError("Suggestion sequences must have equal lengths")

    def __len__(self) -> int:
        return len(self.values)

    def __bool__(self) -> bool:
        return bool(self.values)

    def __iter__(self) -> Iterator[Suggestion]:
        for entry in zip(self.values, self.labels, self.icons, self.unique_ids):
            yield Suggestion(*entry)

    def append(self, value: str, label: str, icon: str, unique_id: int) -> None:
        self.values.append(value)
        self.labels.append(label)
        self.icons.append(icon)
        self.unique_ids.append(unique_id)

    @classmethod
    def from_suggestions(cls, suggestions: Sequence[Suggestion]) -> "SuggestionList":
        result = cls()
        for suggestion in suggestions:
            result.append(*suggestion)
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "values": list(self.values),
            "labels": list(self.labels),
            "icons": list(self.icons),
            "unique_ids": list(self.unique_ids),
        }


def _starts_with(text: str, prefix: str) -> bool:
    return text.casefold().startswith(prefix.casefold())


def profile_suggestions(
    profiles: Sequence[IdentityProfile],
    form: CachedForm,
    live_field: LiveField,
    field_type: FieldType,
    codec: IdentifierCodec,
) -> SuggestionList:
    """Suggest profiles whose stored text for ``field_type`` extends the typed prefix."""

    matched: List[IdentityProfile] = []
    result = SuggestionList()
    for profile in profiles:
        text = profile.field_text(field_type)
        if text and _starts_with(text, live_field.value):
            matched.append(profile)
            result.values.append(text)
            result.unique_ids.append(codec.pack(None, profile.guid))

    result.labels.extend(create_inferred_labels(matched, form.field_types, field_type, minimal_fields=1))
    # Profile suggestions carry no icons.
    result.icons.extend([""] * len(matched))
    return result


def card_suggestions(
    cards: Sequence[PaymentCard],
    live_field: LiveField,
    field_type: FieldType,
    codec: IdentifierCodec,
) -> SuggestionList:
    """Suggest cards; numbers are shown masked and labeled with their last four digits."""

    result = SuggestionList()
    for card in cards:
        text = card.field_text(field_type)
        if not text or not _starts_with(text, live_field.value):
            continue
        # Numbers too short to mask have nothing safe to show.
        value = display_value(card, field_type)
        if not value:
            continue
        last_four = card.last_four()
        result.append(
            value,
            CARD_LABEL_PREFIX + last_four if last_four else "",
            card.network_kind(),
            codec.pack(card.guid, None),
        )
    return result


def remove_duplicate_suggestions(suggestions: SuggestionList) -> SuggestionList:
    """Drop entries whose (value, label) repeats an earlier one, keeping order."""

    seen: Set[Tuple[str, str]] = set()
    unique: List[Suggestion] = []
    for suggestion in suggestions:
        key = (suggestion.value, suggestion.label)
        if key in seen:
            continue
        seen.add(key)
        unique.append(suggestion)
    return SuggestionList.from_suggestions(unique)


def blank_annotations(suggestions: SuggestionList) -> SuggestionList:
    """Clear labels and icons, leaving a plain autocomplete-style list."""

    return SuggestionList(
        values=list(suggestions.values),
        labels=[""] * len(suggestions),
        icons=[""] * len(suggestions),
        unique_ids=list(suggestions.unique_ids),
    )


def warning_suggestion(message: str) -> SuggestionList:
    return SuggestionList(values=[message], labels=[""], icons=[""], unique_ids=[WARNING_ID])


__all__ = [
    "CARD_LABEL_PREFIX",
    "WARNING_FORM_DISABLED",
    "WARNING_ID",
    "WARNING_INSECURE_CONNECTION",
    "Suggestion",
    "SuggestionList",
    "blank_annotations",
    "card_suggestions",
    "profile_suggestions",
    "remove_duplicate_suggestions",
    "warning_suggestion",
]
