"""Record store contract and an in-memory implementation."""
from __future__ import annotations

from typing import Any, Iterable, List, Literal, Mapping, Optional, Protocol, Sequence, Union

from .models import IdentityProfile, PaymentCard

RecordKind = Literal["identity", "payment"]


class RecordStore(Protocol):
    """Read-only view over the user's saved records, in display order."""

    def profiles(self) -> Sequence[IdentityProfile]:
        ...

    def cards(self) -> Sequence[PaymentCard]:
        ...


def records_of_kind(store: RecordStore, kind: RecordKind) -> Sequence[Union[IdentityProfile, PaymentCard]]:
    if kind == "identity":
        return store.profiles()
    if kind == "payment":
        return store.cards()
    raise ValueError(f"Unsupported record kind: {kind!r}")


def find_profile(store: RecordStore, guid: Optional[str]) -> Optional[IdentityProfile]:
    if not guid:
        return None
    return next((profile for profile in store.profiles() if profile.guid == guid), None)


def find_card(store: RecordStore, guid: Optional[str]) -> Optional[PaymentCard]:
    if not guid:
        return None
    return next((card for card in store.cards() if card.guid == guid), None)


class InMemoryRecordStore:
    """Holds records in lists; handy for tests, the CLI and embedding."""

    def __init__(
        self,
        profiles: Optional[Iterable[IdentityProfile]] = None,
        cards: Optional[Iterable[PaymentCard]] = None,
    ) -> None:
        self._profiles: List[IdentityProfile] = list(profiles or ())
        self._cards: List[PaymentCard] = list(cards or ())

    def profiles(self) -> Sequence[IdentityProfile]:
        return tuple(self._profiles)

    def cards(self) -> Sequence[PaymentCard]:
        return tuple(self._cards)

    def add_profile(self, profile: IdentityProfile) -> None:
        self._profiles.append(profile)

    def add_card(self, card: PaymentCard) -> None:
        self._cards.append(card)

    def remove(self, guid: str) -> bool:
        before = len(self._profiles) + len(self._cards)
        self._profiles = [profile for profile in self._profiles if profile.guid != guid]
        self._cards = [card for card in self._cards if card.guid != guid]
        return len(self._profiles) + len(self._cards) != before

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "InMemoryRecordStore":
        return cls(
            profiles=[IdentityProfile.from_dict(item) for item in payload.get("profiles") or ()],
            cards=[PaymentCard.from_dict(item) for item in payload.get("cards") or ()],
        )


__all__ = [
    "InMemoryRecordStore",
    "RecordKind",
    "RecordStore",
    "find_card",
    "find_profile",
    "records_of_kind",
]
