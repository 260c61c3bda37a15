"""Packing a pair of record identifiers into one 32-bit integer.

Suggestion ids cross into the page as plain integers. The payment record id rides
in the high 16 bits and the identity record id in the low 16 bits; each identifier
string is first mapped to a small integer handed out by an
:class:`IdentifierCodec`. Zero means "no record".
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..errors import IdentifierOverflowError, UnknownIdentifierError

HALF_BITS = 16
HALF_MASK = (1 << HALF_BITS) - 1
ABSENT = 0
INT32_MAX = (1 << 31) - 1


class IdentifierCodec:
    """Bidirectional ``identifier <-> small integer`` memo plus the 16/16 packing.

    Mappings live as long as the codec and never shrink, so an integer handed out
    once keeps decoding to the same identifier. Construct one per process (or per
    owner of the ids) and pass it by reference.
    """

    def __init__(self) -> None:
        self._next_id = 1
        self._ids: Dict[str, int] = {}
        self._identifiers: Dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._ids)

    def to_int(self, identifier: Optional[str]) -> int:
        if not identifier:
            return ABSENT
        known = self._ids.get(identifier)
        if known is not None:
            return known
        if self._next_id > HALF_MASK:
            raise IdentifierOverflowError(
                "Identifier space exhausted",
                data={"identifier": identifier, "limit": HALF_MASK},
            )
        value = self._next_id
        self._next_id += 1
        self._ids[identifier] = value
        self._identifiers[value] = identifier
        return value

    def to_identifier(self, value: int) -> Optional[str]:
        if value == ABSENT:
            return None
        identifier = self._identifiers.get(value)
        if identifier is None:
            raise UnknownIdentifierError(f"No identifier was issued for {value}", data={"value": value})
        return identifier

    def pack(self, payment_id: Optional[str], identity_id: Optional[str]) -> int:
        high = self.to_int(payment_id)
        low = self.to_int(identity_id)
        packed = (high << HALF_BITS) | low
        # Ids cross into the page as signed 32-bit integers.
        if packed > INT32_MAX:
            packed -= 1 << (2 * HALF_BITS)
        return packed

    def unpack(self, packed: int) -> Tuple[Optional[str], Optional[str]]:
        high = (packed >> HALF_BITS) & HALF_MASK
        low = packed & HALF_MASK
        return self.to_identifier(high), self.to_identifier(low)


__all__ = ["ABSENT", "HALF_BITS", "HALF_MASK", "INT32_MAX", "IdentifierCodec"]
