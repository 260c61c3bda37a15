"""Aligning a live field list against a cached one that may have drifted."""
from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence

from .fields import CachedField, CachedForm, LiveField, LiveForm


class Correspondence(NamedTuple):
    cached_index: int
    live_index: int


def align_fields(
    cached_fields: Sequence[CachedField],
    live_fields: Sequence[LiveField],
    start: int = 0,
    end: Optional[int] = None,
) -> List[Correspondence]:
    """Pair live fields with cached fields in ``cached_fields[start:end]``.

    Greedy and forward-only: each live field is paired with the first structurally
    equal cached field at or after the last match. Live fields with no match are
    skipped without consuming cached fields, so insertions and removals on either
    side are tolerated. Cached indices in the result are strictly increasing.
    """

    stop = len(cached_fields) if end is None else min(end, len(cached_fields))
    pairs: List[Correspondence] = []
    cursor = start
    for live_index, live_field in enumerate(live_fields):
        if cursor >= stop:
            break
        for cached_index in range(cursor, stop):
            if cached_fields[cached_index].matches(live_field):
                pairs.append(Correspondence(cached_index, live_index))
                cursor = cached_index + 1
                break
    return pairs


def section_is_autofilled(form: CachedForm, live_form: LiveForm, start: int, end: int) -> bool:
    """True if any live field aligned with ``form.fields[start:end]`` is autofilled."""

    for pair in align_fields(form.fields, live_form.fields, start, end):
        if live_form.fields[pair.live_index].is_autofilled:
            return True
    return False


__all__ = ["Correspondence", "align_fields", "section_is_autofilled"]
