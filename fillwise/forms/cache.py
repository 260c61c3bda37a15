"""Per-document cache of classified forms."""
from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .classification import ClassificationEntry, apply_classification
from .fields import CachedForm, LiveField, LiveForm

logger = logging.getLogger(__name__)


class FormCache:
    """Classified forms for one document context, keyed by structural signature.

    The cache never merges: a reparse replaces the entry wholesale and navigation
    drops every entry at once via :meth:`clear`.
    """

    def __init__(self) -> None:
        self._forms: Dict[str, CachedForm] = {}

    def __len__(self) -> int:
        return len(self._forms)

    def __iter__(self) -> Iterator[CachedForm]:
        return iter(list(self._forms.values()))

    def __contains__(self, signature: object) -> bool:
        return signature in self._forms

    def put(self, form: CachedForm) -> None:
        signature = form.signature
        if signature in self._forms:
            # Re-insert so the replacement counts as the most recent entry.
            del self._forms[signature]
            logger.debug(f"Replacing cached form {signature}")
        self._forms[signature] = form

    def get(self, signature: str) -> Optional[CachedForm]:
        return self._forms.get(signature)

    def find(self, live_form: LiveForm) -> Optional[CachedForm]:
        """Return the cached counterpart of ``live_form``.

        An exact structural signature match wins. Otherwise the most recently
        cached form with the same name, source URL and action is returned, which
        lets forms whose fields drifted after parsing still reconcile.
        """

        exact = self._forms.get(live_form.signature)
        if exact is not None:
            return exact

        for cached in reversed(list(self._forms.values())):
            if cached.form_key == live_form.form_key:
                logger.debug(f"Matched drifted form {live_form.name!r} to cached form {cached.signature}")
                return cached
        return None

    def find_with_field(self, live_form: LiveForm, live_field: LiveField) -> Optional[Tuple[CachedForm, int]]:
        """Locate the cached form and the index of the field the user is on."""

        cached = self.find(live_form)
        if cached is None:
            logger.debug(f"No cached form for {live_form.name!r} at {live_form.source_url}")
            return None
        if not cached.autofill_count:
            return None
        index = cached.index_of(live_field)
        if index is None:
            logger.debug(f"Field {live_field.name!r} not present in cached form {cached.signature}")
            return None
        return cached, index

    def apply_classification(self, signature: str, entries: Sequence[ClassificationEntry]) -> Optional[CachedForm]:
        """Replace the cached form ``signature`` with a reclassified copy."""

        cached = self._forms.get(signature)
        if cached is None:
            logger.debug(f"Dropping classification for unknown form {signature}")
            return None
        updated = apply_classification(cached, entries)
        self._forms[signature] = updated
        return updated

    def signatures(self) -> List[str]:
        return list(self._forms)

    def clear(self) -> None:
        if self._forms:
            logger.debug(f"Clearing {len(self._forms)} cached forms")
        self._forms.clear()


__all__ = ["FormCache"]
