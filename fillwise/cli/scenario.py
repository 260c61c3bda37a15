"""Loading JSON scenario files for the CLI.

A scenario describes one page state::

    {
        "records": {"profiles": [...], "cards": [...]},
        "cached_form": {"name": "checkout", "source_url": "https://...", "fields": [
            {"name": "cc", "label": "Card", "type": "text", "field_type": "credit_card_number"}
        ]},
        "live_form": {...}
    }

``cached_form`` fields carry their classified ``field_type``. ``live_form`` is the
form as the page reports it now and defaults to the cached form itself.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional

from ..config import Settings
from ..fill.ids import IdentifierCodec
from ..forms.classification import ClassificationEntry
from ..forms.fields import LiveField, LiveForm
from ..forms.types import FieldType
from ..manager import AutofillManager
from ..records.store import InMemoryRecordStore


@dataclass
class Scenario:
    store: InMemoryRecordStore
    cached_form: LiveForm
    classification: List[ClassificationEntry]
    live_form: LiveForm

    def build_manager(self, settings: Optional[Settings] = None) -> AutofillManager:
        manager = AutofillManager(self.store, IdentifierCodec(), settings=settings)
        for cached in manager.forms_seen([self.cached_form]):
            manager.apply_classification(cached.signature, self.classification)
        return manager

    def live_field(self, name: str) -> LiveField:
        for candidate in self.live_form.fields:
            if candidate.name == name:
                return candidate
        raise KeyError(f"Live form has no field named {name!r}")


def _classification(payload: Mapping[str, Any], form: LiveForm) -> List[ClassificationEntry]:
    entries: List[ClassificationEntry] = []
    for raw, live_field in zip(payload.get("fields") or (), form.fields):
        field_type = raw.get("field_type") if isinstance(raw, Mapping) else None
        if field_type:
            entries.append(ClassificationEntry(live_field.identity.signature, FieldType.parse(field_type)))
    return entries


def load_scenario(path: Path) -> Scenario:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping) or "cached_form" not in payload:
        raise ValueError("Scenario must be an object with a 'cached_form'")

    cached_payload = payload["cached_form"]
    cached_form = LiveForm.from_dict(cached_payload)
    live_payload = payload.get("live_form")
    if live_payload:
        # The live snapshot inherits the form-level attributes it does not override.
        inherited = {key: cached_payload.get(key) for key in ("name", "source_url", "action", "method")}
        live_form = LiveForm.from_dict({**inherited, **live_payload})
    else:
        live_form = cached_form.copy()
    return Scenario(
        store=InMemoryRecordStore.from_dict(payload.get("records") or {}),
        cached_form=cached_form,
        classification=_classification(cached_payload, cached_form),
        live_form=live_form,
    )


__all__ = ["Scenario", "load_scenario"]
