"""Applying externally computed field types to cached forms."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Literal, Mapping, Protocol, Sequence

from .fields import CachedField, CachedForm
from .types import FieldType

logger = logging.getLogger(__name__)

ClassificationSource = Literal["heuristic", "server"]


@dataclass(frozen=True, slots=True)
class ClassificationEntry:
    """One ``field signature -> type`` verdict from the classifier."""

    field_signature: str
    field_type: FieldType
    source: ClassificationSource = "server"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ClassificationEntry":
        source = payload.get("source", "server")
        if source not in {"heuristic", "server"}:
            raise ValueError(f"Unsupported classification source: {source!r}")
        return cls(
            field_signature=str(payload["field_signature"]),
            field_type=FieldType.parse(str(payload["field_type"])),
            source=source,
        )


class FieldClassifier(Protocol):
    """Anything that can type the fields of a freshly parsed form."""

    def __call__(self, form: CachedForm) -> Sequence[ClassificationEntry]:
        ...


def _reclassify(cached: CachedField, entry: ClassificationEntry) -> CachedField:
    if entry.source == "heuristic":
        heuristic_type = entry.field_type
        server_type = cached.server_type
    else:
        heuristic_type = cached.heuristic_type
        server_type = entry.field_type
    # Server verdicts win over local heuristics whenever they carry a type.
    effective = server_type if server_type.is_known else heuristic_type
    return replace(
        cached,
        field_type=effective,
        heuristic_type=heuristic_type,
        server_type=server_type,
    )


def apply_classification(form: CachedForm, entries: Sequence[ClassificationEntry]) -> CachedForm:
    """Return a copy of ``form`` with ``entries`` applied by field signature.

    Entries are consumed in order, so repeated signatures (two unnamed text boxes,
    say) are assigned to successive fields. Fields without an entry keep their
    current type.
    """

    pending: Dict[str, List[ClassificationEntry]] = {}
    for entry in entries:
        pending.setdefault(entry.field_signature, []).append(entry)

    fields: List[CachedField] = []
    applied = 0
    for cached in form.fields:
        queue = pending.get(cached.signature)
        if queue:
            fields.append(_reclassify(cached, queue.pop(0)))
            applied += 1
        else:
            fields.append(cached)

    leftover = sum(len(queue) for queue in pending.values())
    if leftover:
        logger.debug(f"Ignored {leftover} classification entries with no matching field in form {form.signature}")
    logger.debug(f"Applied {applied} classification entries to form {form.signature}")
    return form.with_fields(fields)


__all__ = [
    "ClassificationEntry",
    "ClassificationSource",
    "FieldClassifier",
    "apply_classification",
]
