"""Live (DOM-observed) and cached (classified) form structures.

A :class:`LiveForm` is what the page reports right now, values included. A
:class:`CachedForm` is the classified snapshot taken when the page first reported
the form. Both share :class:`FieldIdentity`, the value-independent description used
to decide whether a live field and a cached field are the same control.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlparse

from .types import ControlKind, FieldType, FieldTypeGroup

MIN_FILLABLE_FIELDS = 3
"""Forms with fewer fields (or fewer typed fields) are never autofilled."""


def _digest(parts: Iterable[str]) -> str:
    return hashlib.sha1("&".join(parts).encode("utf-8")).hexdigest()[:16]


@dataclass(frozen=True, slots=True)
class FieldIdentity:
    """Structural identity of a control, independent of its current value."""

    name: str = ""
    label: str = ""
    control_kind: ControlKind = ControlKind.TEXT
    max_length: int = 0

    @property
    def signature(self) -> str:
        """Stable digest used by the classifier contract to address this field."""

        return _digest([self.name, self.control_kind.value])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "control_kind": self.control_kind.value,
            "max_length": self.max_length,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FieldIdentity":
        kind = payload.get("control_kind") or payload.get("type")
        return cls(
            name=str(payload.get("name") or ""),
            label=str(payload.get("label") or ""),
            control_kind=ControlKind.from_html(payload.get("tag"), kind),
            max_length=int(payload.get("max_length") or 0),
        )


@dataclass(frozen=True, slots=True)
class SelectOption:
    value: str
    text: str = ""


@dataclass(slots=True)
class LiveField:
    """A field as currently observed in the DOM."""

    identity: FieldIdentity
    value: str = ""
    is_autofilled: bool = False
    options: Tuple[SelectOption, ...] = ()

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def control_kind(self) -> ControlKind:
        return self.identity.control_kind

    @property
    def max_length(self) -> int:
        return self.identity.max_length

    def same_control(self, other: "LiveField") -> bool:
        return self.identity == other.identity

    def with_value(self, value: str) -> "LiveField":
        """Return a copy carrying ``value`` and flagged as autofilled."""

        return replace(self, value=value, is_autofilled=True)

    def to_dict(self) -> Dict[str, Any]:
        payload = self.identity.to_dict()
        payload["value"] = self.value
        payload["is_autofilled"] = self.is_autofilled
        if self.options:
            payload["options"] = [{"value": option.value, "text": option.text} for option in self.options]
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LiveField":
        options = tuple(
            SelectOption(value=str(option.get("value") or ""), text=str(option.get("text") or ""))
            for option in payload.get("options") or ()
            if isinstance(option, Mapping)
        )
        return cls(
            identity=FieldIdentity.from_dict(payload),
            value=str(payload.get("value") or ""),
            is_autofilled=bool(payload.get("is_autofilled", False)),
            options=options,
        )


@dataclass(slots=True)
class LiveForm:
    """Snapshot of a form as the page reports it."""

    fields: List[LiveField] = field(default_factory=list)
    name: str = ""
    source_url: str = ""
    action: str = ""
    method: str = "post"
    user_submitted: bool = True

    @property
    def form_key(self) -> Tuple[str, str, str]:
        return (self.name, self.source_url, self.action)

    @property
    def signature(self) -> str:
        return form_signature(self.name, self.action, (item.identity for item in self.fields))

    def index_of(self, live_field: LiveField) -> Optional[int]:
        for index, candidate in enumerate(self.fields):
            if candidate.same_control(live_field):
                return index
        return None

    def copy(self) -> "LiveForm":
        return replace(self, fields=list(self.fields))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "source_url": self.source_url,
            "action": self.action,
            "method": self.method,
            "user_submitted": self.user_submitted,
            "fields": [item.to_dict() for item in self.fields],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LiveForm":
        return cls(
            fields=[LiveField.from_dict(item) for item in payload.get("fields") or ()],
            name=str(payload.get("name") or ""),
            source_url=str(payload.get("source_url") or ""),
            action=str(payload.get("action") or ""),
            method=str(payload.get("method") or "post"),
            user_submitted=bool(payload.get("user_submitted", True)),
        )


@dataclass(frozen=True, slots=True)
class CachedField:
    """A classified field. Never mutated; reclassification builds a new one."""

    identity: FieldIdentity
    field_type: FieldType = FieldType.UNKNOWN
    heuristic_type: FieldType = FieldType.UNKNOWN
    server_type: FieldType = FieldType.NO_SERVER_DATA
    is_autofilled: bool = False

    @property
    def group(self) -> FieldTypeGroup:
        return self.field_type.group

    @property
    def signature(self) -> str:
        return self.identity.signature

    def matches(self, live_field: LiveField) -> bool:
        return self.identity == live_field.identity

    @classmethod
    def from_live(cls, live_field: LiveField, field_type: FieldType = FieldType.UNKNOWN) -> "CachedField":
        return cls(
            identity=live_field.identity,
            field_type=field_type,
            heuristic_type=field_type,
            is_autofilled=live_field.is_autofilled,
        )


def form_signature(name: str, action: str, identities: Iterable[FieldIdentity]) -> str:
    parts = [action, name]
    for identity in identities:
        parts.append(f"{identity.name}:{identity.label}:{identity.control_kind.value}:{identity.max_length}")
    return _digest(parts)


@dataclass(frozen=True, slots=True)
class CachedForm:
    """Ordered, classified fields of a form as parsed when the page loaded."""

    fields: Tuple[CachedField, ...] = ()
    name: str = ""
    source_url: str = ""
    action: str = ""
    method: str = "post"

    @property
    def signature(self) -> str:
        return form_signature(self.name, self.action, (item.identity for item in self.fields))

    @property
    def form_key(self) -> Tuple[str, str, str]:
        return (self.name, self.source_url, self.action)

    @property
    def autofill_count(self) -> int:
        return sum(1 for item in self.fields if item.field_type.is_known)

    @property
    def field_types(self) -> List[FieldType]:
        return [item.field_type for item in self.fields]

    @property
    def is_secure(self) -> bool:
        return urlparse(self.source_url).scheme == "https"

    def __len__(self) -> int:
        return len(self.fields)

    def index_of(self, live_field: LiveField) -> Optional[int]:
        for index, cached in enumerate(self.fields):
            if cached.matches(live_field):
                return index
        return None

    def should_be_parsed(self, require_post: bool, *, min_fields: int = MIN_FILLABLE_FIELDS) -> bool:
        if len(self.fields) < min_fields:
            return False
        # Search boxes are never worth filling.
        if urlparse(self.action).path == "/search":
            return False
        return not require_post or self.method.lower() == "post"

    def is_autofillable(self, require_post: bool, *, min_fields: int = MIN_FILLABLE_FIELDS) -> bool:
        if self.autofill_count < min_fields:
            return False
        return self.should_be_parsed(require_post, min_fields=min_fields)

    def with_fields(self, fields: Sequence[CachedField]) -> "CachedForm":
        return replace(self, fields=tuple(fields))

    @classmethod
    def from_live(cls, live_form: LiveForm) -> "CachedForm":
        return cls(
            fields=tuple(CachedField.from_live(item) for item in live_form.fields),
            name=live_form.name,
            source_url=live_form.source_url,
            action=live_form.action,
            method=live_form.method,
        )


__all__ = [
    "MIN_FILLABLE_FIELDS",
    "CachedField",
    "CachedForm",
    "FieldIdentity",
    "LiveField",
    "LiveForm",
    "SelectOption",
    "form_signature",
]
