"""Per-document orchestration of parsing, suggesting and filling forms."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, Sequence, TypeVar, Union

from .config import Settings, get_settings
from .errors import ContractViolationError
from .fill.ids import IdentifierCodec
from .fill.suggestions import (
    WARNING_FORM_DISABLED,
    WARNING_INSECURE_CONNECTION,
    SuggestionList,
    blank_annotations,
    card_suggestions,
    profile_suggestions,
    remove_duplicate_suggestions,
    warning_suggestion,
)
from .fill.values import fill_field
from .forms.cache import FormCache
from .forms.classification import ClassificationEntry, FieldClassifier, apply_classification
from .forms.fields import CachedForm, LiveField, LiveForm
from .forms.matching import align_fields, section_is_autofilled
from .forms.sections import find_section_bounds
from .forms.types import FieldTypeGroup
from .records.models import IdentityProfile, PaymentCard
from .records.store import RecordStore, find_card, find_profile

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SubmittedForm:
    """What the upload collaborator learns about a submitted form."""

    form: CachedForm
    cached: Optional[CachedForm]
    was_autofilled: bool


class AutofillManager:
    """Owns the form cache of one document context.

    The manager is synchronous and single threaded. ``reset()`` must be called on
    navigation; afterwards every lookup for forms of the previous page reports
    "not found".
    """

    def __init__(
        self,
        store: RecordStore,
        codec: IdentifierCodec,
        *,
        settings: Optional[Settings] = None,
        classifier: Optional[FieldClassifier] = None,
        upload: Optional[Callable[[SubmittedForm], None]] = None,
    ) -> None:
        self._store = store
        self._codec = codec
        self._settings = settings or get_settings()
        self._classifier = classifier
        self._upload = upload
        self._cache = FormCache()
        self._autofilled_signatures: Deque[str] = deque(maxlen=max(self._settings.autofilled_history, 1))

    @property
    def cache(self) -> FormCache:
        return self._cache

    @property
    def settings(self) -> Settings:
        return self._settings

    def _contract_violation(self, exc: ContractViolationError, fallback: T) -> T:
        if self._settings.strict_contracts:
            raise exc
        logger.error(f"Contract violation: {exc} {exc.data}")
        return fallback

    # ------------------------------------------------------------------
    # Page lifecycle
    # ------------------------------------------------------------------
    def forms_seen(self, live_forms: Sequence[LiveForm]) -> List[CachedForm]:
        """Parse and cache the forms a page reported."""

        if not self._settings.enabled:
            return []

        parsed: List[CachedForm] = []
        for live_form in live_forms:
            cached = CachedForm.from_live(live_form)
            if not cached.should_be_parsed(False, min_fields=self._settings.min_fillable_fields):
                logger.debug(f"Skipping form {live_form.name!r} with {len(live_form.fields)} fields")
                continue
            if self._classifier is not None:
                cached = apply_classification(cached, self._classifier(cached))
            self._cache.put(cached)
            parsed.append(cached)
        logger.info(f"Cached {len(parsed)} of {len(live_forms)} forms")
        return parsed

    def apply_classification(self, signature: str, entries: Sequence[ClassificationEntry]) -> Optional[CachedForm]:
        """Apply late classifier results to a cached form."""

        return self._cache.apply_classification(signature, entries)

    def reset(self) -> None:
        """Drop every cached form; called when the document navigates away."""

        self._cache.clear()

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------
    def query_suggestions(self, live_form: LiveForm, live_field: LiveField) -> SuggestionList:
        """Return suggestions for ``live_field``, or an empty list."""

        try:
            return self._query_suggestions(live_form, live_field)
        except ContractViolationError as exc:
            return self._contract_violation(exc, SuggestionList())

    def _has_records(self) -> bool:
        return bool(self._store.profiles()) or bool(self._store.cards())

    def _query_suggestions(self, live_form: LiveForm, live_field: LiveField) -> SuggestionList:
        if not self._settings.enabled or not self._has_records():
            return SuggestionList()

        located = self._cache.find_with_field(live_form, live_field)
        if located is None:
            return SuggestionList()
        form, field_index = located

        min_fields = self._settings.min_fillable_fields
        if not form.is_autofillable(False, min_fields=min_fields):
            return SuggestionList()

        field_type = form.fields[field_index].field_type
        filling_payment = field_type.is_payment
        if filling_payment:
            result = card_suggestions(self._store.cards(), live_field, field_type, self._codec)
        else:
            result = profile_suggestions(self._store.profiles(), form, live_field, field_type, self._codec)

        if not result:
            return result

        # Warn instead of suggesting when filling is disallowed here.
        if not form.is_autofillable(True, min_fields=min_fields):
            return warning_suggestion(WARNING_FORM_DISABLED)
        if filling_payment and not form.is_secure:
            return warning_suggestion(WARNING_INSECURE_CONNECTION)

        start, end = find_section_bounds(form, field_index, filling_payment)
        if section_is_autofilled(form, live_form, start, end):
            # The user is editing a filled field: behave like plain autocomplete.
            result = blank_annotations(result)
        return remove_duplicate_suggestions(result)

    # ------------------------------------------------------------------
    # Filling
    # ------------------------------------------------------------------
    def fill_form(self, live_form: LiveForm, live_field: LiveField, unique_id: int) -> Optional[LiveForm]:
        """Fill the section around ``live_field`` from the record(s) named by ``unique_id``.

        Returns a new :class:`LiveForm` with zero or more values replaced, or ``None``
        when nothing could be resolved.
        """

        try:
            return self._fill_form(live_form, live_field, unique_id)
        except ContractViolationError as exc:
            return self._contract_violation(exc, None)

    def _resolve_record(self, unique_id: int) -> Optional[Union[IdentityProfile, PaymentCard]]:
        payment_id, identity_id = self._codec.unpack(unique_id)
        if payment_id and identity_id:
            raise ContractViolationError(
                "Suggestion id names both a card and a profile",
                data={"unique_id": unique_id},
            )

        profile = find_profile(self._store, identity_id)
        if identity_id and profile is None:
            logger.warning(f"Profile {identity_id} is no longer stored")
        card = find_card(self._store, payment_id)
        if payment_id and card is None:
            logger.warning(f"Card {payment_id} is no longer stored")
        return profile or card

    def _fill_form(self, live_form: LiveForm, live_field: LiveField, unique_id: int) -> Optional[LiveForm]:
        if not self._settings.enabled or not self._has_records():
            return None

        located = self._cache.find_with_field(live_form, live_field)
        if located is None:
            return None
        form, field_index = located

        record = self._resolve_record(unique_id)
        if record is None:
            return None
        filling_payment = isinstance(record, PaymentCard)

        start, end = find_section_bounds(form, field_index, filling_payment)
        result = live_form.copy()

        if section_is_autofilled(form, live_form, start, end):
            # Only refill the field being edited; siblings may carry user edits.
            live_index = result.index_of(live_field)
            cached = form.fields[field_index]
            if live_index is not None and cached.group is not FieldTypeGroup.NO_GROUP:
                result.fields[live_index] = fill_field(record, cached.field_type, result.fields[live_index])
            logger.debug(f"Section [{start}, {end}) already filled; refilled {live_field.name!r} only")
            return result

        filled = 0
        for pair in align_fields(form.fields, result.fields, start, end):
            cached = form.fields[pair.cached_index]
            if cached.group is FieldTypeGroup.NO_GROUP:
                continue
            result.fields[pair.live_index] = fill_field(record, cached.field_type, result.fields[pair.live_index])
            filled += 1

        self._autofilled_signatures.appendleft(form.signature)
        logger.info(f"Filled {filled} fields in section [{start}, {end}) of form {form.signature}")
        return result

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def was_recently_autofilled(self, signature: str) -> bool:
        """True if ``signature`` is among the most recently autofilled forms."""

        return signature in self._autofilled_signatures

    def form_submitted(self, live_form: LiveForm) -> Optional[SubmittedForm]:
        """Identify a submitted form and hand it to the upload collaborator."""

        if not self._settings.enabled or not live_form.user_submitted:
            return None

        submitted = CachedForm.from_live(live_form)
        if not submitted.should_be_parsed(True, min_fields=self._settings.min_fillable_fields):
            return None

        cached = self._cache.find(live_form)
        if cached is None:
            logger.debug(f"Submitted form {live_form.name!r} was never cached")
        signature = cached.signature if cached is not None else submitted.signature
        record = SubmittedForm(
            form=submitted,
            cached=cached,
            was_autofilled=self.was_recently_autofilled(signature),
        )
        if self._upload is not None:
            self._upload(record)
        return record


__all__ = ["AutofillManager", "SubmittedForm"]
