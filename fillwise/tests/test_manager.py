from __future__ import annotations

import logging
from typing import Dict, List

import pytest

from fillwise.config import Settings
from fillwise.errors import SectionBoundsError
from fillwise.fill.ids import IdentifierCodec
from fillwise.fill.suggestions import WARNING_FORM_DISABLED, WARNING_ID, WARNING_INSECURE_CONNECTION
from fillwise.forms.classification import ClassificationEntry
from fillwise.forms.fields import CachedForm, FieldIdentity, LiveField, LiveForm
from fillwise.forms.types import ControlKind, FieldType
from fillwise.manager import AutofillManager, SubmittedForm
from fillwise.records.models import IdentityProfile, MailingAddress, PaymentCard
from fillwise.records.store import InMemoryRecordStore

CHECKOUT_URL = "https://shop.example/checkout"

FIELD_TYPES: Dict[str, FieldType] = {
    "name": FieldType.NAME_FULL,
    "city": FieldType.ADDRESS_HOME_CITY,
    "phone_prefix": FieldType.PHONE_HOME_CITY_AND_NUMBER,
    "phone_suffix": FieldType.PHONE_HOME_CITY_AND_NUMBER,
    "cardnumber": FieldType.CREDIT_CARD_NUMBER,
    "expmonth": FieldType.CREDIT_CARD_EXP_MONTH,
    "expyear": FieldType.CREDIT_CARD_EXP_4_DIGIT_YEAR,
}

_IDENTITIES: Dict[str, FieldIdentity] = {
    "name": FieldIdentity(name="name", label="Full name"),
    "city": FieldIdentity(name="city", label="City"),
    "phone_prefix": FieldIdentity(name="phone_prefix", control_kind=ControlKind.TEL, max_length=3),
    "phone_suffix": FieldIdentity(name="phone_suffix", control_kind=ControlKind.TEL, max_length=7),
    "cardnumber": FieldIdentity(name="cardnumber", label="Card number"),
    "expmonth": FieldIdentity(name="expmonth"),
    "expyear": FieldIdentity(name="expyear"),
}


def classify(form: CachedForm) -> List[ClassificationEntry]:
    return [
        ClassificationEntry(item.signature, FIELD_TYPES[item.identity.name])
        for item in form.fields
        if item.identity.name in FIELD_TYPES
    ]


def _checkout(*names: str, url: str = CHECKOUT_URL, form_name: str = "checkout", method: str = "post") -> LiveForm:
    names = names or tuple(_IDENTITIES)
    return LiveForm(
        fields=[LiveField(identity=_IDENTITIES[name]) for name in names],
        name=form_name,
        source_url=url,
        action=url + "/submit",
        method=method,
    )


def _field(form: LiveForm, name: str) -> LiveField:
    return next(item for item in form.fields if item.name == name)


def _values(form: LiveForm) -> Dict[str, str]:
    return {item.name: item.value for item in form.fields}


def _settings(**overrides) -> Settings:
    values = dict(enabled=True, strict_contracts=True, log_level="DEBUG", min_fillable_fields=3, autofilled_history=3)
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def profile() -> IdentityProfile:
    return IdentityProfile(
        first_name="Ada",
        last_name="Lovelace",
        phone="555-123-4567",
        address=MailingAddress(city="London"),
    )


@pytest.fixture
def card() -> PaymentCard:
    return PaymentCard(name_on_card="Ada Lovelace", number="4111111111111111", expiration_month=3, expiration_year=2027)


@pytest.fixture
def store(profile, card) -> InMemoryRecordStore:
    return InMemoryRecordStore([profile], [card])


@pytest.fixture
def uploads() -> List[SubmittedForm]:
    return []


@pytest.fixture
def manager(store, uploads) -> AutofillManager:
    return AutofillManager(store, IdentifierCodec(), settings=_settings(), classifier=classify, upload=uploads.append)


def test_forms_seen_caches_and_classifies(manager):
    parsed = manager.forms_seen([_checkout(), _checkout("name", "city", form_name="tiny")])

    assert len(parsed) == 1
    assert len(manager.cache) == 1
    assert parsed[0].field_types == [FIELD_TYPES[name] for name in _IDENTITIES]


def test_disabled_manager_does_nothing(store):
    manager = AutofillManager(store, IdentifierCodec(), settings=_settings(enabled=False), classifier=classify)
    live = _checkout()

    assert manager.forms_seen([live]) == []
    assert not manager.query_suggestions(live, _field(live, "name"))


def test_profile_suggestions_for_identity_field(manager, profile):
    live = _checkout()
    manager.forms_seen([live])

    suggestions = manager.query_suggestions(live, _field(live, "name"))

    assert suggestions.values == ["Ada Lovelace"]
    assert suggestions.labels == ["London"]
    assert suggestions.icons == [""]
    assert suggestions.unique_ids == [1]


def test_card_suggestions_on_secure_page(manager, card):
    live = _checkout()
    manager.forms_seen([live])

    suggestions = manager.query_suggestions(live, _field(live, "cardnumber"))

    assert suggestions.values == ["************1111"]
    assert suggestions.labels == ["*1111"]
    assert suggestions.icons == ["visa"]


def test_card_suggestions_replaced_by_warning_on_insecure_page(manager):
    live = _checkout(url="http://shop.example/checkout")
    manager.forms_seen([live])

    suggestions = manager.query_suggestions(live, _field(live, "cardnumber"))

    assert suggestions.values == [WARNING_INSECURE_CONNECTION]
    assert suggestions.unique_ids == [WARNING_ID]
    assert manager.query_suggestions(live, _field(live, "name")).values == ["Ada Lovelace"]


def test_get_form_gets_disabled_warning(manager):
    live = _checkout(method="get")
    manager.forms_seen([live])

    suggestions = manager.query_suggestions(live, _field(live, "name"))

    assert suggestions.values == [WARNING_FORM_DISABLED]
    assert suggestions.unique_ids == [WARNING_ID]


def test_no_suggestions_for_unknown_form_or_empty_store(store):
    manager = AutofillManager(store, IdentifierCodec(), settings=_settings(), classifier=classify)
    live = _checkout()

    assert not manager.query_suggestions(live, _field(live, "name"))

    empty = AutofillManager(InMemoryRecordStore(), IdentifierCodec(), settings=_settings(), classifier=classify)
    empty.forms_seen([live])
    assert not empty.query_suggestions(live, _field(live, "name"))


def test_fill_identity_section_leaves_payment_fields_alone(manager):
    live = _checkout()
    manager.forms_seen([live])
    name = _field(live, "name")
    unique_id = manager.query_suggestions(live, name).unique_ids[0]

    filled = manager.fill_form(live, name, unique_id)

    assert _values(filled) == {
        "name": "Ada Lovelace",
        "city": "London",
        "phone_prefix": "555",
        "phone_suffix": "1234567",
        "cardnumber": "",
        "expmonth": "",
        "expyear": "",
    }
    assert _field(filled, "city").is_autofilled
    assert not _field(filled, "cardnumber").is_autofilled
    assert _values(live)["name"] == "", "The caller's form is not modified"


def test_fill_payment_section(manager):
    live = _checkout()
    manager.forms_seen([live])
    cardnumber = _field(live, "cardnumber")
    unique_id = manager.query_suggestions(live, cardnumber).unique_ids[0]

    filled = manager.fill_form(live, cardnumber, unique_id)

    assert _values(filled)["cardnumber"] == "4111111111111111"
    assert _values(filled)["expmonth"] == "03"
    assert _values(filled)["expyear"] == "2027"
    assert _values(filled)["name"] == ""


def test_refill_of_autofilled_section_touches_only_edited_field(manager, profile):
    live = _checkout()
    manager.forms_seen([live])
    filled = manager.fill_form(live, _field(live, "name"), manager.query_suggestions(live, _field(live, "name")).unique_ids[0])

    # The user then edits two fields by hand.
    edited = filled.copy()
    for index, item in enumerate(edited.fields):
        if item.name == "name":
            edited.fields[index] = item.with_value("Ada L.")
        elif item.name == "city":
            edited.fields[index] = item.with_value("Lon")

    suggestions = manager.query_suggestions(edited, _field(edited, "city"))
    assert suggestions.labels == [""], "Editing a filled section hides labels"

    refilled = manager.fill_form(edited, _field(edited, "city"), suggestions.unique_ids[0])

    assert _values(refilled)["city"] == "London"
    assert _values(refilled)["name"] == "Ada L."


def test_refill_never_clears_unknown_typed_field(manager):
    live = _checkout()
    live.fields.insert(2, LiveField(identity=FieldIdentity(name="comment", control_kind=ControlKind.TEXTAREA)))
    manager.forms_seen([live])
    name = _field(live, "name")
    unique_id = manager.query_suggestions(live, name).unique_ids[0]
    filled = manager.fill_form(live, name, unique_id)
    assert _values(filled)["comment"] == ""

    edited = filled.copy()
    index = edited.index_of(_field(edited, "comment"))
    edited.fields[index] = LiveField(identity=edited.fields[index].identity, value="leave at door")

    refilled = manager.fill_form(edited, _field(edited, "comment"), unique_id)

    assert _values(refilled)["comment"] == "leave at door"
    assert not _field(refilled, "comment").is_autofilled
    assert _values(refilled)["name"] == "Ada Lovelace"


def test_fill_reconciles_drifted_form(manager):
    manager.forms_seen([_checkout()])
    drifted = _checkout("name", "phone_prefix", "phone_suffix", "cardnumber", "expmonth", "expyear")
    name = _field(drifted, "name")
    unique_id = manager.query_suggestions(drifted, name).unique_ids[0]

    filled = manager.fill_form(drifted, name, unique_id)

    assert _values(filled) == {
        "name": "Ada Lovelace",
        "phone_prefix": "555",
        "phone_suffix": "1234567",
        "cardnumber": "",
        "expmonth": "",
        "expyear": "",
    }


def test_reset_makes_old_forms_unknown(manager):
    live = _checkout()
    manager.forms_seen([live])
    name = _field(live, "name")
    unique_id = manager.query_suggestions(live, name).unique_ids[0]

    manager.reset()

    assert not manager.query_suggestions(live, name)
    assert manager.fill_form(live, name, unique_id) is None


def test_removed_record_fills_nothing(manager, store, profile, caplog):
    live = _checkout()
    manager.forms_seen([live])
    name = _field(live, "name")
    unique_id = manager.query_suggestions(live, name).unique_ids[0]
    store.remove(profile.guid)

    with caplog.at_level(logging.WARNING, logger="fillwise.manager"):
        assert manager.fill_form(live, name, unique_id) is None

    assert profile.guid in caplog.text


def test_wrong_record_kind_is_a_contract_violation(manager):
    live = _checkout()
    manager.forms_seen([live])
    card_id = manager.query_suggestions(live, _field(live, "cardnumber")).unique_ids[0]

    with pytest.raises(SectionBoundsError):
        manager.fill_form(live, _field(live, "name"), card_id)


def test_contract_violation_is_logged_when_not_strict(store, caplog):
    manager = AutofillManager(store, IdentifierCodec(), settings=_settings(strict_contracts=False), classifier=classify)
    live = _checkout()
    manager.forms_seen([live])
    card_id = manager.query_suggestions(live, _field(live, "cardnumber")).unique_ids[0]

    with caplog.at_level(logging.ERROR, logger="fillwise.manager"):
        assert manager.fill_form(live, _field(live, "name"), card_id) is None
        assert manager.fill_form(live, _field(live, "name"), 0xFFFF) is None

    assert "Contract violation" in caplog.text


def test_submission_reports_recent_autofill(manager, uploads):
    live = _checkout()
    manager.forms_seen([live])
    name = _field(live, "name")
    filled = manager.fill_form(live, name, manager.query_suggestions(live, name).unique_ids[0])

    submitted = manager.form_submitted(filled)

    assert submitted is not None
    assert submitted.was_autofilled is True
    assert submitted.cached is not None
    assert uploads == [submitted]


def test_submission_without_fill(manager, uploads):
    live = _checkout()
    manager.forms_seen([live])

    submitted = manager.form_submitted(live)

    assert submitted.was_autofilled is False
    live.user_submitted = False
    assert manager.form_submitted(live) is None
    assert len(uploads) == 1


def test_autofilled_history_keeps_most_recent_forms(manager):
    forms = [_checkout(form_name=f"checkout-{index}") for index in range(4)]
    manager.forms_seen(forms)
    for live in forms:
        name = _field(live, "name")
        manager.fill_form(live, name, manager.query_suggestions(live, name).unique_ids[0])

    recent = [manager.was_recently_autofilled(manager.cache.find(live).signature) for live in forms]

    assert recent == [False, True, True, True]
