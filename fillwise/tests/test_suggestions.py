from __future__ import annotations

import pytest

from fillwise.fill.ids import IdentifierCodec
from fillwise.fill.suggestions import (
    WARNING_ID,
    SuggestionList,
    blank_annotations,
    card_suggestions,
    profile_suggestions,
    remove_duplicate_suggestions,
    warning_suggestion,
)
from fillwise.forms.fields import CachedField, CachedForm, FieldIdentity, LiveField
from fillwise.forms.types import FieldType
from fillwise.records.models import IdentityProfile, MailingAddress, PaymentCard


def _form(*types: FieldType) -> CachedForm:
    return CachedForm(
        fields=tuple(
            CachedField(identity=FieldIdentity(name=f"field{index}"), field_type=field_type)
            for index, field_type in enumerate(types)
        )
    )


def _typed(value: str = "") -> LiveField:
    return LiveField(identity=FieldIdentity(name="field0"), value=value)


def _profile(first: str, last: str, line1: str, city: str) -> IdentityProfile:
    return IdentityProfile(first_name=first, last_name=last, address=MailingAddress(line1=line1, city=city))


ADDRESS_FORM = _form(FieldType.NAME_FIRST, FieldType.ADDRESS_HOME_LINE1, FieldType.ADDRESS_HOME_CITY)


def test_profiles_filtered_by_case_insensitive_prefix() -> None:
    codec = IdentifierCodec()
    profiles = [
        _profile("Ada", "Lovelace", "1 Main St", "London"),
        _profile("Alan", "Turing", "2 High St", "Wilmslow"),
        _profile("Grace", "Hopper", "3 Navy Rd", "Arlington"),
    ]

    result = profile_suggestions(profiles, ADDRESS_FORM, _typed("A"), FieldType.NAME_FIRST, codec)

    assert result.values == ["Ada", "Alan"]
    assert result.labels == ["1 Main St", "2 High St"]
    assert result.icons == ["", ""]
    assert [codec.unpack(unique_id) for unique_id in result.unique_ids] == [
        (None, profiles[0].guid),
        (None, profiles[1].guid),
    ]

    assert profile_suggestions(profiles, ADDRESS_FORM, _typed("al"), FieldType.NAME_FIRST, codec).values == ["Alan"]


def test_profiles_without_text_for_the_type_are_skipped() -> None:
    profiles = [IdentityProfile(first_name="Ada"), IdentityProfile(email="grace@example.com")]

    result = profile_suggestions(profiles, ADDRESS_FORM, _typed(), FieldType.NAME_FIRST, IdentifierCodec())

    assert result.values == ["Ada"]


def test_labels_grow_until_profiles_differ() -> None:
    profiles = [
        _profile("Ada", "Lovelace", "1 Main St", "London"),
        _profile("Ada", "Lovelace", "1 Main St", "Paris"),
    ]

    result = profile_suggestions(profiles, ADDRESS_FORM, _typed(), FieldType.NAME_FIRST, IdentifierCodec())

    assert result.values == ["Ada", "Ada"]
    assert result.labels == ["1 Main St, London", "1 Main St, Paris"]


def test_cards_are_masked_and_labeled_with_last_four() -> None:
    codec = IdentifierCodec()
    visa = PaymentCard(number="4111111111111111", expiration_month=1, expiration_year=2030)
    mastercard = PaymentCard(number="5555 5555 5555 4444", expiration_month=2, expiration_year=2031)

    result = card_suggestions([visa, mastercard], _typed(), FieldType.CREDIT_CARD_NUMBER, codec)

    assert result.values == ["************1111", "************4444"]
    assert result.labels == ["*1111", "*4444"]
    assert result.icons == ["visa", "mastercard"]
    assert codec.unpack(result.unique_ids[1]) == (mastercard.guid, None)

    typed = card_suggestions([visa, mastercard], _typed("5"), FieldType.CREDIT_CARD_NUMBER, codec)
    assert typed.labels == ["*4444"]


def test_card_name_suggestions_show_plain_text() -> None:
    card = PaymentCard(name_on_card="Ada Lovelace", number="378282246310005")

    result = card_suggestions([card], _typed("ada"), FieldType.CREDIT_CARD_NAME, IdentifierCodec())

    assert result.values == ["Ada Lovelace"]
    assert result.labels == ["*0005"]
    assert result.icons == ["amex"]


def test_duplicates_are_removed_keeping_first_occurrence() -> None:
    suggestions = SuggestionList(
        values=["Ada", "Ada", "Alan", "Ada"],
        labels=["London", "London", "Wilmslow", "Paris"],
        icons=["", "x", "", ""],
        unique_ids=[1, 2, 3, 4],
    )

    result = remove_duplicate_suggestions(suggestions)

    assert result.values == ["Ada", "Alan", "Ada"]
    assert result.labels == ["London", "Wilmslow", "Paris"]
    assert result.icons == ["", "", ""]
    assert result.unique_ids == [1, 3, 4]
    assert remove_duplicate_suggestions(result) == result


def test_dedup_twice_equals_dedup_once() -> None:
    suggestions = SuggestionList(
        values=["Ada", "Alan", "Ada", "Ada", "Alan", "Grace", "Ada"],
        labels=["London", "Wilmslow", "Paris", "London", "Wilmslow", "Arlington", "Paris"],
        icons=[""] * 7,
        unique_ids=[1, 2, 3, 4, 5, 6, 7],
    )

    once = remove_duplicate_suggestions(suggestions)
    twice = remove_duplicate_suggestions(once)

    assert twice == once
    assert once.values == ["Ada", "Alan", "Ada", "Grace"]
    assert once.labels == ["London", "Wilmslow", "Paris", "Arlington"]
    assert once.unique_ids == [1, 2, 3, 6]


def test_card_without_maskable_number_is_not_offered_by_number() -> None:
    short = PaymentCard(name_on_card="Ada Lovelace", number="12")

    assert not card_suggestions([short], _typed(), FieldType.CREDIT_CARD_NUMBER, IdentifierCodec())

    by_name = card_suggestions([short], _typed(), FieldType.CREDIT_CARD_NAME, IdentifierCodec())
    assert by_name.values == ["Ada Lovelace"]
    assert by_name.labels == [""]


def test_identical_profiles_collapse_to_one_suggestion() -> None:
    profiles = [
        _profile("Ada", "Lovelace", "1 Main St", "London"),
        _profile("Ada", "Lovelace", "1 Main St", "London"),
    ]

    result = remove_duplicate_suggestions(
        profile_suggestions(profiles, ADDRESS_FORM, _typed(), FieldType.NAME_FIRST, IdentifierCodec())
    )

    assert len(result) == 1


def test_blank_annotations_keep_values_and_ids() -> None:
    suggestions = SuggestionList(values=["Ada"], labels=["London"], icons=["visa"], unique_ids=[7])

    blanked = blank_annotations(suggestions)

    assert blanked == SuggestionList(values=["Ada"], labels=[""], icons=[""], unique_ids=[7])


def test_warning_entry_uses_sentinel_id() -> None:
    warning = warning_suggestion("Filling is disabled")

    assert list(warning) == [("Filling is disabled", "", "", WARNING_ID)]


def test_sequences_must_stay_in_lockstep() -> None:
    with pytest.raises(ValueError):
        SuggestionList(values=["Ada"], labels=[], icons=[""], unique_ids=[1])
