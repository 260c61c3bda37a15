from __future__ import annotations

from fillwise.fill.select_control import match_select_option
from fillwise.forms.fields import SelectOption
from fillwise.forms.types import FieldType

STATES = [SelectOption("", "Select a state"), SelectOption("CA", "California"), SelectOption("NY", "New York")]
MONTHS = [SelectOption(f"{index:02d}", name) for index, name in enumerate(("Jan", "Feb", "Mar", "Apr"), start=1)]


def test_exact_match_ignores_case_and_punctuation():
    assert match_select_option("new-york", STATES, FieldType.ADDRESS_HOME_STATE) == "NY"
    assert match_select_option("ca", STATES, FieldType.ADDRESS_HOME_STATE) == "CA"


def test_state_abbreviation_matches_option_text():
    options = [SelectOption("state-1", "California"), SelectOption("state-2", "Texas")]

    assert match_select_option("TX", options, FieldType.ADDRESS_BILLING_STATE) == "state-2"


def test_country_aliases():
    options = [SelectOption("CA", "Canada"), SelectOption("US", "United States of America")]

    assert match_select_option("USA", options, FieldType.ADDRESS_HOME_COUNTRY) == "US"


def test_month_spellings():
    assert match_select_option("03", MONTHS, FieldType.CREDIT_CARD_EXP_MONTH) == "03"
    assert match_select_option("4", MONTHS, FieldType.CREDIT_CARD_EXP_MONTH) == "04"


def test_two_digit_year_options():
    options = [SelectOption("26", "26"), SelectOption("27", "27")]

    assert match_select_option("2027", options, FieldType.CREDIT_CARD_EXP_4_DIGIT_YEAR) == "27"


def test_fuzzy_match_tolerates_typos():
    assert match_select_option("Californa", STATES, FieldType.ADDRESS_HOME_STATE) == "CA"


def test_no_fuzzy_guessing_for_numeric_types():
    assert match_select_option("05", MONTHS, FieldType.CREDIT_CARD_EXP_MONTH) is None


def test_empty_inputs():
    assert match_select_option("", STATES, FieldType.ADDRESS_HOME_STATE) is None
    assert match_select_option("California", [], FieldType.ADDRESS_HOME_STATE) is None
