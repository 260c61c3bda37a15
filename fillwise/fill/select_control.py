"""Choosing the ``<select>`` option that best represents a stored value.

Matching runs in three passes, stopping at the first hit:

1. Exact, case- and punctuation-insensitive comparison against each option's
   value and visible text.
2. The same comparison against known spellings of the stored value: US state
   names and abbreviations, month numbers and names, two and four digit years,
   card network names.
3. RapidFuzz similarity against the option texts, for free-form values only.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Set

from rapidfuzz import fuzz, process

from ..forms.fields import SelectOption
from ..forms.types import FieldType, equivalent_type

DEFAULT_SCORE_CUTOFF = 85.0

US_STATES: Dict[str, str] = {
    "al": "alabama", "ak": "alaska", "az": "arizona", "ar": "arkansas", "ca": "california",
    "co": "colorado", "ct": "connecticut", "de": "delaware", "dc": "district of columbia",
    "fl": "florida", "ga": "georgia", "hi": "hawaii", "id": "idaho", "il": "illinois",
    "in": "indiana", "ia": "iowa", "ks": "kansas", "ky": "kentucky", "la": "louisiana",
    "me": "maine", "md": "maryland", "ma": "massachusetts", "mi": "michigan", "mn": "minnesota",
    "ms": "mississippi", "mo": "missouri", "mt": "montana", "ne": "nebraska", "nv": "nevada",
    "nh": "new hampshire", "nj": "new jersey", "nm": "new mexico", "ny": "new york",
    "nc": "north carolina", "nd": "north dakota", "oh": "ohio", "ok": "oklahoma", "or": "oregon",
    "pa": "pennsylvania", "pr": "puerto rico", "ri": "rhode island", "sc": "south carolina",
    "sd": "south dakota", "tn": "tennessee", "tx": "texas", "ut": "utah", "vt": "vermont",
    "va": "virginia", "wa": "washington", "wv": "west virginia", "wi": "wisconsin", "wy": "wyoming",
}

COUNTRY_ALIASES: Dict[str, Sequence[str]] = {
    "us": ("usa", "united states", "united states of america"),
    "gb": ("uk", "united kingdom", "great britain"),
    "ca": ("canada",),
    "de": ("germany", "deutschland"),
    "fr": ("france",),
    "au": ("australia",),
}

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

CARD_NETWORK_ALIASES: Dict[str, Sequence[str]] = {
    "visa": ("visa",),
    "mastercard": ("mastercard", "master card", "mc"),
    "american express": ("american express", "amex"),
    "discover": ("discover",),
    "diners club": ("diners club", "diners"),
    "jcb": ("jcb",),
    "unionpay": ("unionpay", "union pay"),
}

_FUZZY_EXCLUDED = frozenset(
    {
        FieldType.CREDIT_CARD_EXP_MONTH,
        FieldType.CREDIT_CARD_EXP_2_DIGIT_YEAR,
        FieldType.CREDIT_CARD_EXP_4_DIGIT_YEAR,
        FieldType.ADDRESS_HOME_ZIP,
        FieldType.CREDIT_CARD_NUMBER,
    }
)


def _normalize_text(value: str) -> str:
    tokens = re.findall(r"[a-z0-9]+", value.lower())
    return " ".join(tokens)


def _state_spellings(value: str) -> Iterable[str]:
    if value in US_STATES:
        yield US_STATES[value]
    for abbreviation, name in US_STATES.items():
        if name == value:
            yield abbreviation


def _country_spellings(value: str) -> Iterable[str]:
    for code, aliases in COUNTRY_ALIASES.items():
        if value == code or value in aliases:
            yield code
            yield from aliases


def _month_spellings(value: str) -> Iterable[str]:
    if value.isdigit() and 1 <= int(value) <= 12:
        month = int(value)
        name = MONTH_NAMES[month - 1]
        yield str(month)
        yield f"{month:02d}"
        yield name
        yield name[:3]


def _year_spellings(value: str) -> Iterable[str]:
    if not value.isdigit():
        return
    if len(value) == 4:
        yield value[2:]
    elif len(value) == 2:
        yield "20" + value


def _network_spellings(value: str) -> Iterable[str]:
    for aliases in CARD_NETWORK_ALIASES.values():
        if value in aliases:
            yield from aliases


def _spellings(value: str, field_type: FieldType) -> Set[str]:
    normalized = _normalize_text(value)
    spellings = {normalized}
    base_type = equivalent_type(field_type)
    if base_type is FieldType.ADDRESS_HOME_STATE:
        spellings.update(_state_spellings(normalized))
    elif base_type is FieldType.ADDRESS_HOME_COUNTRY:
        spellings.update(_country_spellings(normalized))
    elif field_type is FieldType.CREDIT_CARD_EXP_MONTH:
        spellings.update(_month_spellings(normalized))
    elif field_type in (FieldType.CREDIT_CARD_EXP_2_DIGIT_YEAR, FieldType.CREDIT_CARD_EXP_4_DIGIT_YEAR):
        spellings.update(_year_spellings(normalized))
    elif field_type is FieldType.CREDIT_CARD_TYPE:
        spellings.update(_network_spellings(normalized))
    spellings.discard("")
    return spellings


def _exact_match(spellings: Set[str], options: Sequence[SelectOption]) -> Optional[SelectOption]:
    for option in options:
        if _normalize_text(option.value) in spellings or _normalize_text(option.text) in spellings:
            return option
    return None


def match_select_option(
    value: str,
    options: Sequence[SelectOption],
    field_type: FieldType,
    *,
    score_cutoff: float = DEFAULT_SCORE_CUTOFF,
) -> Optional[str]:
    """Return the value of the option matching ``value``, or ``None``."""

    if not value or not options:
        return None

    option = _exact_match({_normalize_text(value)}, options)
    if option is None:
        option = _exact_match(_spellings(value, field_type), options)
    if option is not None:
        return option.value

    if field_type in _FUZZY_EXCLUDED:
        return None
    normalized = _normalize_text(value)
    if len(normalized) < 3:
        return None

    choices: List[str] = [_normalize_text(option.text or option.value) for option in options]
    best = process.extractOne(normalized, choices, scorer=fuzz.WRatio, score_cutoff=score_cutoff)
    if best is None:
        return None
    _choice, _score, index = best
    return options[index].value


__all__ = ["DEFAULT_SCORE_CUTOFF", "match_select_option"]
