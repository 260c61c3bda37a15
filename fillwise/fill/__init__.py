"""Resolving fill values, building suggestions and packing suggestion ids."""

from .ids import IdentifierCodec
from .select_control import match_select_option
from .suggestions import (
    WARNING_ID,
    Suggestion,
    SuggestionList,
    card_suggestions,
    profile_suggestions,
    remove_duplicate_suggestions,
    warning_suggestion,
)
from .values import display_value, fill_field, resolve_fill_value, split_phone_number

__all__ = [
    "IdentifierCodec",
    "match_select_option",
    "WARNING_ID",
    "Suggestion",
    "SuggestionList",
    "card_suggestions",
    "profile_suggestions",
    "remove_duplicate_suggestions",
    "warning_suggestion",
    "display_value",
    "fill_field",
    "resolve_fill_value",
    "split_phone_number",
]
