"""Playwright adapters that snapshot live forms and write fills back."""

from .snapshot import CONTROL_SELECTOR, apply_live_form, collect_live_forms

__all__ = [
    "CONTROL_SELECTOR",
    "apply_live_form",
    "collect_live_forms",
]
