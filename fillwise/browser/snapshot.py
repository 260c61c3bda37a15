"""Reading live form snapshots from, and writing fills back to, a Playwright page.

`collect_live_forms` walks ``document.forms`` and returns one :class:`LiveForm`
per form, fields in DOM order, using the same control filter the fill side uses
so indices line up in `apply_live_form`.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from playwright.sync_api import Page

from ..forms.fields import LiveForm

logger = logging.getLogger(__name__)

CONTROL_SELECTOR = "input, select, textarea"
"""CSS selector for fillable controls inside a form."""

SKIPPED_INPUT_TYPES: Sequence[str] = ("submit", "button", "image", "reset", "file")

_COLLECT_SCRIPT = """
([selector, skipped]) => {
    const labelFor = (el) => {
        const parts = [];
        if (el.labels && el.labels.length) {
            for (const label of el.labels) {
                const text = (label.innerText || label.textContent || "").trim();
                if (text) {
                    parts.push(text);
                }
            }
        }
        const ariaLabel = el.getAttribute("aria-label");
        if (!parts.length && ariaLabel) {
            parts.push(ariaLabel.trim());
        }
        return parts.join(" ").trim();
    };
    const isAutofilled = (el) => {
        for (const pseudo of [":autofill", ":-webkit-autofill"]) {
            try {
                if (el.matches(pseudo)) {
                    return true;
                }
            } catch (err) {
                // Unsupported pseudo-class in this engine.
            }
        }
        return el.dataset ? el.dataset.autofilled === "true" : false;
    };
    const controls = (form) =>
        Array.from(form.querySelectorAll(selector)).filter(
            (el) => !skipped.includes((el.type || "").toLowerCase())
        );
    return Array.from(document.forms).map((form) => ({
        name: form.getAttribute("name") || form.id || "",
        source_url: window.location.href,
        action: form.action || window.location.href,
        method: (form.method || "get").toLowerCase(),
        fields: controls(form).map((el) => ({
            name: el.name || el.id || "",
            label: labelFor(el),
            tag: (el.tagName || "").toLowerCase(),
            type: (el.type || "").toLowerCase(),
            max_length: el.maxLength > 0 ? el.maxLength : 0,
            value: el.value || "",
            is_autofilled: isAutofilled(el),
            options: el.tagName === "SELECT"
                ? Array.from(el.options).map((option) => ({
                    value: option.value,
                    text: (option.text || "").trim(),
                }))
                : [],
        })),
    }));
}
"""

_APPLY_SCRIPT = """
([formIndex, selector, skipped, updates]) => {
    const form = document.forms[formIndex];
    if (!form) {
        return 0;
    }
    const controls = Array.from(form.querySelectorAll(selector)).filter(
        (el) => !skipped.includes((el.type || "").toLowerCase())
    );
    let applied = 0;
    for (const update of updates) {
        const el = controls[update.index];
        if (!el || (el.name || el.id || "") !== update.name) {
            continue;
        }
        el.value = update.value;
        if (el.dataset) {
            el.dataset.autofilled = "true";
        }
        el.dispatchEvent(new Event("input", { bubbles: true }));
        el.dispatchEvent(new Event("change", { bubbles: true }));
        applied += 1;
    }
    return applied;
}
"""


def collect_live_forms(page: Page) -> List[LiveForm]:
    """Return a snapshot of every form on ``page``."""

    payload = page.evaluate(_COLLECT_SCRIPT, [CONTROL_SELECTOR, list(SKIPPED_INPUT_TYPES)])
    forms: List[LiveForm] = []
    for entry in payload or ():
        if isinstance(entry, dict):
            forms.append(LiveForm.from_dict(entry))
    logger.debug(f"Collected {len(forms)} forms from {page.url}")
    return forms


def apply_live_form(page: Page, form_index: int, live_form: LiveForm) -> int:
    """Write the autofilled values of ``live_form`` into form ``form_index``.

    Returns the number of controls updated. Controls whose name no longer matches
    the snapshot are left alone.
    """

    updates: List[Dict[str, Any]] = [
        {"index": index, "name": field.name, "value": field.value}
        for index, field in enumerate(live_form.fields)
        if field.is_autofilled
    ]
    if not updates:
        return 0
    applied = page.evaluate(_APPLY_SCRIPT, [form_index, CONTROL_SELECTOR, list(SKIPPED_INPUT_TYPES), updates])
    logger.info(f"Applied {applied} of {len(updates)} filled values to form {form_index}")
    return int(applied or 0)


__all__ = ["CONTROL_SELECTOR", "SKIPPED_INPUT_TYPES", "apply_live_form", "collect_live_forms"]
