from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError

from ..core.models import FieldMeta, FormField
from .field_values import build_selector, canonical_field_type, generate_fields

logger = logging.getLogger(__name__)

IGNORED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}

HAS_FORM_SCRIPT = """
() => document.querySelectorAll(
    "form, input[type='text'], input[type='email'], input[required], textarea"
).length > 0
"""

# Returns raw attributes; selector and type are resolved in Python.
FIELD_METADATA_SCRIPT = """
() => Array.from(document.querySelectorAll("input, textarea, select"))
    .filter((el) => !el.disabled)
    .map((el) => {
        const tag = el.tagName.toLowerCase();
        let position = 1;
        for (let sibling = el.previousElementSibling; sibling; sibling = sibling.previousElementSibling) {
            if (sibling.tagName.toLowerCase() === tag) position += 1;
        }
        let label = "";
        if (el.id) {
            const labelEl = document.querySelector(`label[for="${CSS.escape(el.id)}"]`);
            if (labelEl) label = labelEl.textContent || "";
        }
        if (!label && el.closest("label")) {
            label = el.closest("label").textContent || "";
        }
        return {
            id: el.id || "",
            name: el.getAttribute("name") || "",
            tag,
            position,
            type: (el.getAttribute("type") || el.type || "").toLowerCase(),
            placeholder: el.getAttribute("placeholder") || "",
            label: label.trim(),
            required: el.hasAttribute("required"),
            visible: (el.offsetParent !== null || el.getClientRects().length > 0)
                && getComputedStyle(el).visibility !== "hidden",
        };
    })
"""

ELEMENT_KIND_SCRIPT = "(el) => [el.tagName.toLowerCase(), (el.type || '').toLowerCase()]"

SUBMIT_SELECTORS = (
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Submit")',
    'button:has-text("Continue")',
    'button:has-text("Next")',
    'button:has-text("Go")',
    'button:has-text("Enter")',
    '[role="button"]:has-text("Submit")',
    "form button",
    ".submit-button",
    "#submit",
    '[name="submit"]',
)
ENTER_FALLBACK_SELECTOR = (
    "input[type='text'], input[type='email'], input:not([type]), textarea"
)
SUBMIT_CLICK_TIMEOUT_MS = 5000
FIELD_ACTION_TIMEOUT_MS = 5000


def has_form(page: Any) -> bool:
    """Read-only check for a form or fillable input on the current page."""

    try:
        return bool(page.evaluate(HAS_FORM_SCRIPT))
    except PlaywrightError:
        logger.debug("Form detection failed on %s", _page_url(page), exc_info=True)
        return False


def describe_field(raw: dict) -> Optional[FieldMeta]:
    """Builds :class:`FieldMeta` from the attributes reported by the page."""

    tag = (raw.get("tag") or "input").lower()
    raw_type = (raw.get("type") or "").lower()
    if tag == "input" and raw_type in IGNORED_INPUT_TYPES:
        return None
    if not raw.get("visible", True):
        return None

    name = raw.get("name") or ""
    element_id = raw.get("id") or ""
    return {
        "selector": build_selector(
            element_id=element_id or None,
            name=name or None,
            tag=tag,
            position=int(raw.get("position") or 1),
        ),
        "type": canonical_field_type(raw_type, tag),
        "name": name or element_id,
        "placeholder": raw.get("placeholder") or "",
        "label": raw.get("label") or "",
        "required": bool(raw.get("required")),
    }


def collect_field_metadata(page: Any) -> List[FieldMeta]:
    try:
        raw_fields = page.evaluate(FIELD_METADATA_SCRIPT) or []
    except PlaywrightError:
        logger.debug("Could not read form fields on %s", _page_url(page), exc_info=True)
        return []

    fields: List[FieldMeta] = []
    for raw in raw_fields:
        meta = describe_field(raw)
        if meta is not None:
            fields.append(meta)
    return fields


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    fields_filled: int
    submitted: bool


@dataclass(slots=True)
class FormHandler:
    """Fills the current page's form fields and fires a submission."""

    custom_fields: Optional[Sequence[FormField]] = None
    field_delay_ms: int = 200

    def resolve_fields(self, page: Any) -> List[FormField]:
        if self.custom_fields is not None:
            return list(self.custom_fields)
        return generate_fields(collect_field_metadata(page))

    def fill_and_submit(self, page: Any) -> SubmissionResult:
        fields = self.resolve_fields(page)
        if not fields:
            logger.info("No fillable form fields on %s", _page_url(page))
            return SubmissionResult(fields_filled=0, submitted=False)

        filled = self.fill(page, fields)
        submitted = self.submit(page)
        if submitted:
            logger.info("Submitted form on %s (%d field(s) filled)", _page_url(page), filled)
        else:
            logger.info("No submit trigger found on %s", _page_url(page))
        return SubmissionResult(fields_filled=filled, submitted=submitted)

    def fill(self, page: Any, fields: Sequence[FormField]) -> int:
        """Fills ``fields`` in order; returns how many were filled."""

        filled = 0
        for form_field in fields:
            selector = form_field["selector"]
            try:
                if self._fill_one(page, form_field):
                    filled += 1
                else:
                    logger.debug("Field %s not present; skipping", selector)
            except PlaywrightError:
                logger.debug("Could not fill field %s", selector, exc_info=True)
                continue
            page.wait_for_timeout(self.field_delay_ms)
        return filled

    @staticmethod
    def _fill_one(page: Any, form_field: FormField) -> bool:
        element = page.locator(form_field["selector"]).first
        if element.count() == 0:
            return False

        tag_name, input_type = element.evaluate(ELEMENT_KIND_SCRIPT)
        if tag_name == "select":
            element.select_option(form_field["value"], timeout=FIELD_ACTION_TIMEOUT_MS)
        elif input_type in {"checkbox", "radio"}:
            element.check(timeout=FIELD_ACTION_TIMEOUT_MS)
        elif tag_name in {"input", "textarea"}:
            element.fill(form_field["value"], timeout=FIELD_ACTION_TIMEOUT_MS)
        else:
            return False
        return True

    def submit(self, page: Any) -> bool:
        """Fires the first visible submit trigger, else presses Enter.

        ``True`` means an action was fired, not that the submission succeeded.
        """

        for selector in SUBMIT_SELECTORS:
            try:
                button = page.locator(selector).first
                if button.count() == 0 or not button.is_visible():
                    continue
                button.click(timeout=SUBMIT_CLICK_TIMEOUT_MS)
                logger.debug("Clicked submit trigger %s", selector)
                return True
            except PlaywrightError:
                logger.debug("Submit trigger %s failed", selector, exc_info=True)
                continue

        try:
            last_input = page.locator(ENTER_FALLBACK_SELECTOR).last
            if last_input.count() == 0:
                return False
            last_input.focus()
            last_input.press("Enter")
            return True
        except PlaywrightError:
            logger.debug("Enter fallback failed", exc_info=True)
            return False


def _page_url(page: Any) -> str:
    try:
        return page.url
    except PlaywrightError:
        return "<unknown>"
