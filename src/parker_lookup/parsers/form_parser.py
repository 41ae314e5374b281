"""Helpers for Parker's new-candidate form and its error responses."""

from __future__ import annotations

import logging

from scrapling.parser import Adaptor

from .common import full_text, to_selector

logger = logging.getLogger(__name__)

OWNER_SELECT = "select[name='candidate[candidate_owner_id]']"


def find_owner_id(source: str | Adaptor, email: str | None) -> str | None:
    """Option value in the owner dropdown whose label is ``email``.

    Parker labels owners by their login email. Comparison is
    case-insensitive; returns None when the form has no such option.
    """
    wanted = (email or "").strip().lower()
    if not wanted:
        return None

    page = to_selector(source)
    select = page.css_first(OWNER_SELECT)
    if select is None:
        logger.debug("Owner dropdown not present on form")
        return None

    for option in select.css("option"):
        value = (option.attrib.get("value") or "").strip()
        if value.isdigit() and full_text(option).lower() == wanted:
            return value
    return None


def extract_error_message(source: str | Adaptor) -> str | None:
    """Text of the first element whose class mentions "error" or "alert"."""
    page = to_selector(source)
    for el in page.css("[class*='error'], [class*='alert']"):
        text = full_text(el)
        if text:
            return text
    return None
