"""Matching a LinkedIn URL against Parker's candidate search listing."""

from __future__ import annotations

import logging

from scrapling.parser import Adaptor

from .common import detail_path, is_profile_url, normalize_profile_url, to_selector

logger = logging.getLogger(__name__)


def find_candidate_path(source: str | Adaptor, target_url: str) -> str | None:
    """Return ``/candidates/<id>`` for the row whose LinkedIn link matches.

    The listing is the first ``<table>`` on the page; its first row is the
    header. Rows are scanned in document order and compared on the normalized
    profile URL. Returns None when no row matches or the page has no table.
    """
    target = normalize_profile_url(target_url)
    if not target:
        return None

    page = to_selector(source)
    table = page.css_first("table")
    if table is None:
        logger.debug("No results table on search page")
        return None

    rows = list(table.css("tr"))
    for row in rows[1:]:
        href = _first_profile_href(row)
        if href is None or normalize_profile_url(href) != target:
            continue
        for link in row.css("a[href]"):
            path = detail_path(link.attrib.get("href"))
            if path:
                return path
        logger.debug("Matching row for %s has no candidate link", target)
    return None


def _first_profile_href(row: object) -> str | None:
    for link in row.css("a[href]"):
        href = link.attrib.get("href")
        if is_profile_url(href):
            return href
    return None
