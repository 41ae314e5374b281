"""Parser for Parker candidate detail pages (``/candidates/<id>``).

Markup shapes relied on:

* name: the first ``<h1>``
* owner, sourcer and location: ``<dt>Label</dt><dd>value</dd>`` pairs
* timeline: milestone labels followed by an ``M/D/YY`` or ``M/D/YYYY`` date
* submissions: the first ``<table>``, one ``<tr>`` per submission after the header

Everything except the candidate id is optional and simply left out when the
page does not carry it.
"""

from __future__ import annotations

import logging
import re

from scrapling.parser import Adaptor

from ..models import MILESTONES, NO_DATE, CandidateRecord, Submission, TimelineEntry
from .common import candidate_id_from_url, full_text, is_profile_url, strip_markup, to_selector

logger = logging.getLogger(__name__)

FIELD_LABELS: dict[str, str] = {
    "sourced_by": "Sourced By",
    "current_owner": "Current Owner",
    "location": "Location",
}
SUBMISSION_FIELDS = ("role", "company", "stage", "dates", "owner")
TIMELINE_WINDOW = 300

_DATE = r"(\d{1,2}/\d{1,2}/\d{2,4})"
_ANY_MILESTONE = "|".join(re.escape(label) for label in MILESTONES)


def parse_candidate_page(source: str | Adaptor, final_url: str) -> CandidateRecord:
    """Build a CandidateRecord from a detail page and the URL it was served from.

    Raises CandidateIdError when ``final_url`` is not a candidate URL.
    """
    candidate_id = candidate_id_from_url(final_url)
    page = to_selector(source)

    fields: dict[str, str] = {}
    heading = page.css_first("h1")
    name = full_text(heading) if heading is not None else ""
    if name:
        fields["name"] = name

    for key, label in FIELD_LABELS.items():
        value = labelled_value(page, label)
        if value:
            fields[key] = value
    if fields.get("location", "").upper() == "N/A":
        del fields["location"]

    linkedin_url = first_profile_link(page)
    if linkedin_url:
        fields["linkedin_url"] = linkedin_url

    return CandidateRecord(
        id=candidate_id,
        url=final_url,
        timeline=parse_timeline(page_text(page)),
        submissions=parse_submissions(page),
        **fields,
    )


def page_text(page: Adaptor) -> str:
    """Visible text of the whole page, scripts and styles removed."""
    raw = page.html_content or ""
    raw = re.sub(r"<(script|style)\b.*?</\1>", " ", raw, flags=re.IGNORECASE | re.DOTALL)
    return strip_markup(raw) or ""


def labelled_value(page: Adaptor, label: str) -> str | None:
    """Text of the ``<dd>`` that immediately follows the ``<dt>`` reading ``label``."""
    wanted = label.lower()
    for term in page.css("dt"):
        if full_text(term).rstrip(":").strip().lower() != wanted:
            continue
        following = term.xpath("following-sibling::*[1]")
        if following and following[0].tag == "dd":
            return full_text(following[0]) or None
    return None


def parse_timeline(text: str) -> list[TimelineEntry]:
    """One entry per milestone, in milestone order, ``N/A`` when undated.

    A date belongs to a milestone when it appears within ``TIMELINE_WINDOW``
    characters after the label and before any other milestone label. "Sourced"
    never matches the "Sourced By" field label.
    """
    entries = []
    for label in MILESTONES:
        pattern = re.compile(
            rf"\b{re.escape(label)}\b(?!\s+by\b)"
            rf"(?:(?!{_ANY_MILESTONE}).){{0,{TIMELINE_WINDOW}}}?{_DATE}",
            re.IGNORECASE | re.DOTALL,
        )
        m = pattern.search(text)
        entries.append(TimelineEntry(label=label, date=m.group(1) if m else NO_DATE))
    return entries


def first_profile_link(page: Adaptor) -> str | None:
    for link in page.css("a[href]"):
        href = (link.attrib.get("href") or "").strip()
        if is_profile_url(href):
            return href
    return None


def parse_submissions(page: Adaptor) -> list[Submission]:
    """Rows of the first table; rows with fewer than five cells are skipped."""
    table = page.css_first("table")
    if table is None:
        return []

    submissions: list[Submission] = []
    for row in list(table.css("tr"))[1:]:
        try:
            cells = [full_text(cell) for cell in row.css("td")]
            if len(cells) < len(SUBMISSION_FIELDS):
                continue
            submissions.append(Submission(**dict(zip(SUBMISSION_FIELDS, cells))))
        except Exception:
            logger.debug("Failed to parse a submission row", exc_info=True)
    return submissions
