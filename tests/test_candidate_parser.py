"""Tests for candidate detail page parsing."""

import pytest

from parker_lookup.errors import CandidateIdError
from parker_lookup.models import MILESTONES
from parker_lookup.parsers.candidate_parser import parse_candidate_page, parse_timeline

from conftest import detail_page

URL = "https://parker.test/candidates/42"


def test_minimal_page_only_has_name():
    record = parse_candidate_page("<h1>Jane Doe</h1>", URL)

    assert record.to_dict() == {
        "id": "42",
        "url": URL,
        "name": "Jane Doe",
        "timeline": [{"label": label, "date": "N/A"} for label in MILESTONES],
        "submissions": [],
    }


def test_full_page():
    record = parse_candidate_page(detail_page(), URL)

    assert record.id == "42"
    assert record.name == "Kaidi Cao"
    assert record.sourced_by == "Jane Recruiter"
    assert record.current_owner == "Sam Owner"
    assert record.location == "San Francisco, CA"
    assert record.linkedin_url == "https://www.linkedin.com/in/kaidi-cao-398131117"
    assert [(t.label, t.date) for t in record.timeline] == [
        ("Sourced", "01/15/24"),
        ("First Engaged", "1/20/2024"),
        ("Handed Off", "N/A"),
        ("First screened", "2/1/24"),
        ("First Submitted", "N/A"),
        ("Most Recently Submitted", "3/5/24"),
    ]
    assert len(record.submissions) == 1
    sub = record.submissions[0]
    assert (sub.role, sub.company, sub.stage, sub.dates, sub.owner) == (
        "ML Engineer",
        "Acme",
        "Onsite",
        "2/1/24 - 3/5/24",
        "Sam Owner",
    )


def test_name_markup_stripped():
    record = parse_candidate_page("<h1>  <span>Jane</span>\n <em>Doe</em> </h1><h1>Other</h1>", URL)
    assert record.name == "Jane Doe"


def test_location_na_is_omitted():
    html = "<h1>X</h1><dl><dt>Location</dt><dd>N/A</dd><dt>Current Owner</dt><dd> </dd></dl>"
    record = parse_candidate_page(html, URL)
    assert record.location is None
    assert record.current_owner is None
    assert "location" not in record.to_dict()


def test_label_must_be_followed_by_value():
    html = "<dl><dt>Sourced By</dt><dt>Current Owner</dt><dd>Sam</dd></dl>"
    record = parse_candidate_page(html, URL)
    assert record.sourced_by is None
    assert record.current_owner == "Sam"


def test_other_location_labels_do_not_match():
    html = "<dl><dt>Current Location</dt><dd>Paris</dd></dl>"
    assert parse_candidate_page(html, URL).location is None


def test_timeline_uses_milestone_order_not_document_order():
    text = "Most Recently Submitted 5/5/24 ... Sourced 1/1/24"
    timeline = parse_timeline(text)
    assert [t.label for t in timeline] == list(MILESTONES)
    assert timeline[0].date == "1/1/24"
    assert timeline[-1].date == "5/5/24"


def test_timeline_date_window_is_bounded():
    text = "First Engaged " + "x" * 400 + " 4/4/24"
    assert parse_timeline(text)[1].date == "N/A"


def test_sourced_by_label_is_not_the_sourced_milestone():
    text = "Sourced By Jane Recruiter on 2/2/22"
    assert parse_timeline(text)[0].date == "N/A"


def test_malformed_submission_rows_dropped():
    html = (
        "<table><tr><th>h</th></tr>"
        "<tr><td>a</td><td>b</td><td>c</td><td>d</td></tr>"
        "<tr><td>r</td><td>c</td><td>s</td><td>d</td><td>o</td><td>extra</td></tr>"
        "</table>"
    )
    record = parse_candidate_page(html, URL)
    assert [s.role for s in record.submissions] == ["r"]


def test_missing_candidate_id_raises():
    with pytest.raises(CandidateIdError):
        parse_candidate_page("<h1>Jane</h1>", "https://parker.test/candidates/new")
