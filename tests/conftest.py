"""Shared fixtures: an in-memory Parker built on httpx.MockTransport."""

from __future__ import annotations

from typing import Callable
from urllib.parse import parse_qs

import httpx
import pytest

from parker_lookup.client import ParkerClient
from parker_lookup.settings import SettingsStore

BASE_URL = "https://parker.test"
EMAIL = "me@example.com"
PASSWORD = "hunter2"

Handler = Callable[[httpx.Request], httpx.Response]


def html_response(body: str, status: int = 200) -> httpx.Response:
    return httpx.Response(status, html=body)


def redirect(location: str) -> httpx.Response:
    return httpx.Response(302, headers={"location": location})


def form_data(request: httpx.Request) -> dict[str, str]:
    parsed = parse_qs(request.content.decode(), keep_blank_values=True)
    return {k: v[0] for k, v in parsed.items()}


class FakeParker:
    """Routes keyed by (method, path); every request is recorded."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, response: httpx.Response | Handler) -> None:
        if isinstance(response, httpx.Response):
            fixed = response
            self.routes[(method, path)] = lambda request: httpx.Response(
                fixed.status_code, headers=fixed.headers, content=fixed.content
            )
        else:
            self.routes[(method, path)] = response

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return html_response("<h1>Not Found</h1>", status=404)
        return handler(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def search_terms(self) -> list[str]:
        return [
            r.url.params["q[first_name_or_last_name_cont]"]
            for r in self.calls("GET", "/candidates")
        ]


# ── Page builders ────────────────────────────────────────────────────────


def layout(body: str, *, token: str = "meta-token", signed_in: bool = True) -> str:
    nav = '<a href="/users/sign_out" data-method="delete">Sign out</a>' if signed_in else ""
    return (
        "<!DOCTYPE html><html><head>"
        f'<meta name="csrf-param" content="authenticity_token"><meta name="csrf-token" content="{token}">'
        f"</head><body><nav>{nav}</nav>{body}</body></html>"
    )


def sign_in_page(token: str = "login-token") -> str:
    return layout(
        '<form action="/users/sign_in" method="post">'
        f'<input type="hidden" name="authenticity_token" value="{token}">'
        '<input type="email" name="user[email]"><input type="password" name="user[password]">'
        "</form>",
        token=token,
        signed_in=False,
    )


def url_check_form(token: str = "check-token") -> str:
    return layout(
        '<form action="/candidates/check_linkedin_url" method="post">'
        f'<input type="hidden" name="authenticity_token" value="{token}">'
        '<input type="text" name="linkedin_url"></form>',
        token=token,
    )


def new_candidate_form(
    token: str = "form-token",
    owners: dict[str, str] | None = None,
    errors: str = "",
) -> str:
    options = "".join(
        f'<option value="{value}">{label}</option>' for value, label in (owners or {}).items()
    )
    return layout(
        f"{errors}"
        '<form action="/candidates" method="post">'
        f'<input type="hidden" name="authenticity_token" value="{token}">'
        '<input type="text" name="candidate[first_name]">'
        '<select name="candidate[candidate_owner_id]"><option value="">Select owner</option>'
        f"{options}</select></form>",
        token=token,
    )


def search_page(rows: list[tuple[str, str]]) -> str:
    """Search listing with one row per (candidate id, LinkedIn href)."""
    body = "".join(
        "<tr>"
        f'<td><a href="/candidates/{cid}">Candidate {cid}</a></td>'
        f'<td><a href="{href}" target="_blank">LinkedIn</a></td>'
        "<td>Some Owner</td></tr>"
        for cid, href in rows
    )
    return layout(
        "<table class='table'><thead><tr><th>Name</th><th>LinkedIn</th><th>Owner</th></tr></thead>"
        f"<tbody>{body}</tbody></table>"
    )


def detail_page(name: str = "Kaidi Cao", linkedin: str = "https://www.linkedin.com/in/kaidi-cao-398131117") -> str:
    return layout(
        f"<h1>{name}</h1>"
        "<dl>"
        '<dt>Sourced By</dt><dd><a href="/users/3">Jane Recruiter</a></dd>'
        "<dt>Current Owner</dt><dd>Sam Owner</dd>"
        "<dt>Location</dt><dd>San Francisco, CA</dd>"
        "</dl>"
        '<ul class="timeline">'
        "<li><span>Sourced</span> <span>01/15/24</span></li>"
        "<li><span>First Engaged</span> <span>1/20/2024</span></li>"
        "<li><span>Handed Off</span> <span>N/A</span></li>"
        "<li><span>First screened</span> <span>2/1/24</span></li>"
        "<li><span>First Submitted</span> <span></span></li>"
        "<li><span>Most Recently Submitted</span> <span>3/5/24</span></li>"
        "</ul>"
        f'<a href="{linkedin}">LinkedIn profile</a>'
        "<table>"
        "<tr><th>Role</th><th>Company</th><th>Stage</th><th>Dates</th><th>Owner</th></tr>"
        "<tr><td>ML Engineer</td><td><a href='/companies/1'>Acme</a></td><td>Onsite</td>"
        "<td>2/1/24 - 3/5/24</td><td>Sam Owner</td></tr>"
        "<tr><td>Broken row</td><td>only two cells</td></tr>"
        "</table>"
    )


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def settings(tmp_path, monkeypatch) -> SettingsStore:
    monkeypatch.delenv("PARKER_EMAIL", raising=False)
    monkeypatch.delenv("PARKER_PASSWORD", raising=False)
    store = SettingsStore(tmp_path / "settings.json")
    store.save_credentials(EMAIL, PASSWORD)
    return store


@pytest.fixture
def empty_settings(tmp_path, monkeypatch) -> SettingsStore:
    monkeypatch.delenv("PARKER_EMAIL", raising=False)
    monkeypatch.delenv("PARKER_PASSWORD", raising=False)
    return SettingsStore(tmp_path / "empty-settings.json")


@pytest.fixture
def parker() -> FakeParker:
    """A Parker whose session is already signed in."""
    fake = FakeParker()
    fake.route("GET", "/", html_response(layout("<h1>Dashboard</h1>")))
    fake.route("GET", "/candidates/linkedin_url_check", html_response(url_check_form()))
    return fake


@pytest.fixture
def make_client(parker: FakeParker, settings: SettingsStore) -> Callable[..., ParkerClient]:
    def factory(store: SettingsStore | None = None) -> ParkerClient:
        return ParkerClient(store or settings, base_url=BASE_URL, transport=parker.transport())

    return factory
