"""Resolve a LinkedIn profile URL to an existing Parker candidate.

Three strategies run in order and the first hit wins:

A. Parker's own LinkedIn URL check, which redirects to the candidate page
   when the URL is already on file.
B. Name search with the parts of the profile slug
   (``/in/kaidi-cao-398131117`` searches "kaidi", then "cao").
C. Name search with the first/last name shown on the profile, for vanity
   slugs without hyphens (``/in/anshulsaha``).

Searches scan the result table for a row whose LinkedIn link normalizes to
the target URL. A failing strategy counts as "no match" so the next one runs.
"""

from __future__ import annotations

import logging

from .auth.session_manager import SessionAuthenticator
from .config import CANDIDATES_PATH, URL_CHECK_FORM_PATH, URL_CHECK_SUBMIT_PATH
from .models import (
    AuthFailure,
    CandidateRecord,
    Found,
    LookupResult,
    NetworkFailure,
    NotFound,
    ProfileRef,
)
from .parsers.candidate_parser import parse_candidate_page
from .parsers.common import is_detail_url, tokens_from_slug
from .parsers.search_parser import find_candidate_path
from .parsers.token_parser import require_token
from .session import Page, ParkerSession

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated with Parker. Configure credentials in settings."
SEARCH_PARAM = "q[first_name_or_last_name_cont]"


async def submit_url_check(session: ParkerSession, linkedin_url: str) -> Page:
    """Post a LinkedIn URL to Parker's duplicate check.

    Parker redirects to ``/candidates/<id>`` for a known URL and renders the
    new-candidate form otherwise.
    """
    form = await session.get(URL_CHECK_FORM_PATH)
    token = require_token(form.html, "LinkedIn URL check form")
    return await session.post_form(
        URL_CHECK_SUBMIT_PATH,
        {"authenticity_token": token, "linkedin_url": linkedin_url},
    )


class CandidateResolver:
    def __init__(self, session: ParkerSession, authenticator: SessionAuthenticator) -> None:
        self.session = session
        self.authenticator = authenticator

    async def lookup(
        self,
        url: str,
        first_name_hint: str | None = None,
        last_name_hint: str | None = None,
    ) -> LookupResult:
        try:
            profile = ProfileRef(url=url, first_name_hint=first_name_hint, last_name_hint=last_name_hint)
            if not await self.authenticator.ensure_session():
                return AuthFailure(message=NOT_AUTHENTICATED)

            candidate = await self.resolve(profile)
        except Exception as exc:
            logger.exception("Candidate lookup failed for %s", url)
            return NetworkFailure(message=str(exc) or "Failed to look up candidate.")

        if candidate is None:
            logger.info("No Parker candidate for %s", profile.url)
            return NotFound()
        if not candidate.linkedin_url:
            candidate = candidate.model_copy(update={"linkedin_url": profile.url})
        return Found(candidate=candidate)

    async def resolve(self, profile: ProfileRef) -> CandidateRecord | None:
        """Run the strategies in order on an already signed-in session."""
        candidate = await self.by_url_check(profile.url)
        if candidate is not None:
            logger.info("Matched %s via URL check", profile.url)
            return candidate

        searched: set[str] = set()
        slug_terms = tokens_from_slug(profile.url)
        candidate = await self.by_name_search(profile.url, slug_terms, searched)
        if candidate is not None:
            logger.info("Matched %s via slug name search", profile.url)
            return candidate

        if profile.name_hints:
            candidate = await self.by_name_search(profile.url, profile.name_hints, searched)
            if candidate is not None:
                logger.info("Matched %s via explicit name search", profile.url)
                return candidate
        return None

    async def by_url_check(self, linkedin_url: str) -> CandidateRecord | None:
        try:
            page = await submit_url_check(self.session, linkedin_url)
            if page.ok and is_detail_url(page.url):
                return parse_candidate_page(page.selector, page.url)
        except Exception:
            logger.debug("URL check strategy failed for %s", linkedin_url, exc_info=True)
        return None

    async def by_name_search(
        self,
        linkedin_url: str,
        terms: list[str],
        searched: set[str],
    ) -> CandidateRecord | None:
        for term in terms:
            key = term.strip().lower()
            if not key or key in searched:
                continue
            searched.add(key)
            try:
                candidate = await self._search_term(linkedin_url, term.strip())
            except Exception:
                logger.debug("Name search for %r failed", term, exc_info=True)
                continue
            if candidate is not None:
                return candidate
        return None

    async def _search_term(self, linkedin_url: str, term: str) -> CandidateRecord | None:
        results = await self.session.get(CANDIDATES_PATH, params={SEARCH_PARAM: term, "commit": "Search"})
        if not results.ok:
            logger.debug("Search for %r returned HTTP %d", term, results.status)
            return None

        path = find_candidate_path(results.selector, linkedin_url)
        if path is None:
            return None

        detail = await self.session.get(path)
        if not detail.ok:
            logger.debug("Candidate page %s returned HTTP %d", path, detail.status)
            return None
        return parse_candidate_page(detail.selector, detail.url)
