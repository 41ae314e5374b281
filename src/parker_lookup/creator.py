"""Create stub candidates in Parker, owned and sourced by the signed-in user."""

from __future__ import annotations

import logging
from datetime import date

from .auth.session_manager import SessionAuthenticator
from .config import CANDIDATES_PATH, NEW_CANDIDATE_PATH
from .errors import ParkerError, TokenExtractionError, ValidationError
from .models import (
    AlreadyExists,
    AuthFailure,
    Created,
    CreateResult,
    NetworkFailure,
    Rejected,
)
from .parsers.candidate_parser import parse_candidate_page
from .parsers.common import is_detail_url
from .parsers.form_parser import extract_error_message, find_owner_id
from .parsers.token_parser import extract_token
from .resolver import submit_url_check
from .session import Page, ParkerSession
from .settings import SettingsStore

logger = logging.getLogger(__name__)


class CandidateCreator:
    def __init__(
        self,
        session: ParkerSession,
        authenticator: SessionAuthenticator,
        settings: SettingsStore,
    ) -> None:
        self.session = session
        self.authenticator = authenticator
        self.settings = settings

    async def create(
        self,
        first_name: str,
        last_name: str,
        url: str,
        sourced_date: str | None = None,
    ) -> CreateResult:
        """Create a candidate unless Parker already knows the LinkedIn URL.

        The URL check runs first; when it lands on an existing candidate page
        that record is returned as AlreadyExists and nothing is submitted.
        """
        try:
            first_name, last_name, url = _required(first_name, last_name, url)
        except ValidationError as exc:
            return Rejected(message=str(exc))

        try:
            if not await self.authenticator.ensure_session():
                return AuthFailure(message="Not authenticated with Parker.")

            check = await submit_url_check(self.session, url)
            if check.ok and is_detail_url(check.url):
                logger.info("Candidate for %s already exists at %s", url, check.url)
                return AlreadyExists(candidate=parse_candidate_page(check.selector, check.url))

            form = await self._creation_form(check)
            token = extract_token(form.html)
            if not token:
                raise TokenExtractionError("the new-candidate form")

            payload = {
                "authenticity_token": token,
                "candidate[first_name]": first_name,
                "candidate[last_name]": last_name,
                "candidate[linkedin_url]": url,
                "candidate[sourced_date]": sourced_date or date.today().isoformat(),
                "commit": "Create Candidate",
            }
            owner_id = self._owner_id(form)
            if owner_id:
                payload["candidate[candidate_owner_id]"] = owner_id
                payload["candidate[sourced_by_id]"] = owner_id

            result = await self.session.post_form(CANDIDATES_PATH, payload)
            if result.ok and is_detail_url(result.url):
                logger.info("Created Parker candidate %s", result.url)
                return Created(candidate=parse_candidate_page(result.selector, result.url))

            reason = extract_error_message(result.selector) or f"HTTP {result.status}"
            logger.warning("Parker rejected candidate %s %s: %s", first_name, last_name, reason)
            return Rejected(message=f"Parker rejected the candidate: {reason}")
        except ParkerError as exc:
            logger.warning("Candidate creation failed for %s: %s", url, exc)
            return NetworkFailure(message=str(exc))
        except Exception as exc:
            logger.exception("Candidate creation failed for %s", url)
            return NetworkFailure(message=str(exc) or "Failed to create candidate.")

    async def _creation_form(self, check: Page) -> Page:
        """The URL check normally renders the form; fetch it directly otherwise."""
        if check.ok and extract_token(check.html):
            return check
        logger.debug("URL check did not render the form (%s); loading it directly", check)
        return await self.session.get(NEW_CANDIDATE_PATH)

    def _owner_id(self, form: Page) -> str | None:
        email = self.settings.get_email()
        owner_id = find_owner_id(form.selector, email)
        if owner_id is None:
            logger.warning("No owner option labelled %r; leaving owner unset", email)
        return owner_id


def _required(first_name: str, last_name: str, url: str) -> tuple[str, str, str]:
    values = tuple((v or "").strip() for v in (first_name, last_name, url))
    missing = [name for name, v in zip(("first name", "last name", "LinkedIn URL"), values) if not v]
    if missing:
        raise ValidationError(f"Missing {', '.join(missing)}.")
    return values
