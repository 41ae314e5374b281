"""Parker login, session health check and automatic re-login."""

from __future__ import annotations

import logging
from enum import Enum

from ..config import ROOT_PATH, SIGN_IN_PATH
from ..errors import AuthenticationError, ParkerError
from ..models import AuthResult
from ..parsers.token_parser import require_token
from ..session import Page, ParkerSession
from ..settings import SettingsStore

logger = logging.getLogger(__name__)

# Devise redirects unauthenticated requests here.
SIGN_IN_MARKER = "sign_in"
# Only rendered for a signed-in user.
LOGOUT_MARKER = "sign_out"


class SessionStatus(str, Enum):
    connected = "connected"
    expired = "expired"
    unknown = "unknown"


def on_sign_in_page(page: Page) -> bool:
    return SIGN_IN_MARKER in page.path


class SessionAuthenticator:
    """Keeps a ParkerSession signed in, using stored credentials when needed."""

    def __init__(self, session: ParkerSession, settings: SettingsStore) -> None:
        self.session = session
        self.settings = settings
        self._status = SessionStatus.unknown

    @property
    def status(self) -> SessionStatus:
        return self._status

    async def check_status(self, *, log_errors: bool = True) -> SessionStatus:
        """Fetch the dashboard; landing on sign-in or lacking a logout link means expired."""
        try:
            page = await self.session.get(ROOT_PATH)
        except Exception:
            if log_errors:
                logger.exception("Session check failed")
            else:
                logger.debug("Session check failed", exc_info=True)
            self._status = SessionStatus.unknown
            return self._status

        if page.ok and not on_sign_in_page(page) and LOGOUT_MARKER in page.html:
            self._status = SessionStatus.connected
        else:
            self._status = SessionStatus.expired
        return self._status

    async def is_active(self) -> bool:
        return await self.check_status() == SessionStatus.connected

    async def login(self, email: str, password: str) -> AuthResult:
        """Submit the Devise sign-in form.

        Success is judged by where Parker redirects: anywhere except back to
        the sign-in page.
        """
        try:
            await self._submit_login(email, password)
        except AuthenticationError as exc:
            self._status = SessionStatus.expired
            return AuthResult(ok=False, error=str(exc))
        except ParkerError as exc:
            logger.warning("Parker login failed: %s", exc)
            self._status = SessionStatus.unknown
            return AuthResult(ok=False, error=str(exc))
        except Exception as exc:
            logger.exception("Parker login failed")
            self._status = SessionStatus.unknown
            return AuthResult(ok=False, error=str(exc) or "Could not connect to Parker.")

        self._status = SessionStatus.connected
        logger.info("Logged in to Parker")
        return AuthResult(ok=True, message="Logged in to Parker.")

    async def _submit_login(self, email: str, password: str) -> None:
        if not (email or "").strip() or not password:
            raise AuthenticationError("Email and password are required.")

        sign_in = await self.session.get(SIGN_IN_PATH)
        token = require_token(sign_in.html, "login page")

        page = await self.session.post_form(
            SIGN_IN_PATH,
            {
                "authenticity_token": token,
                "user[email]": email.strip(),
                "user[password]": password,
                "commit": "Sign in",
            },
        )
        if not page.ok or on_sign_in_page(page):
            raise AuthenticationError("Login failed. Check email/password.")

    async def ensure_session(self) -> bool:
        """Make sure the session is signed in, logging in again if it expired.

        Never raises; any failure is reported as False.
        """
        try:
            if await self.is_active():
                return True
            credentials = self.settings.get_credentials()
            if credentials is None:
                logger.warning("Parker session inactive and no credentials configured")
                return False
            logger.info("Parker session inactive; logging in again")
            result = await self.login(credentials.email, credentials.password)
            return result.ok
        except Exception:
            logger.exception("Could not establish a Parker session")
            return False

    def logout(self) -> SessionStatus:
        """Forget the local session cookies."""
        self.session.reset()
        self._status = SessionStatus.unknown
        return self._status
