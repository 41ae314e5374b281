"""Entry point tying the session, authenticator, resolver and creator together."""

from __future__ import annotations

import httpx

from .auth.session_manager import SessionAuthenticator
from .config import PARKER_BASE_URL
from .creator import CandidateCreator
from .models import AuthResult, CreateResult, LookupResult
from .resolver import CandidateResolver
from .session import ParkerSession
from .settings import SettingsStore


class ParkerClient:
    """The four operations callers use: auth check, login, lookup and create.

    Operations on one client run their requests strictly in sequence but are
    not serialized against each other.
    """

    def __init__(
        self,
        settings: SettingsStore | None = None,
        *,
        base_url: str = PARKER_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or SettingsStore()
        self.session = ParkerSession(base_url, transport=transport)
        self.authenticator = SessionAuthenticator(self.session, self.settings)
        self.resolver = CandidateResolver(self.session, self.authenticator)
        self.creator = CandidateCreator(self.session, self.authenticator, self.settings)

    async def check_authenticated(self) -> bool:
        return await self.authenticator.is_active()

    async def login(self, email: str | None = None, password: str | None = None) -> AuthResult:
        """Log in with the given credentials, or the stored ones when omitted."""
        if email is None or password is None:
            credentials = self.settings.get_credentials()
            if credentials is None:
                return AuthResult(ok=False, error="Configure credentials in settings.")
            email, password = credentials.email, credentials.password
        return await self.authenticator.login(email, password)

    async def lookup(
        self,
        url: str,
        first_name_hint: str | None = None,
        last_name_hint: str | None = None,
    ) -> LookupResult:
        return await self.resolver.lookup(url, first_name_hint, last_name_hint)

    async def create(
        self,
        first_name: str,
        last_name: str,
        url: str,
        sourced_date: str | None = None,
    ) -> CreateResult:
        return await self.creator.create(first_name, last_name, url, sourced_date)

    def logout(self) -> None:
        self.authenticator.logout()

    async def aclose(self) -> None:
        await self.session.aclose()

    async def __aenter__(self) -> ParkerClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
