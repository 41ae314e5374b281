"""Errors raised inside the Parker client.

Public operations never let these escape; they are turned into result models.
"""

from __future__ import annotations


class ParkerError(Exception):
    """Base class for all Parker client errors."""


class AuthenticationError(ParkerError):
    """Missing or invalid credentials, or a rejected login."""


class TokenExtractionError(ParkerError):
    """No authenticity token was found in any recognized markup shape."""

    def __init__(self, context: str) -> None:
        super().__init__(f"Could not extract CSRF token from {context}.")


class NetworkError(ParkerError):
    """The request to Parker failed at the transport level."""


class ValidationError(ParkerError):
    """Candidate fields were missing or refused."""


class CandidateIdError(ParkerError):
    """A page URL did not carry a numeric candidate id."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No candidate id in {url!r}")
