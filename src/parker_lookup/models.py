"""Candidate data model and operation results."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

MILESTONES: tuple[str, ...] = (
    "Sourced",
    "First Engaged",
    "Handed Off",
    "First screened",
    "First Submitted",
    "Most Recently Submitted",
)
NO_DATE = "N/A"


class Credentials(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return (v or "").strip()


class ProfileRef(BaseModel):
    """A LinkedIn profile as handed over by the page-data supplier.

    Inputs are untrusted: everything is stripped and blank hints become None.
    """

    url: str
    first_name_hint: str | None = None
    last_name_hint: str | None = None

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: str | None) -> str:
        return (v or "").strip()

    @field_validator("first_name_hint", "last_name_hint", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def name_hints(self) -> list[str]:
        return [n for n in (self.first_name_hint, self.last_name_hint) if n]


class TimelineEntry(BaseModel):
    label: str
    date: str = NO_DATE


class Submission(BaseModel):
    role: str
    company: str
    stage: str
    dates: str
    owner: str


def empty_timeline() -> list[TimelineEntry]:
    return [TimelineEntry(label=label) for label in MILESTONES]


class CandidateRecord(BaseModel):
    id: str
    url: str
    name: str | None = None
    current_owner: str | None = None
    sourced_by: str | None = None
    location: str | None = None
    linkedin_url: str | None = None
    timeline: list[TimelineEntry] = Field(default_factory=empty_timeline)
    submissions: list[Submission] = Field(default_factory=list)

    @field_validator("timeline")
    @classmethod
    def check_milestones(cls, v: list[TimelineEntry]) -> list[TimelineEntry]:
        labels = tuple(entry.label for entry in v)
        if labels != MILESTONES:
            raise ValueError(f"timeline must list the milestones {MILESTONES}, got {labels}")
        return v

    def to_dict(self) -> dict:
        """Serialize without null placeholders for absent fields."""
        return self.model_dump(mode="json", exclude_none=True)


# ── Results ──────────────────────────────────────────────────────────────


class Found(BaseModel):
    kind: Literal["found"] = "found"
    candidate: CandidateRecord


class NotFound(BaseModel):
    kind: Literal["not_found"] = "not_found"


class AuthFailure(BaseModel):
    kind: Literal["auth_error"] = "auth_error"
    message: str


class NetworkFailure(BaseModel):
    kind: Literal["network_error"] = "network_error"
    message: str


class Created(BaseModel):
    kind: Literal["created"] = "created"
    candidate: CandidateRecord


class AlreadyExists(BaseModel):
    kind: Literal["already_exists"] = "already_exists"
    candidate: CandidateRecord


class Rejected(BaseModel):
    """The CRM (or local input validation) refused the submitted data."""

    kind: Literal["validation_error"] = "validation_error"
    message: str


LookupResult = Annotated[
    Union[Found, NotFound, AuthFailure, NetworkFailure],
    Field(discriminator="kind"),
]
CreateResult = Annotated[
    Union[Created, AlreadyExists, Rejected, AuthFailure, NetworkFailure],
    Field(discriminator="kind"),
]


class AuthResult(BaseModel):
    ok: bool
    message: str | None = None
    error: str | None = None


# ── Request bodies ───────────────────────────────────────────────────────


class LookupRequest(BaseModel):
    url: str
    first_name: str = ""
    last_name: str = ""


class CreateRequest(BaseModel):
    first_name: str
    last_name: str
    url: str
    sourced_date: str | None = None


class SettingsUpdate(BaseModel):
    email: str
    password: str
