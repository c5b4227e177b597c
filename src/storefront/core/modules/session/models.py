"""Session management models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class Principal(BaseModel):
    """Authenticated customer as embedded in a session token."""

    subject_id: str = Field(..., min_length=1, description="Customer ID in the commerce backend")
    email: str = Field(..., description="Customer email")
    first_name: str = Field("", description="Customer first name")
    last_name: str = Field("", description="Customer last name")

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.email


class Session(Principal):
    """Verified session: principal plus token lifetime."""

    issued_at: datetime
    expires_at: datetime

    @property
    def principal(self) -> Principal:
        return Principal(
            subject_id=self.subject_id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
        )


class InvalidReason(StrEnum):
    MISSING = "missing"
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"


class SessionCheck(BaseModel):
    """Outcome of verifying a session token; exactly one of session/reason is set."""

    session: Session | None = None
    reason: InvalidReason | None = None

    @property
    def ok(self) -> bool:
        return self.session is not None
