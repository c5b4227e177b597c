from datetime import datetime
from typing import Protocol


class CredentialStore(Protocol):
    """Client-held storage for the opaque session token."""

    def get(self) -> str | None: ...

    def set(self, token: str, expires_at: datetime) -> None: ...

    def clear(self) -> None: ...


class MemoryCredentialStore:
    """Credential store for non-HTTP clients such as scripts and tests."""

    def __init__(self, token: str | None = None) -> None:
        self.token = token
        self.expires_at: datetime | None = None

    def get(self) -> str | None:
        return self.token

    def set(self, token: str, expires_at: datetime) -> None:
        self.token = token
        self.expires_at = expires_at

    def clear(self) -> None:
        self.token = None
        self.expires_at = None
