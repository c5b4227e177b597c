"""Composite keys for rate limit entries."""

UNKNOWN_IP = "unknown"


def login_key(email: str, ip: str | None) -> str:
    """Key login attempts on email and IP together, so rotating one of them does not reset the count."""
    return f"login:{email.strip().lower()}:{ip or UNKNOWN_IP}"


def registration_key(ip: str | None) -> str:
    return f"register:{ip or UNKNOWN_IP}"


def api_key(ip: str | None, path: str) -> str:
    """Key API traffic on IP and the first two path segments, e.g. ``/api/search``."""
    prefix = "/".join(path.split("/")[:3])
    return f"api:{ip or UNKNOWN_IP}:{prefix}"
