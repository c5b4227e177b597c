import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt
import pydantic
import structlog
from jwt.utils import base64url_decode, base64url_encode

from storefront.config import Config
from storefront.core.core import Service
from storefront.core.modules.session.credentials import CredentialStore
from storefront.core.modules.session.models import InvalidReason, Principal, Session, SessionCheck
from storefront.utils import now

logger = structlog.get_logger(__name__)

SESSION_TTL = timedelta(days=30)
JWT_ALGORITHM = "HS256"
SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def is_canonical_token(token: str) -> bool:
    """Check that a compact JWS has three segments, each in canonical unpadded base64url.

    Non-canonical spellings (stray characters, non-zero padding bits) would otherwise
    decode to the same bytes as the original token and still verify.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return False
    for segment in segments:
        if not SEGMENT_RE.fullmatch(segment):
            return False
        try:
            if base64url_encode(base64url_decode(segment)).decode("ascii") != segment:
                return False
        except ValueError:
            return False
    return True


class SessionService(Service):
    """Issues and verifies stateless session tokens.

    The token is the only session state: nothing is stored server side, so
    logging out removes the client credential and a leaked token stays valid
    until it expires.
    """

    def __init__(self, config: Config, clock: Callable[[], datetime] = now) -> None:
        super().__init__(config)
        self._key = config.auth_secret
        self._clock = clock

    def issue_token(self, principal: Principal) -> tuple[str, Session]:
        """Sign a token for the principal and return it with the session it encodes."""
        # JWT timestamps have second precision
        issued_at = self._clock().replace(microsecond=0)
        session = Session(
            subject_id=principal.subject_id,
            email=principal.email,
            first_name=principal.first_name,
            last_name=principal.last_name,
            issued_at=issued_at,
            expires_at=issued_at + SESSION_TTL,
        )
        claims = {
            "sub": session.subject_id,
            "email": session.email,
            "first_name": session.first_name,
            "last_name": session.last_name,
            "iat": int(session.issued_at.timestamp()),
            "exp": int(session.expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._key, algorithm=JWT_ALGORITHM)
        return token, session

    def verify_token(self, token: str) -> SessionCheck:
        """Verify signature, algorithm and expiry without side effects."""
        if not token:
            return SessionCheck(reason=InvalidReason.MISSING)
        if not is_canonical_token(token):
            return SessionCheck(reason=InvalidReason.MALFORMED)

        try:
            # Expiry is checked below against the service clock
            claims = jwt.decode(
                token,
                self._key,
                algorithms=[JWT_ALGORITHM],
                options={"verify_exp": False, "verify_iat": False, "require": ["sub", "iat", "exp"]},
            )
        except jwt.InvalidSignatureError:
            return SessionCheck(reason=InvalidReason.BAD_SIGNATURE)
        except jwt.PyJWTError:
            return SessionCheck(reason=InvalidReason.MALFORMED)

        try:
            session = Session(
                subject_id=claims["sub"],
                email=claims["email"],
                first_name=claims.get("first_name", ""),
                last_name=claims.get("last_name", ""),
                issued_at=datetime.fromtimestamp(claims["iat"], UTC),
                expires_at=datetime.fromtimestamp(claims["exp"], UTC),
            )
        except (KeyError, TypeError, ValueError, OverflowError, pydantic.ValidationError):
            return SessionCheck(reason=InvalidReason.MALFORMED)

        if self._clock() >= session.expires_at:
            return SessionCheck(reason=InvalidReason.EXPIRED)
        return SessionCheck(session=session)

    def create_session(self, principal: Principal, credentials: CredentialStore) -> str:
        """Issue a token for the principal and hand it to the client credential store."""
        token, session = self.issue_token(principal)
        credentials.set(token, session.expires_at)
        logger.info("session_created", subject_id=session.subject_id, expires_at=session.expires_at.isoformat())
        return token

    def get_session(self, credentials: CredentialStore) -> Session | None:
        """Return the verified session, or None for anonymous and invalid credentials alike."""
        token = credentials.get()
        if not token:
            return None

        check = self.verify_token(token)
        if check.session is None:
            logger.warning("session_rejected", reason=check.reason)
            credentials.clear()
            return None
        return check.session

    def delete_session(self, credentials: CredentialStore) -> None:
        credentials.clear()
