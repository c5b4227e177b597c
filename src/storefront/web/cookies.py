from datetime import datetime

from fastapi import Request, Response

SESSION_COOKIE = "session"


def delete_session_cookie(response: Response, secure: bool) -> None:
    response.delete_cookie(SESSION_COOKIE, path="/", secure=secure, httponly=True, samesite="lax")


class SessionCookie:
    """Credential store backed by the ``session`` cookie of the current request/response pair."""

    def __init__(self, request: Request, response: Response, secure: bool) -> None:
        self._token = request.cookies.get(SESSION_COOKIE)
        self._response = response
        self._secure = secure
        self.cleared = False

    def get(self) -> str | None:
        return self._token

    def set(self, token: str, expires_at: datetime) -> None:
        self._token = token
        self.cleared = False
        self._response.set_cookie(
            key=SESSION_COOKIE,
            value=token,
            expires=expires_at,
            path="/",
            secure=self._secure,
            httponly=True,
            samesite="lax",
        )

    def clear(self) -> None:
        self._token = None
        self.cleared = True
        delete_session_cookie(self._response, self._secure)
