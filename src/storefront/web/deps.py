from typing import Annotated, cast

from fastapi import Depends, Request, Response

from storefront.app import App
from storefront.config import Config
from storefront.core.modules.session.models import Principal
from storefront.errors import AuthenticationError
from storefront.web.cookies import SessionCookie


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


def client_ip(request: Request) -> str:
    """Resolve the client address.

    Uvicorn rewrites the peer from X-Forwarded-For only when the request comes
    through a proxy listed in FORWARDED_ALLOW_IPS, so raw headers are never read here.
    """
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


async def get_client_ip(request: Request) -> str:
    return client_ip(request)


async def get_session_cookie(request: Request, response: Response) -> SessionCookie:
    config = cast(Config, request.app.state.config)
    return SessionCookie(request, response, secure=config.secure_cookies)


async def get_current_user(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    cookie: Annotated[SessionCookie, Depends(get_session_cookie)],
) -> Principal:
    """Get the signed-in customer or fail with 401."""
    try:
        return app.require_current_user(cookie)
    except AuthenticationError:
        # The 401 response is built by the error handler, not from the injected response
        if cookie.cleared:
            request.state.clear_session_cookie = True
        raise


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ClientIpDep = Annotated[str, Depends(get_client_ip)]
SessionCookieDep = Annotated[SessionCookie, Depends(get_session_cookie)]
CurrentUserDep = Annotated[Principal, Depends(get_current_user)]
