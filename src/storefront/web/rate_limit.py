from typing import cast

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from storefront.app import App
from storefront.core.modules.rate_limit.policies import is_api_path
from storefront.web.deps import client_ip


class ApiRateLimitMiddleware(BaseHTTPMiddleware):
    """Coarse per-route, per-IP limit applied to every ``/api`` request before routing."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not is_api_path(request.url.path):
            return await call_next(request)

        app = cast(App, request.app.state.app)
        policy, result = app.check_api_limit(client_ip(request), request.url.path)
        headers = {
            "X-RateLimit-Limit": str(policy.max_attempts),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(result.reset_in),
        }

        if not result.success:
            return JSONResponse(
                status_code=429,
                content={"message": "Too many requests", "type": "rate_limited", "retry_after": result.reset_in},
                headers={"Retry-After": str(result.reset_in), **headers},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
