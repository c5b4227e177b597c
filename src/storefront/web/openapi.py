from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from storefront.web.cookies import SESSION_COOKIE


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Storefront API",
            version="0.1.0",
            summary="Session and rate-limited authentication for the storefront",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": SESSION_COOKIE,
                "description": "Signed session token set by login and registration",
            },
        }

        # Only these operations need a session
        protected_endpoints = {
            ("GET", "/api/account/profile"),
        }

        for path, path_item in openapi_schema.get("paths", {}).items():
            for method, operation in path_item.items():
                if (method.upper(), path) in protected_endpoints:
                    operation["security"] = [{"SessionCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid email or password", "type": "authentication_error"},
                {"message": "Too many login attempts. Try again in 15 minutes.", "type": "rate_limited"},
                {"message": "Invalid email format", "type": "validation_error"},
            ]
        }
    }
