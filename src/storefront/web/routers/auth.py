from fastapi import APIRouter
from pydantic import BaseModel, Field

from storefront.core.modules.customer.models import Registration
from storefront.core.modules.session.models import Principal
from storefront.web.deps import AppDep, ClientIpDep, SessionCookieDep
from storefront.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Customer email")
    password: str = Field(..., description="Customer password")


class RegisterRequest(BaseModel):
    """Customer registration request."""

    email: str = Field(..., description="Customer email")
    password: str = Field(..., description="Password, at least 8 characters with upper, lower case and digits")
    confirm_password: str = Field(..., description="Password repeated")
    first_name: str = Field(..., description="Customer first name")
    last_name: str = Field(..., description="Customer last name")


class UserView(BaseModel):
    """Signed-in customer (API representation)."""

    id: str = Field(..., description="Customer ID")
    email: str = Field(..., description="Customer email")
    first_name: str = Field(..., description="Customer first name")
    last_name: str = Field(..., description="Customer last name")
    display_name: str = Field(..., description="Name to greet the customer with")

    @classmethod
    def from_principal(cls, principal: Principal) -> "UserView":
        """Create view model from session principal."""
        return cls(
            id=principal.subject_id,
            email=principal.email,
            first_name=principal.first_name,
            last_name=principal.last_name,
            display_name=principal.display_name,
        )


class UserResponse(BaseModel):
    """Current user, null for anonymous visitors."""

    user: UserView | None = Field(None, description="Signed-in customer")


@router.post(
    "/auth/login",
    summary="Sign in",
    description="Verify credentials with the commerce backend and start a cookie session.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Invalid input"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        429: {"model": ErrorResponse, "description": "Too many login attempts"},
    },
)
async def login(request: LoginRequest, app: AppDep, ip: ClientIpDep, cookie: SessionCookieDep) -> UserResponse:
    principal = await app.login(request.email, request.password, ip, cookie)
    return UserResponse(user=UserView.from_principal(principal))


@router.post(
    "/auth/register",
    summary="Create account",
    description="Register a customer with the commerce backend and start a cookie session.",
    operation_id="register",
    responses={
        200: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid input or rejected by the backend"},
        429: {"model": ErrorResponse, "description": "Too many registration attempts"},
    },
)
async def register(request: RegisterRequest, app: AppDep, ip: ClientIpDep, cookie: SessionCookieDep) -> UserResponse:
    registration = Registration(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    principal = await app.register(registration, request.confirm_password, ip, cookie)
    return UserResponse(user=UserView.from_principal(principal))


@router.post(
    "/auth/logout",
    summary="End session",
    description="Remove the session cookie. Succeeds whether or not a session exists.",
    operation_id="logout",
    status_code=204,
    responses={204: {"description": "Session cookie removed"}},
)
async def logout(app: AppDep, cookie: SessionCookieDep) -> None:
    app.logout(cookie)


@router.get(
    "/auth/me",
    summary="Current user",
    description="Get the signed-in customer, or null when there is no valid session.",
    operation_id="getCurrentUser",
    responses={200: {"description": "Current user or null"}},
)
async def me(app: AppDep, cookie: SessionCookieDep) -> UserResponse:
    principal = app.get_current_user(cookie)
    return UserResponse(user=UserView.from_principal(principal) if principal else None)
