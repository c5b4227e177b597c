from typing import Any

import httpx
import structlog

from storefront.core.core import Service
from storefront.core.modules.customer.models import Registration
from storefront.core.modules.session.models import Principal
from storefront.errors import AuthenticationError, ValidationError

logger = structlog.get_logger(__name__)

REGISTRATION_ERRORS = {
    301: "Email is required",
    304: "First name is required",
    305: "Last name is required",
    306: "Password is required",
    310: "Password is too weak",
}


class CustomerService(Service):
    """Client for the customer endpoints of the commerce backend's REST module.

    Password checks and storage stay in the backend; this service only maps
    its responses onto principals and user-facing errors.
    """

    async def _call(self, controller: str, fields: dict[str, str]) -> dict[str, Any]:
        params = {"fc": "module", "module": "binshopsrest", "controller": controller}
        # Sent form encoded: the backend reads request values, not JSON bodies
        response = await self.core.http_client.post("/index.php", params=params, data=fields)
        if response.is_error:
            logger.error("backend_error", controller=controller, status=response.status_code, body=response.text[:200])
            response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected backend payload for '{controller}'")
        return payload

    async def authenticate(self, email: str, password: str) -> Principal:
        """Verify credentials with the backend and return the customer as a principal."""
        try:
            payload = await self._call("login", {"email": email, "password": password})
        except (httpx.HTTPError, ValueError):
            logger.exception("backend_login_failed")
            raise AuthenticationError("Login failed, please try again later") from None

        psdata = payload.get("psdata")
        psdata = psdata if isinstance(psdata, dict) else {}
        user = psdata.get("user") or psdata.get("customer")
        has_user = isinstance(user, dict) and user.get("id") is not None

        if payload.get("success") and payload.get("code") == 200 and has_user:
            return Principal(
                subject_id=str(user["id"]),
                email=user.get("email") or email,
                first_name=user.get("firstname") or "",
                last_name=user.get("lastname") or "",
            )

        message = psdata.get("message") or payload.get("message") or "Invalid email or password"
        raise AuthenticationError(str(message))

    async def register(self, registration: Registration) -> Principal:
        """Create a customer account in the backend and return it as a principal."""
        fields = {
            "email": registration.email,
            "password": registration.password,
            "firstName": registration.first_name,
            "lastName": registration.last_name,
        }
        try:
            payload = await self._call("register", fields)
        except (httpx.HTTPError, ValueError):
            logger.exception("backend_register_failed")
            raise ValidationError("Registration failed, please try again later") from None

        psdata = payload.get("psdata")
        registered = isinstance(psdata, dict) and psdata.get("registered")

        if payload.get("success") and payload.get("code") == 200 and registered:
            customer_id = str(psdata.get("customer_id") or "")
            if not customer_id:
                logger.error("backend_register_missing_id")
                raise ValidationError("Registration failed, please try again later")
            logger.info("customer_registered", subject_id=customer_id)
            return Principal(
                subject_id=customer_id,
                email=registration.email,
                first_name=registration.first_name,
                last_name=registration.last_name,
            )

        code = payload.get("code")
        if code in REGISTRATION_ERRORS:
            message = REGISTRATION_ERRORS[code]
        elif isinstance(psdata, str) and psdata:
            message = psdata
        else:
            message = payload.get("message") or "Registration failed"
        raise ValidationError(str(message))
