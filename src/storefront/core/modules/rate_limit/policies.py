from storefront.core.modules.rate_limit.models import RateLimitPolicy

MINUTE_MS = 60 * 1000

LOGIN_POLICY = RateLimitPolicy(max_attempts=5, window_ms=15 * MINUTE_MS)
REGISTRATION_POLICY = RateLimitPolicy(max_attempts=5, window_ms=15 * MINUTE_MS)

DEFAULT_API_PREFIX = "/api"

# Route prefix -> policy for the API gatekeeper
API_POLICIES: dict[str, RateLimitPolicy] = {
    "/api/checkout": RateLimitPolicy(max_attempts=10, window_ms=MINUTE_MS),
    "/api/search": RateLimitPolicy(max_attempts=30, window_ms=MINUTE_MS),
    "/api/products": RateLimitPolicy(max_attempts=60, window_ms=MINUTE_MS),
    "/api/categories": RateLimitPolicy(max_attempts=60, window_ms=MINUTE_MS),
    "/api/auth": RateLimitPolicy(max_attempts=10, window_ms=MINUTE_MS),
    DEFAULT_API_PREFIX: RateLimitPolicy(max_attempts=100, window_ms=MINUTE_MS),
}


def is_api_path(path: str) -> bool:
    return path == DEFAULT_API_PREFIX or path.startswith(DEFAULT_API_PREFIX + "/")


def resolve_api_policy(path: str) -> RateLimitPolicy:
    """Return the policy of the longest matching route prefix, falling back to the ``/api`` default."""
    matches = [prefix for prefix in API_POLICIES if path == prefix or path.startswith(prefix + "/")]
    if not matches:
        return API_POLICIES[DEFAULT_API_PREFIX]
    return API_POLICIES[max(matches, key=len)]
