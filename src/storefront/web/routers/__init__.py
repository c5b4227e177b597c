from storefront.web.routers.account import router as account_router
from storefront.web.routers.auth import router as auth_router

__all__ = [
    "account_router",
    "auth_router",
]
