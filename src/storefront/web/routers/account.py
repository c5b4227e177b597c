from fastapi import APIRouter

from storefront.web.deps import CurrentUserDep
from storefront.web.openapi import ErrorResponse
from storefront.web.routers.auth import UserView

router = APIRouter(tags=["account"])


@router.get(
    "/account/profile",
    summary="Get account profile",
    description="Get the profile of the signed-in customer.",
    operation_id="getAccountProfile",
    responses={
        200: {"description": "Current customer profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_profile(user: CurrentUserDep) -> UserView:
    return UserView.from_principal(user)
