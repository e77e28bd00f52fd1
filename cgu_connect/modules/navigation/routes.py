from fastapi import APIRouter, Depends
from cgu_connect.core.dependencies import get_current_user, get_optional_user
from cgu_connect.modules.navigation.schemas import RouteDecision, LayoutResponse
from cgu_connect.modules.navigation.service import resolve_route, LAYOUT_LINKS, LOGIN
from typing import Dict, Optional

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("/resolve", response_model=RouteDecision)
async def resolve(
    path: str = "/",
    user_data: Optional[Dict] = Depends(get_optional_user)
):
    """Which page a client path renders for the caller, or where to redirect"""
    return resolve_route(path, authenticated=user_data is not None)


@router.get("/layout", response_model=LayoutResponse)
async def layout(user_data: Dict = Depends(get_current_user)):
    """Navigation shell shown around every signed-in page"""
    return LayoutResponse(
        user_id=user_data["id"],
        email=user_data.get("email"),
        links=LAYOUT_LINKS,
        sign_out_redirect=LOGIN,
    )
