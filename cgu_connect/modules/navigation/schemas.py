from pydantic import BaseModel
from typing import Optional, Dict, List


class RouteDecision(BaseModel):
    path: str
    page: Optional[str] = None
    params: Dict[str, str] = {}
    allowed: bool
    redirect_to: Optional[str] = None


class NavLink(BaseModel):
    label: str
    path: str


class LayoutResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    links: List[NavLink]
    sign_out_redirect: str = "/login"
