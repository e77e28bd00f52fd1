from pydantic import BaseModel
from typing import Optional
from cgu_connect.modules.profiles.schemas import ProfileResponse


class FollowState(BaseModel):
    """Another user's profile page as the viewer sees it"""
    profile: ProfileResponse
    follower_count: int = 0
    following_count: int = 0
    is_following: bool = False
    can_follow: bool = True  # False on your own profile


class FollowToggleResponse(FollowState):
    message: Optional[str] = None
