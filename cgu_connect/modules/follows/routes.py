from fastapi import APIRouter, Depends
from cgu_connect.core.dependencies import get_current_user, get_user_supabase
from cgu_connect.modules.auth.schemas import StatusResponse
from cgu_connect.modules.follows.schemas import FollowToggleResponse
from cgu_connect.modules.follows.service import FollowService
from cgu_connect.modules.profiles.schemas import ProfileResponse
from cgu_connect.modules.profiles.service import ProfileService
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/follows", tags=["follows"])


def get_follow_service(supabase: Client = Depends(get_user_supabase)) -> FollowService:
    return FollowService(supabase)


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/followers", response_model=List[ProfileResponse])
async def list_followers(
    user_data: Dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service)
):
    """Profiles following the current user (Connections > Followers)"""
    return service.list_followers(user_data["id"])


@router.get("/following", response_model=List[ProfileResponse])
async def list_following(
    user_data: Dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service)
):
    """Profiles the current user follows (Connections > Following)"""
    return service.list_following(user_data["id"])


@router.post("/user/{username}", response_model=StatusResponse, status_code=201)
async def follow_user(
    username: str,
    user_data: Dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
    profiles: ProfileService = Depends(get_profile_service)
):
    profile = profiles.get_profile_by_username(username)
    service.follow(user_data["id"], profile.id)
    return StatusResponse(message=f"Following @{profile.username}")


@router.delete("/user/{username}", response_model=StatusResponse)
async def unfollow_user(
    username: str,
    user_data: Dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
    profiles: ProfileService = Depends(get_profile_service)
):
    profile = profiles.get_profile_by_username(username)
    service.unfollow(user_data["id"], profile.id)
    return StatusResponse(message="Unfollowed successfully")


@router.post("/user/{username}/toggle", response_model=FollowToggleResponse)
async def toggle_follow(
    username: str,
    user_data: Dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Follow/Unfollow button on a user profile page"""
    profile = profiles.get_profile_by_username(username)
    state = service.load_state(user_data["id"], profile)
    return service.toggle_follow(user_data["id"], state)
