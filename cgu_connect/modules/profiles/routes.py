from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from cgu_connect.core.dependencies import get_current_user, get_user_supabase
from cgu_connect.modules.follows.schemas import FollowState
from cgu_connect.modules.follows.service import FollowService
from cgu_connect.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, ProfileView, AvatarUploadResponse
)
from cgu_connect.modules.profiles.service import ProfileService
from cgu_connect.modules.profiles.storage import AvatarStorage
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


def get_follow_service(supabase: Client = Depends(get_user_supabase)) -> FollowService:
    return FollowService(supabase)


def get_avatar_storage(supabase: Client = Depends(get_user_supabase)) -> AvatarStorage:
    return AvatarStorage(supabase)


@router.get("/me", response_model=ProfileView)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
    follows: FollowService = Depends(get_follow_service)
):
    """Current user's profile with follower and following counts"""
    user_id = user_data["id"]
    return ProfileView(
        profile=service.get_profile_by_id(user_id),
        follower_count=follows.count_followers(user_id),
        following_count=follows.count_following(user_id),
    )


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.update_profile(user_data["id"], profile_data)


@router.post("/me/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
    storage: AvatarStorage = Depends(get_avatar_storage)
):
    """
    Upload a new profile picture.
    Only images up to 2MB are accepted; the public URL is saved as avatar_url.
    """
    content_type = file.content_type or ""
    # size is unknown for some clients; checked again once the body is read
    is_valid, errors = AvatarStorage.validate(content_type, file.size or 0)
    if not is_valid:
        raise HTTPException(status_code=400, detail=errors[0])

    content = await file.read()
    is_valid, errors = AvatarStorage.validate(content_type, len(content))
    if not is_valid:
        raise HTTPException(status_code=400, detail=errors[0])

    key = AvatarStorage.build_path(user_data["id"], file.filename, content_type)
    public_url = storage.upload_file(content, key, content_type)
    service.set_avatar_url(user_data["id"], public_url)
    return AvatarUploadResponse(avatar_url=public_url)


@router.get("/search", response_model=List[ProfileResponse])
async def search_profiles(
    q: str = "",
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Search users by name or username"""
    return service.search_profiles(q)


@router.get("/user/{username}", response_model=FollowState)
async def get_user_profile(
    username: str,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
    follows: FollowService = Depends(get_follow_service)
):
    """Another user's profile page: counts and whether the caller follows them"""
    profile = service.get_profile_by_username(username)
    return follows.load_state(user_data["id"], profile)
