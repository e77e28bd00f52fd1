from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    username: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileView(BaseModel):
    """The signed-in user's own profile page"""
    profile: ProfileResponse
    follower_count: int = 0
    following_count: int = 0


class AvatarUploadResponse(BaseModel):
    avatar_url: str
    message: str = "Profile image updated successfully"
