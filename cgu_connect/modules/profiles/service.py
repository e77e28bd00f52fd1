import re
from datetime import datetime, timezone
from supabase import Client
from cgu_connect.config import settings
from cgu_connect.core.errors import backend_error
from cgu_connect.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from typing import List
from fastapi import HTTPException

# Characters that would break out of a PostgREST or=(...) filter
_FILTER_METACHARS = re.compile(r"[,()]")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile_by_id(self, user_id: str) -> ProfileResponse:
        """Get profile by user ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise backend_error(e)

        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def get_profile_by_username(self, username: str) -> ProfileResponse:
        """Get profile by username; exactly one row must match"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("username", username)\
                .execute()
        except Exception as e:
            raise backend_error(e)

        if not result.data or len(result.data) != 1:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def get_profiles_by_ids(self, user_ids: List[str]) -> List[ProfileResponse]:
        """Profiles for the given ids, in the order the ids were given"""
        if not user_ids:
            return []
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .in_("id", user_ids)\
                .execute()
        except Exception as e:
            raise backend_error(e)

        by_id = {row["id"]: row for row in result.data or []}
        return [ProfileResponse(**by_id[user_id]) for user_id in user_ids if user_id in by_id]

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the display name of the caller's own profile"""
        update_data = {
            "full_name": profile_data.full_name,
            "updated_at": utc_now_iso(),
        }
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise backend_error(e)

        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def set_avatar_url(self, user_id: str, avatar_url: str) -> ProfileResponse:
        try:
            result = self.supabase.table("profiles")\
                .update({"avatar_url": avatar_url, "updated_at": utc_now_iso()})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise backend_error(e)

        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def search_profiles(self, term: str, limit: int = None) -> List[ProfileResponse]:
        """Profiles whose username or full name contains the term, case-insensitively"""
        pieces = [p.strip() for p in _FILTER_METACHARS.split(term or "")]
        cleaned = next((p for p in pieces if p), "")
        if not cleaned:
            raise HTTPException(status_code=400, detail="Please enter a search term")

        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .or_(f"username.ilike.%{cleaned}%,full_name.ilike.%{cleaned}%")\
                .limit(limit or settings.search_limit)\
                .execute()
        except Exception as e:
            raise backend_error(e)

        return [ProfileResponse(**row) for row in result.data or []]
