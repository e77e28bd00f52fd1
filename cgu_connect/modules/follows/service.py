"""
Follow graph access on the ``follows`` join table.

Counters on a loaded profile view are adjusted locally after a follow or
unfollow instead of being queried again, so a toggle costs one write.
"""

import logging
from supabase import Client
from cgu_connect.core.errors import backend_error
from cgu_connect.modules.follows.schemas import FollowState, FollowToggleResponse
from cgu_connect.modules.profiles.schemas import ProfileResponse
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

FOLLOWER_PROFILE = "profiles!follows_follower_id_fkey(*)"
FOLLOWING_PROFILE = "profiles!follows_following_id_fkey(*)"
UNIQUE_VIOLATION = "23505"


class FollowService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def is_following(self, follower_id: str, following_id: str) -> bool:
        try:
            result = self.supabase.table("follows")\
                .select("id")\
                .eq("follower_id", follower_id)\
                .eq("following_id", following_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise backend_error(e)
        return bool(result.data)

    def _count(self, column: str, user_id: str) -> int:
        try:
            result = self.supabase.table("follows")\
                .select("id", count="exact")\
                .eq(column, user_id)\
                .execute()
        except Exception as e:
            raise backend_error(e)
        return result.count or 0

    def count_followers(self, user_id: str) -> int:
        return self._count("following_id", user_id)

    def count_following(self, user_id: str) -> int:
        return self._count("follower_id", user_id)

    def follow(self, follower_id: str, following_id: str) -> None:
        if follower_id == following_id:
            raise HTTPException(status_code=400, detail="You cannot follow yourself")
        if self.is_following(follower_id, following_id):
            raise HTTPException(status_code=409, detail="Already following this user")
        try:
            self.supabase.table("follows").insert({
                "follower_id": follower_id,
                "following_id": following_id
            }).execute()
        except Exception as e:
            # unique (follower_id, following_id) lost a race with another request
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise HTTPException(status_code=409, detail="Already following this user")
            raise backend_error(e)
        logger.info("%s followed %s", follower_id, following_id)

    def unfollow(self, follower_id: str, following_id: str) -> None:
        try:
            result = self.supabase.table("follows")\
                .delete()\
                .eq("follower_id", follower_id)\
                .eq("following_id", following_id)\
                .execute()
        except Exception as e:
            raise backend_error(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="You are not following this user")
        logger.info("%s unfollowed %s", follower_id, following_id)

    def _list(self, embed: str, column: str, user_id: str) -> List[ProfileResponse]:
        try:
            result = self.supabase.table("follows")\
                .select(embed)\
                .eq(column, user_id)\
                .execute()
        except Exception as e:
            raise backend_error(e)
        return [ProfileResponse(**row["profiles"]) for row in result.data or [] if row.get("profiles")]

    def list_followers(self, user_id: str) -> List[ProfileResponse]:
        """Profiles following user_id"""
        return self._list(FOLLOWER_PROFILE, "following_id", user_id)

    def list_following(self, user_id: str) -> List[ProfileResponse]:
        """Profiles user_id follows"""
        return self._list(FOLLOWING_PROFILE, "follower_id", user_id)

    def load_state(self, viewer_id: str, profile: ProfileResponse) -> FollowState:
        own_profile = viewer_id == profile.id
        return FollowState(
            profile=profile,
            follower_count=self.count_followers(profile.id),
            following_count=self.count_following(profile.id),
            is_following=False if own_profile else self.is_following(viewer_id, profile.id),
            can_follow=not own_profile,
        )

    def toggle_follow(self, viewer_id: str, state: FollowState) -> FollowToggleResponse:
        """Follow or unfollow depending on the loaded state, adjusting counts locally"""
        if not state.can_follow:
            raise HTTPException(status_code=400, detail="You cannot follow yourself")

        username = state.profile.username
        if state.is_following:
            self.unfollow(viewer_id, state.profile.id)
            return FollowToggleResponse(
                **state.model_dump(exclude={"is_following", "follower_count"}),
                is_following=False,
                follower_count=max(state.follower_count - 1, 0),
                message=f"Unfollowed @{username}",
            )

        self.follow(viewer_id, state.profile.id)
        return FollowToggleResponse(
            **state.model_dump(exclude={"is_following", "follower_count"}),
            is_following=True,
            follower_count=state.follower_count + 1,
            message=f"Following @{username}",
        )
