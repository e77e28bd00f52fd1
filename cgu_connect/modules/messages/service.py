import logging
from supabase import Client
from cgu_connect.core.errors import backend_error, backend_message
from cgu_connect.modules.messages.schemas import MessageResponse, ConversationView
from cgu_connect.modules.profiles.schemas import ProfileResponse
from cgu_connect.modules.profiles.service import ProfileService
from typing import List, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    def list_conversation_partner_ids(self, user_id: str) -> List[str]:
        """Ids of everyone user_id has exchanged messages with, most recent first"""
        try:
            result = self.supabase.table("messages")\
                .select("sender_id, receiver_id")\
                .or_(f"sender_id.eq.{user_id},receiver_id.eq.{user_id}")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            raise backend_error(e)

        partner_ids = []
        for row in result.data or []:
            for other_id in (row["sender_id"], row["receiver_id"]):
                if other_id != user_id and other_id not in partner_ids:
                    partner_ids.append(other_id)
        return partner_ids

    def list_conversation_partners(self, user_id: str) -> List[ProfileResponse]:
        return self.profiles.get_profiles_by_ids(self.list_conversation_partner_ids(user_id))

    def get_thread(self, user_id: str, other_id: str) -> List[Dict[str, Any]]:
        """Both directions of the conversation between two users, oldest first"""
        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .or_(
                    f"and(sender_id.eq.{user_id},receiver_id.eq.{other_id}),"
                    f"and(sender_id.eq.{other_id},receiver_id.eq.{user_id})"
                )\
                .order("created_at", desc=False)\
                .execute()
        except Exception as e:
            raise backend_error(e)
        return result.data or []

    def mark_thread_read(self, user_id: str, thread: List[Dict[str, Any]]) -> List[str]:
        """
        Mark the messages user_id received in this thread as read.
        Best-effort: a failure is logged and the ids are still returned so the
        caller can carry on rendering the thread.
        """
        unread_ids = [
            row["id"] for row in thread
            if row["receiver_id"] == user_id and not row.get("read")
        ]
        if not unread_ids:
            return []
        try:
            self.supabase.table("messages")\
                .update({"read": True})\
                .in_("id", unread_ids)\
                .eq("receiver_id", user_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Failed to mark {len(unread_ids)} message(s) read for {user_id}: {backend_message(e)}")
        return unread_ids

    def send_message(self, sender_id: str, receiver_id: str, content: str) -> Dict[str, Any]:
        text = (content or "").strip()
        if not text:
            raise HTTPException(status_code=400, detail="Message cannot be empty")
        if sender_id == receiver_id:
            raise HTTPException(status_code=400, detail="You cannot message yourself")
        try:
            result = self.supabase.table("messages").insert({
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "content": text
            }).execute()
        except Exception as e:
            raise backend_error(e)

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to send message")
        return result.data[0]

    @staticmethod
    def to_response(user_id: str, row: Dict[str, Any]) -> MessageResponse:
        is_own = row["sender_id"] == user_id
        return MessageResponse(
            id=row["id"],
            sender_id=row["sender_id"],
            receiver_id=row["receiver_id"],
            content=row["content"],
            created_at=row["created_at"],
            read=bool(row.get("read")),
            is_own=is_own,
            alignment="right" if is_own else "left",
        )

    def _thread_view(self, user_id: str, other: ProfileResponse) -> List[MessageResponse]:
        thread = self.get_thread(user_id, other.id)
        self.mark_thread_read(user_id, thread)
        return [self.to_response(user_id, row) for row in thread]

    def open_conversation(self, user_id: str, username: str = None) -> ConversationView:
        """Messages page, optionally with the thread with `username` open"""
        view = ConversationView(conversations=self.list_conversation_partners(user_id))
        if username:
            view.active_profile = self.profiles.get_profile_by_username(username)
            view.messages = self._thread_view(user_id, view.active_profile)
        return view

    def send_and_refresh(self, user_id: str, username: str, content: str) -> ConversationView:
        """Send to `username`, then return the refreshed thread with an empty draft"""
        other = self.profiles.get_profile_by_username(username)
        self.send_message(user_id, other.id, content)
        logger.info("%s sent a message to %s", user_id, other.id)

        conversations = self.list_conversation_partners(user_id)
        if not any(p.id == other.id for p in conversations):
            conversations.insert(0, other)
        return ConversationView(
            conversations=conversations,
            active_profile=other,
            messages=self._thread_view(user_id, other),
            draft="",
        )
