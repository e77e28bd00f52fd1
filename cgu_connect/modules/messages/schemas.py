from pydantic import BaseModel
from typing import Optional, List, Literal
from datetime import datetime
from cgu_connect.modules.profiles.schemas import ProfileResponse


class MessageCreate(BaseModel):
    content: str


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    created_at: datetime
    read: bool = False
    is_own: bool = False
    alignment: Literal["left", "right"] = "left"


class ConversationView(BaseModel):
    """Messages page: conversation list plus the open thread, if any"""
    conversations: List[ProfileResponse] = []
    active_profile: Optional[ProfileResponse] = None
    messages: List[MessageResponse] = []
    draft: str = ""
