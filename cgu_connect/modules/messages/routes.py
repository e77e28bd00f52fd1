from fastapi import APIRouter, Depends
from cgu_connect.core.dependencies import get_current_user, get_user_supabase
from cgu_connect.modules.messages.schemas import MessageCreate, ConversationView
from cgu_connect.modules.messages.service import MessageService
from cgu_connect.modules.profiles.schemas import ProfileResponse
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/messages", tags=["messages"])


def get_message_service(supabase: Client = Depends(get_user_supabase)) -> MessageService:
    return MessageService(supabase)


@router.get("/conversations", response_model=List[ProfileResponse])
async def list_conversations(
    user_data: Dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Everyone the current user has exchanged messages with, most recent first"""
    return service.list_conversation_partners(user_data["id"])


@router.get("", response_model=ConversationView)
async def messages_home(
    user_data: Dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    return service.open_conversation(user_data["id"])


@router.get("/thread/{username}", response_model=ConversationView)
async def open_conversation(
    username: str,
    user_data: Dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Open the thread with `username`; their unread messages to the caller become read"""
    return service.open_conversation(user_data["id"], username)


@router.post("/thread/{username}", response_model=ConversationView, status_code=201)
async def send_message(
    username: str,
    message: MessageCreate,
    user_data: Dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    return service.send_and_refresh(user_data["id"], username, message.content)
