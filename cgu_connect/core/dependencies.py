"""
Core dependencies for route protection and the per-request Supabase client
"""

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from cgu_connect.database.supabase_client import SupabaseClient, get_supabase
from cgu_connect.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """The authentication context of the caller, resolved from the JWT"""
    return auth_service.get_current_user(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Like get_current_user, but anonymous callers (or stale tokens) yield None"""
    if credentials is None:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException as e:
        logger.debug("Treating request as anonymous: %s", e)
        return None


def get_user_supabase(token: str = Depends(get_current_token)) -> Client:
    """Supabase client scoped to the caller so row-level security applies"""
    return SupabaseClient.get_user_client(token)
