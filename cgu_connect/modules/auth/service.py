import hashlib
import logging
import time
from supabase import Client
from cgu_connect.config import settings
from cgu_connect.core.errors import backend_message
from cgu_connect.modules.auth.schemas import (
    LoginRequest, SignupRequest, TokenResponse, SignupResponse, PasswordResetRequest
)
from cgu_connect.modules.auth.validators import AccountValidator
from fastapi import HTTPException
from typing import Dict, Any

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

SIGNUP_SUCCESS = "Account created! Please check your email to verify your account."
ALREADY_REGISTERED = "This email is already registered. Please try logging in instead."
NETWORK_ERROR = "Network error. Please check your connection and try again."
RESET_SENT = "Password reset link sent to your email"


def _cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def signup_error_message(message: str) -> str:
    """Reword the two signup failures users hit most; pass anything else through"""
    if "already registered" in message:
        return ALREADY_REGISTERED
    if "network" in message:
        return NETWORK_ERROR
    return message or "Failed to create account"


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def sign_up(self, signup_data: SignupRequest) -> SignupResponse:
        """Register a new user using Supabase Auth (institutional emails only)"""
        is_valid, errors = AccountValidator.validate_signup(
            signup_data.email, signup_data.password, signup_data.confirm_password
        )
        if not is_valid:
            raise HTTPException(status_code=400, detail=errors[0])

        try:
            auth_response = self.supabase.auth.sign_up({
                "email": signup_data.email,
                "password": signup_data.password,
            })
        except Exception as e:
            error_message = backend_message(e)
            logger.error("Signup error for %s: %s", signup_data.email, error_message)
            detail = signup_error_message(error_message)
            raise HTTPException(status_code=503 if detail == NETWORK_ERROR else 400, detail=detail)

        user = auth_response.user
        return SignupResponse(
            user_id=user.id if user else None,
            email=(user.email if user and user.email else signup_data.email),
            message=SIGNUP_SUCCESS
        )

    def sign_in(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            raise HTTPException(status_code=401, detail=backend_message(e))

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid login credentials")

        session = auth_response.session
        return TokenResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def sign_out(self, token: str) -> bool:
        """Revoke the session behind the token and forget the cached user"""
        _AUTH_USER_CACHE.pop(_cache_key(token), None)
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            # The token expires on its own; the client navigates to /login either way.
            logger.warning("Sign out failed: %s", backend_message(e))
            return False

    def reset_password(self, reset_data: PasswordResetRequest) -> str:
        """Send a password reset email"""
        is_valid, errors = AccountValidator.validate_reset(reset_data.email)
        if not is_valid:
            raise HTTPException(status_code=400, detail=errors[0])

        options = {}
        if settings.password_reset_redirect_url:
            options["redirect_to"] = settings.password_reset_redirect_url
        try:
            self.supabase.auth.reset_password_for_email(reset_data.email, options)
        except Exception as e:
            raise HTTPException(status_code=400, detail=backend_message(e))
        return RESET_SENT

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = backend_message(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")
