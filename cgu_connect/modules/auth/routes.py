from fastapi import APIRouter, Depends
from cgu_connect.modules.auth.schemas import (
    LoginRequest, SignupRequest, TokenResponse, SignupResponse,
    PasswordResetRequest, StatusResponse
)
from cgu_connect.modules.auth.service import AuthService
from cgu_connect.core.dependencies import get_auth_service, get_current_token, get_current_user
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    signup_data: SignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create an account with a college email; Supabase sends the verification mail"""
    return service.sign_up(signup_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.sign_in(login_data)


@router.post("/logout", response_model=StatusResponse)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.sign_out(token)
    return StatusResponse(message="Logged out successfully")


@router.post("/forgot-password", response_model=StatusResponse)
async def forgot_password(
    reset_data: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    return StatusResponse(message=service.reset_password(reset_data))


@router.get("/me")
async def me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user
