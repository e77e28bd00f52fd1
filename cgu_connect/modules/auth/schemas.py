from pydantic import BaseModel, EmailStr
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str


class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str


class SignupResponse(BaseModel):
    user_id: Optional[str] = None
    email: str
    message: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class StatusResponse(BaseModel):
    message: str
