"""Auth schemas (token, login)"""
from pydantic import BaseModel, EmailStr, Field

from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request schema"""
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    """Refresh request schema"""
    refresh_token: str


class TokenResponse(BaseModel):
    """Token pair returned on register, login and refresh"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: UserResponse


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str
