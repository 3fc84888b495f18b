from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from models.users import Role
from schemas.common import ORMBase


# Saved address on the user's profile
class Address(BaseModel):
    id: Optional[str] = None
    type: str = "home"  # home, work, other
    street: str
    city: str
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    is_default: bool = False

# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: EmailStr
    password: str

# Schema for user registration requests
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: Optional[str] = None

# Partial profile update; omitted fields are left unchanged
class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    addresses: Optional[List[Address]] = None

class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)

class RefreshRequest(BaseModel):
    refresh_token: str

# Output schema for user profile details; credentials are never included
class UserResponse(ORMBase):
    id: int
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    addresses: List[Address] = []
    is_active: bool
    is_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# Token pair returned by register/login/refresh
class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class AuthResponse(TokenPair):
    user: UserResponse

# Schema for administrative account updates
class AdminUserUpdate(BaseModel):
    role: Optional[Role] = None
    is_active: Optional[bool] = None
