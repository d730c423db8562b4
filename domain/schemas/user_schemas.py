from pydantic import BaseModel, Field, EmailStr
from typing import Optional, Dict
from datetime import datetime
from uuid import UUID

from domain.enums import UserRole


class UserCreate(BaseModel):
    """Schema for registering a new user"""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=32)


class UserProfileUpdate(BaseModel):
    """Fields a user may change on their own profile"""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone: Optional[str] = Field(None, max_length=32)


class UserAdminUpdate(BaseModel):
    """Fields an admin may change on any account"""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=32)
    role: Optional[UserRole] = None


class UserSummary(BaseModel):
    """Compact user reference embedded in other responses"""

    user_id: UUID
    name: str
    email: str
    role: UserRole

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    """Full user account response"""

    user_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    mess_id: Optional[UUID] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserStatsResponse(BaseModel):
    """Account counts for the admin overview"""

    total_users: int
    active_users: int
    deleted_users: int
    users_with_mess: int
    users_without_mess: int
    by_role: Dict[str, int]
