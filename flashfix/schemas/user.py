# flashfix/schemas/user.py

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
from flashfix.models.role import UserRole
from flashfix.utils.validators import PHONE_PATTERN, MIN_PASSWORD_LENGTH

class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    email: Optional[str] = None
    role: str

# Schema สำหรับการแสดงข้อมูล User (ไม่มี password_hash)
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    email: Optional[str] = None
    role: str
    avatar: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

# Schema สำหรับการสร้าง User โดยแอดมิน
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    email: Optional[EmailStr] = None
    role: UserRole = UserRole.CUSTOMER

# Schema สำหรับการอัปเดต User
class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None
    role: Optional[UserRole] = None

class PasswordReset(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_password: str = Field(..., alias="newPassword", min_length=MIN_PASSWORD_LENGTH)

class UserStats(BaseModel):
    total: int
    customers: int
    technicians: int
    admins: int
    finance: int
    service: int
    new_users_this_month: int
