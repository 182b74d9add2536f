# flashfix/schemas/auth.py

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from flashfix.models.role import UserRole
from flashfix.schemas.user import UserOut
from flashfix.utils.validators import PHONE_PATTERN, MIN_PASSWORD_LENGTH

# บทบาทที่สมัครสมาชิกเองได้ บทบาทอื่นต้องให้แอดมินสร้าง
SELF_REGISTER_ROLES = (UserRole.CUSTOMER, UserRole.TECHNICIAN)

class LoginRequest(BaseModel):
    phone: str = Field(..., pattern=PHONE_PATTERN)
    password: str = Field(..., min_length=1)
    role: Optional[UserRole] = None

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    email: Optional[EmailStr] = None
    role: UserRole = UserRole.CUSTOMER

    @field_validator("role")
    @classmethod
    def role_must_be_self_service(cls, value):
        if value not in SELF_REGISTER_ROLES:
            raise ValueError("Invalid role")
        return value

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None

class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=MIN_PASSWORD_LENGTH)

class LoginResponse(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"
    expires_in: int
