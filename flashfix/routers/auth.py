# flashfix/routers/auth.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flashfix.config import settings
from flashfix.database import get_db
from flashfix.models.user import User
from flashfix.schemas.auth import LoginRequest, RegisterRequest, ProfileUpdate, ChangePasswordRequest, LoginResponse
from flashfix.schemas.user import UserCreate, UserOut
from flashfix.crud.user import create_user, get_user_by_phone, update_user, update_password
from flashfix.services.auth import authenticate_user, create_access_token, get_current_user, verify_password
from flashfix.utils.response import success_response

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["Auth"])


def _login_payload(user: User) -> LoginResponse:
    return LoginResponse(
        user=UserOut.model_validate(user),
        token=create_access_token(user),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

# ---------------------------------------------------------------------
# AUTH ENDPOINTS (public)
# ---------------------------------------------------------------------
@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    เข้าสู่ระบบด้วยเบอร์โทรและรหัสผ่าน ระบุ role เพิ่มได้ (ไม่บังคับ)
    """
    user = authenticate_user(db, payload.phone, payload.password, payload.role)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info(f"🔑 User {user.id} ({user.role}) logged in")
    return success_response("Login successful", _login_payload(user))

@router.post("/register")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    สมัครสมาชิก (ลูกค้าหรือช่าง) และเข้าสู่ระบบให้อัตโนมัติ
    """
    if get_user_by_phone(db, payload.phone):
        raise HTTPException(status_code=409, detail="User with this phone number already exists")

    user = create_user(db, UserCreate(**payload.model_dump()))
    logger.info(f"➕ Registered user {user.id} ({user.role})")
    return success_response("User registered successfully", _login_payload(user), status_code=201)

# ---------------------------------------------------------------------
# ต้องเข้าสู่ระบบ
# ---------------------------------------------------------------------
@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return success_response("User information retrieved successfully", UserOut.model_validate(current_user))

@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    fields = {key: value for key, value in payload.model_dump().items() if value}
    if not fields:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    user = update_user(db, current_user, fields)
    return success_response("User information updated successfully", UserOut.model_validate(user))

@router.put("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    update_password(db, current_user, payload.new_password)
    logger.info(f"🔒 User {current_user.id} changed password")
    return success_response("Password changed successfully")
