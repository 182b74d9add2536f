# flashfix/routers/users.py

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from flashfix.database import get_db
from flashfix.models.role import UserRole
from flashfix.models.user import User
from flashfix.schemas.user import UserCreate, UserUpdate, UserOut, UserBrief, PasswordReset, UserStats
from flashfix.crud import user as user_crud
from flashfix.services.auth import get_current_user, require_roles
from flashfix.utils.response import success_response, paginated_response

logger = logging.getLogger("uvicorn.error")

# ทุก route ต้องเข้าสู่ระบบ
router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_current_user)],
)

admin_only = require_roles(UserRole.ADMIN)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = user_crud.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

def _ensure_self_or_admin(current_user: User, user_id: int):
    # ผู้ใช้ทั่วไปดู/แก้ไขได้เฉพาะข้อมูลของตัวเอง แอดมินทำได้ทุกคน
    if not current_user.is_admin and current_user.id != user_id:
        raise HTTPException(status_code=403, detail="Access denied")

# ---------------------------------------------------------------------
# ADMIN ONLY
# ---------------------------------------------------------------------
@router.get("")
def get_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    users, total = user_crud.get_users(
        db, page=page, limit=limit, role=role.value if role else None, search=search
    )
    data = [UserOut.model_validate(user) for user in users]
    return paginated_response("Users retrieved successfully", data, page, limit, total)

@router.get("/stats")
def get_user_stats(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    stats = UserStats(**user_crud.get_user_stats(db))
    return success_response("User statistics retrieved successfully", stats)

@router.get("/technicians")
def get_technicians(db: Session = Depends(get_db), current_user: User = Depends(admin_only)):
    technicians = [UserBrief.model_validate(user) for user in user_crud.get_technicians(db)]
    return success_response("Technicians retrieved successfully", technicians)

@router.post("")
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    if user_crud.get_user_by_phone(db, payload.phone):
        raise HTTPException(status_code=409, detail="User with this phone number already exists")

    user = user_crud.create_user(db, payload)
    logger.info(f"➕ Admin {current_user.id} created user {user.id} ({user.role})")
    return success_response("User created successfully", UserOut.model_validate(user), status_code=201)

@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    if current_user.id == user_id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    user = _get_user_or_404(db, user_id)
    if user_crud.user_has_orders(db, user_id):
        raise HTTPException(status_code=400, detail="Cannot delete user with existing orders")

    user_crud.delete_user(db, user)
    logger.info(f"🗑️ Admin {current_user.id} deleted user {user_id}")
    return success_response("User deleted successfully")

@router.put("/{user_id}/reset-password")
def reset_user_password(
    user_id: int,
    payload: PasswordReset,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    user = _get_user_or_404(db, user_id)
    user_crud.update_password(db, user, payload.new_password)
    return success_response("Password reset successfully")

# ---------------------------------------------------------------------
# SELF OR ADMIN
# ---------------------------------------------------------------------
@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_self_or_admin(current_user, user_id)
    user = _get_user_or_404(db, user_id)
    return success_response("User retrieved successfully", UserOut.model_validate(user))

@router.put("/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_self_or_admin(current_user, user_id)
    if payload.role is not None and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Only administrators can change user roles")

    fields = {key: value for key, value in payload.model_dump().items() if value}
    if not fields:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    user = _get_user_or_404(db, user_id)
    user = user_crud.update_user(db, user, fields)
    return success_response("User updated successfully", UserOut.model_validate(user))
