# flashfix/services/auth.py

import bcrypt
import jwt
import logging
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from fastapi import HTTPException, Depends, Request
from fastapi.security import HTTPBearer
from flashfix.database import get_db
from flashfix.models.user import User
from flashfix.models.role import UserRole
from flashfix.config import settings
from typing import Optional, Dict, Any

logger = logging.getLogger("uvicorn.error")

# ใช้แสดงปุ่ม Authorize ใน Swagger UI เท่านั้น การตรวจ token ทำใน get_current_user
bearer_scheme = HTTPBearer(auto_error=False)

# ฟังก์ชันสำหรับแฮชรหัสผ่าน
def hash_password(password: str) -> str:
    # ใช้ bcrypt ในการแฮชรหัสผ่าน
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

# ฟังก์ชันสำหรับตรวจสอบรหัสผ่าน
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))

# ฟังก์ชันสร้าง JWT Token
def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user.id), "role": user.role, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# ฟังก์ชันตรวจสอบ JWT Token
def verify_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

def extract_token(request: Request) -> Optional[str]:
    """
    ดึง Token จาก Header หรือ Cookie ในรูปแบบ "Bearer <token>"
    """
    raw = request.headers.get("Authorization") or request.cookies.get("Authorization")
    if not raw:
        return None
    parts = raw.strip().strip('"').split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]

def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    _credentials=Depends(bearer_scheme),
) -> User:
    """
    Get current authenticated user based on the bearer token.
    Raise 401 when the token is missing, invalid, expired or points to a deleted user.
    """
    token = extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Access token is required")

    payload = verify_token(token)

    # ✅ ดึง user id จาก Token
    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user

def require_roles(*roles: UserRole):
    """
    Dependency factory: allow only the given roles, 403 otherwise.
    """
    allowed = {role.value for role in roles}

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(f"🚫 Role '{current_user.role}' denied (user {current_user.id}), requires {sorted(allowed)}")
            raise HTTPException(
                status_code=403,
                detail="Insufficient permissions for this operation"
            )
        return current_user
    return role_checker

def authenticate_user(db: Session, phone: str, password: str, role: Optional[UserRole] = None) -> Optional[User]:
    """
    Authenticate a user by phone and password.
    When a role is given the account must also have that role.
    Returns the User if successful, or None if authentication fails.
    """
    user = db.query(User).filter(User.phone == phone).first()
    if not user:
        logger.info(f"🔐 Login failed: unknown phone {phone}")
        return None

    if role is not None and user.role != role.value:
        logger.info(f"🔐 Login failed: user {user.id} is not '{role.value}'")
        return None

    # ตรวจสอบรหัสผ่าน
    if not verify_password(password, user.password_hash):
        logger.info(f"🔐 Login failed: wrong password for user {user.id}")
        return None

    return user
