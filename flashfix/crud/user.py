# flashfix/crud/user.py

from sqlalchemy.orm import Session
from sqlalchemy import or_
from flashfix.models.user import User
from flashfix.models.order import Order
from flashfix.models.order_log import OrderLog
from flashfix.models.review import Review
from flashfix.models.role import UserRole
from flashfix.schemas.user import UserCreate
from flashfix.services.auth import hash_password
from datetime import datetime
from typing import Optional


def create_user(db: Session, user: UserCreate):
    # แฮชรหัสผ่านก่อนบันทึก
    db_user = User(
        name=user.name.strip(),
        phone=user.phone,
        email=user.email,
        role=UserRole(user.role).value,
        password_hash=hash_password(user.password),
        created_at=datetime.utcnow(),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

# ฟังก์ชันดึงข้อมูล User ด้วย ID
def get_user_by_id(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()

# ฟังก์ชันดึงข้อมูล User ด้วยเบอร์โทร (ใช้เป็น login id)
def get_user_by_phone(db: Session, phone: str):
    return db.query(User).filter(User.phone == phone).first()

# ดึงช่างตาม ID (ต้องมี role เป็น technician)
def get_technician(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id, User.role == UserRole.TECHNICIAN.value).first()

def get_users(db: Session, page: int = 1, limit: int = 20, role: Optional[str] = None, search: Optional[str] = None):
    """
    ดึงรายชื่อผู้ใช้แบบแบ่งหน้า คืนค่า (users, total)
    """
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(User.name.ilike(pattern), User.phone.ilike(pattern), User.email.ilike(pattern)))

    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return users, total

def get_technicians(db: Session):
    return db.query(User).filter(User.role == UserRole.TECHNICIAN.value).order_by(User.name).all()

# ฟังก์ชันอัปเดตข้อมูล User (เฉพาะฟิลด์ที่ส่งมา)
def update_user(db: Session, db_user: User, fields: dict):
    for key in ("name", "email", "avatar"):
        if fields.get(key):
            setattr(db_user, key, fields[key])
    if fields.get("role") is not None:
        db_user.role = UserRole(fields["role"]).value

    db_user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(db_user)
    return db_user

def update_password(db: Session, db_user: User, new_password: str):
    db_user.password_hash = hash_password(new_password)
    db_user.updated_at = datetime.utcnow()
    db.commit()
    return db_user

def user_has_orders(db: Session, user_id: int) -> bool:
    """
    ผู้ใช้ถูกอ้างถึงจากออเดอร์ (ลูกค้า/ช่าง) บันทึกของออเดอร์ หรือรีวิว
    """
    if db.query(Order.id).filter(
        or_(Order.user_id == user_id, Order.technician_id == user_id)
    ).first() is not None:
        return True
    if db.query(OrderLog.id).filter(OrderLog.operator_id == user_id).first() is not None:
        return True
    return db.query(Review.id).filter(
        or_(Review.user_id == user_id, Review.technician_id == user_id)
    ).first() is not None

# ฟังก์ชันลบ User
def delete_user(db: Session, db_user: User):
    db.delete(db_user)
    db.commit()
    return db_user

def get_user_stats(db: Session) -> dict:
    """
    นับจำนวนผู้ใช้แยกตามบทบาท และผู้ใช้ใหม่ของเดือนนี้
    """
    counts = {role.value: 0 for role in UserRole}
    for role, in db.query(User.role).all():
        counts[role] = counts.get(role, 0) + 1

    now = datetime.utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    new_this_month = db.query(User).filter(User.created_at >= month_start).count()

    return {
        "total": sum(counts.values()),
        "customers": counts[UserRole.CUSTOMER.value],
        "technicians": counts[UserRole.TECHNICIAN.value],
        "admins": counts[UserRole.ADMIN.value],
        "finance": counts[UserRole.FINANCE.value],
        "service": counts[UserRole.SERVICE.value],
        "new_users_this_month": new_this_month,
    }
