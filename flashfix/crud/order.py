# flashfix/crud/order.py

import random
import string
import time
from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from flashfix.models.order import Order, OrderStatus
from flashfix.models.order_log import OrderLog
from flashfix.models.role import UserRole
from flashfix.models.user import User

ORDER_NUMBER_PREFIX = "XGX"
DEFAULT_CONTACT_ADDRESS = "Pending confirmation"

# ค่า sentinel: ไม่ตรวจ technician_id ใน WHERE
ANY_TECHNICIAN = object()


def build_order_number() -> str:
    """XGX + millisecond timestamp + 4 random upper-case alphanumerics"""
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"{ORDER_NUMBER_PREFIX}{int(time.time() * 1000)}{suffix}"

def create_order(db: Session, customer_id: int, data: dict, estimated_price: float) -> Order:
    """
    เพิ่มออเดอร์ใหม่ใน session (ยังไม่ commit)
    ผู้เรียกต้อง commit พร้อมกับ log ของการสร้างออเดอร์
    """
    db_order = Order(
        order_number=build_order_number(),
        user_id=customer_id,
        service_id=data["service_id"],
        device_type=data["device_type"],
        device_model=data.get("device_model") or "",
        issue_description=data["issue_description"],
        urgency_level=data.get("urgency_level") or "normal",
        preferred_time=data.get("preferred_time"),
        contact_phone=data["contact_phone"],
        contact_address=data.get("contact_address") or DEFAULT_CONTACT_ADDRESS,
        status=OrderStatus.PENDING.value,
        estimated_price=estimated_price,
        created_at=datetime.utcnow(),
    )
    db.add(db_order)
    db.flush()  # ใช้ flush เพื่อให้ได้ id ของ order
    return db_order

def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()

def get_order_with_details(db: Session, order_id: int) -> Optional[Order]:
    """
    ดึงออเดอร์พร้อมลูกค้า ช่าง บริการ และ log (พร้อมชื่อผู้ทำรายการ)
    """
    return (
        db.query(Order)
        .options(
            joinedload(Order.customer),
            joinedload(Order.technician),
            joinedload(Order.service),
            joinedload(Order.logs).joinedload(OrderLog.operator),
            joinedload(Order.payments),
            joinedload(Order.reviews),
        )
        .filter(Order.id == order_id)
        .first()
    )

def list_orders(
    db: Session,
    viewer: User,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    search: Optional[str] = None,
    view: Optional[str] = None,
):
    """
    ดึงรายการออเดอร์ตามสิทธิ์ของผู้ดู คืนค่า (orders, total)

    - view=unclaimed: ออเดอร์ pending ที่ยังไม่มีช่าง (ช่างและพนักงานเท่านั้น)
    - technician: เฉพาะออเดอร์ที่ตัวเองรับผิดชอบ
    - customer: เฉพาะออเดอร์ของตัวเอง
    - admin / finance / service: ทั้งหมด
    """
    query = db.query(Order)

    if view == "unclaimed" and viewer.role != UserRole.CUSTOMER.value:
        query = query.filter(Order.status == OrderStatus.PENDING.value, Order.technician_id.is_(None))
    else:
        if viewer.role == UserRole.TECHNICIAN.value:
            query = query.filter(Order.technician_id == viewer.id)
        elif viewer.role == UserRole.CUSTOMER.value:
            query = query.filter(Order.user_id == viewer.id)
        if status:
            query = query.filter(Order.status == status)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Order.order_number.like(pattern), Order.device_model.like(pattern)))

    total = query.count()
    orders = (
        query.options(
            joinedload(Order.customer),
            joinedload(Order.technician),
            joinedload(Order.service),
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return orders, total

def update_order_if(
    db: Session,
    order_id: int,
    values: dict,
    statuses: Optional[Iterable[OrderStatus]] = None,
    technician_id=ANY_TECHNICIAN,
) -> int:
    """
    UPDATE tb_orders SET ... WHERE id = :id [AND status IN (...)] [AND technician_id = ...]

    คำสั่งเดียวแบบ atomic คืนจำนวนแถวที่ถูกแก้ไข
    0 แถว = เงื่อนไขไม่เป็นจริงแล้ว (แพ้ race ให้รายการอื่น)
    technician_id=None หมายถึงต้องยังไม่มีช่าง (IS NULL)
    ไม่ commit ผู้เรียกต้อง commit พร้อม log
    """
    query = db.query(Order).filter(Order.id == order_id)
    if statuses is not None:
        query = query.filter(Order.status.in_([OrderStatus(s).value for s in statuses]))
    if technician_id is None:
        query = query.filter(Order.technician_id.is_(None))
    elif technician_id is not ANY_TECHNICIAN:
        query = query.filter(Order.technician_id == technician_id)

    values = dict(values)
    if "status" in values:
        values["status"] = OrderStatus(values["status"]).value
    values["updated_at"] = datetime.utcnow()
    return query.update(values, synchronize_session=False)
