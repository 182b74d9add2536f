# flashfix/crud/order_log.py

import json
from datetime import datetime
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc
from flashfix.models.order_log import OrderLog
from typing import List, Optional

def add_order_log(
    db: Session,
    order_id: int,
    action: str,
    operator_id: int,
    notes: Optional[str] = None,
    images: Optional[List[str]] = None,
) -> OrderLog:
    """
    เพิ่ม log ของออเดอร์ใน session (ยังไม่ commit)
    ต้อง commit ใน transaction เดียวกับการเปลี่ยนสถานะ
    """
    db_log = OrderLog(
        order_id=order_id,
        action=action,
        notes=notes,
        images=json.dumps(images or []),
        operator_id=operator_id,
        created_at=datetime.utcnow(),
    )
    db.add(db_log)
    db.flush()
    return db_log

def get_order_logs(db: Session, order_id: int) -> List[OrderLog]:
    """
    ดึงประวัติของออเดอร์ ล่าสุดก่อน พร้อมข้อมูลผู้ทำรายการ
    """
    return (
        db.query(OrderLog)
        .options(joinedload(OrderLog.operator))
        .filter(OrderLog.order_id == order_id)
        .order_by(desc(OrderLog.created_at), desc(OrderLog.id))
        .all()
    )

def count_order_logs(db: Session, order_id: int) -> int:
    return db.query(OrderLog).filter(OrderLog.order_id == order_id).count()
