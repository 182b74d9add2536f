# flashfix/services/order_workflow.py

"""
Order lifecycle: pending -> pending_acceptance -> in_progress -> completed / cancelled / paid.

Each transition is a single conditional UPDATE (``crud.order.update_order_if``)
guarded on the status and technician the transition expects. Zero affected
rows means another request changed the order first; the caller gets a 409 and
nothing is written. A successful UPDATE and its OrderLog row are committed
together.
"""

import logging
from typing import Iterable, List, Optional
from fastapi import HTTPException
from sqlalchemy.orm import Session
from flashfix.crud import order as order_crud
from flashfix.crud import order_log as order_log_crud
from flashfix.crud.service import get_active_service
from flashfix.crud.user import get_technician
from flashfix.models.order import Order, OrderStatus
from flashfix.models.order_log import OrderLog
from flashfix.models.user import User
from flashfix.services.order_policy import OrderAction, is_allowed, can_set_status, allowed_status_targets

logger = logging.getLogger("uvicorn.error")


def _load_order(db: Session, order_id: int) -> Order:
    order = order_crud.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order

def _authorize(actor: User, action: OrderAction, order: Optional[Order] = None, detail: str = None):
    if not is_allowed(actor, action, order):
        logger.warning(f"🚫 {actor.role} {actor.id} may not {action.value} order {order.id if order else '-'}")
        raise HTTPException(status_code=403, detail=detail or f"Permission denied to {action.value.replace('_', ' ')} this order")

def _parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid order status")

def _apply_transition(
    db: Session,
    order_id: int,
    actor: User,
    values: dict,
    action: str,
    notes: str,
    conflict_detail: str,
    statuses: Optional[Iterable[OrderStatus]] = None,
    technician_id=order_crud.ANY_TECHNICIAN,
) -> Order:
    """
    Run the conditional update and, if it hit the row, append the log and commit.
    """
    try:
        rows = order_crud.update_order_if(db, order_id, values, statuses=statuses, technician_id=technician_id)
        if rows == 0:
            db.rollback()
            logger.warning(f"⚠️ Order {order_id}: '{action}' by user {actor.id} lost to a concurrent change")
            raise HTTPException(status_code=409, detail=conflict_detail)

        order_log_crud.add_order_log(db, order_id=order_id, action=action, operator_id=actor.id, notes=notes)
        db.commit()
    except HTTPException:
        raise
    except Exception:
        db.rollback()
        raise

    logger.info(f"✅ Order {order_id}: {action} by {actor.role} {actor.id}")
    return order_crud.get_order(db, order_id)

# ---------------------------------------------------------------------
# READS
# ---------------------------------------------------------------------
def get_order_detail(db: Session, order_id: int, actor: User) -> Order:
    order = order_crud.get_order_with_details(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    _authorize(actor, OrderAction.VIEW, order, detail="Access denied")
    return order

def list_order_logs(db: Session, order_id: int, actor: User) -> List[OrderLog]:
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.VIEW, order, detail="Access denied")
    return order_log_crud.get_order_logs(db, order_id)

# ---------------------------------------------------------------------
# TRANSITIONS
# ---------------------------------------------------------------------
def create_order(db: Session, actor: User, data: dict) -> Order:
    """
    ลูกค้าสร้างออเดอร์ใหม่ ราคาประเมินเริ่มต้น = ราคาฐานของบริการ
    """
    _authorize(actor, OrderAction.CREATE, detail="Only customers can create orders")

    service = get_active_service(db, data["service_id"])
    if not service:
        raise HTTPException(status_code=404, detail="Service not found or inactive")

    try:
        order = order_crud.create_order(db, customer_id=actor.id, data=data, estimated_price=service.base_price)
        order_log_crud.add_order_log(db, order_id=order.id, action="create", operator_id=actor.id, notes="Order created")
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"🆕 Order {order.order_number} created by customer {actor.id}")
    db.refresh(order)
    return order

def assign_technician(db: Session, order_id: int, actor: User, technician_id: int) -> Order:
    """
    แอดมินมอบหมายงานให้ช่าง ช่างต้องกดรับงานอีกครั้ง (pending_acceptance)
    """
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.ASSIGN, order)

    technician = get_technician(db, technician_id)
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")

    return _apply_transition(
        db, order.id, actor,
        values={"technician_id": technician.id, "status": OrderStatus.PENDING_ACCEPTANCE},
        statuses=(OrderStatus.PENDING, OrderStatus.PENDING_ACCEPTANCE),
        action="assign",
        notes=f"Order assigned to technician {technician.name}",
        conflict_detail="Order can no longer be assigned",
    )

def claim_order(db: Session, order_id: int, actor: User) -> Order:
    """
    ช่างกดรับงานจาก pool เอง ถ้ามีช่างคนอื่นรับไปก่อนจะได้ 409
    """
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.CLAIM, order)

    return _apply_transition(
        db, order.id, actor,
        values={"technician_id": actor.id, "status": OrderStatus.IN_PROGRESS},
        statuses=(OrderStatus.PENDING,),
        technician_id=None,
        action="claim",
        notes="Order claimed by technician",
        conflict_detail="Failed to claim order. It might already be taken.",
    )

def accept_order(db: Session, order_id: int, actor: User) -> Order:
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.ACCEPT, order, detail="Order is not assigned to you")

    return _apply_transition(
        db, order.id, actor,
        values={"status": OrderStatus.IN_PROGRESS},
        statuses=(OrderStatus.PENDING_ACCEPTANCE,),
        technician_id=actor.id,
        action="accept",
        notes="Technician accepted assignment",
        conflict_detail="Order is no longer waiting for acceptance",
    )

def reject_order(db: Session, order_id: int, actor: User) -> Order:
    """
    ช่างปฏิเสธงานที่ถูกมอบหมาย ออเดอร์กลับเป็น pending และไม่มีช่าง
    """
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.REJECT, order, detail="Order is not assigned to you")

    return _apply_transition(
        db, order.id, actor,
        values={"technician_id": None, "status": OrderStatus.PENDING},
        statuses=(OrderStatus.PENDING_ACCEPTANCE,),
        technician_id=actor.id,
        action="reject",
        notes="Technician rejected assignment; order returned to pending",
        conflict_detail="Order is no longer waiting for acceptance",
    )

def transfer_order(db: Session, order_id: int, actor: User, new_technician_id: Optional[int] = None) -> Order:
    """
    ช่างโอนงานให้ช่างคนอื่น หรือถ้าไม่ระบุช่างคนใหม่ = ปล่อยงานกลับเข้า pool
    """
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.TRANSFER, order, detail="Order is not assigned to you")

    if new_technician_id is None:
        return _apply_transition(
            db, order.id, actor,
            values={"technician_id": None, "status": OrderStatus.PENDING},
            technician_id=actor.id,
            action="abandon",
            notes="Technician abandoned order; returned to pending",
            conflict_detail="Failed to abandon order",
        )

    if new_technician_id == actor.id:
        raise HTTPException(status_code=400, detail="Cannot transfer an order to yourself")

    technician = get_technician(db, new_technician_id)
    if not technician:
        raise HTTPException(status_code=404, detail="Target technician not found")

    return _apply_transition(
        db, order.id, actor,
        values={"technician_id": technician.id, "status": OrderStatus.PENDING_ACCEPTANCE},
        technician_id=actor.id,
        action="transfer",
        notes=f"Order transferred to technician {technician.name}",
        conflict_detail="Failed to transfer order",
    )

def update_status(db: Session, order_id: int, actor: User, new_status) -> Order:
    """
    เปลี่ยนสถานะทั่วไปตามตาราง STATUS_TARGETS
    เงื่อนไขของ UPDATE คือสถานะและช่างต้องยังเหมือนตอนที่อ่านมา
    """
    order = _load_order(db, order_id)
    new_status = _parse_status(new_status)

    if not can_set_status(actor, order, new_status):
        logger.warning(f"🚫 {actor.role} {actor.id} may not set order {order.id} from {order.status} to {new_status.value}")
        raise HTTPException(status_code=403, detail="Permission denied to update order status")

    values = {"status": new_status}
    # pending = ยังไม่มีช่างเสมอ
    if new_status == OrderStatus.PENDING:
        values["technician_id"] = None

    return _apply_transition(
        db, order.id, actor,
        values=values,
        statuses=(order.status,),
        technician_id=order.technician_id,
        action="status_change",
        notes=f"Order status changed to {new_status.value}",
        conflict_detail="Order was modified by another request",
    )

def update_details(
    db: Session,
    order_id: int,
    actor: User,
    diagnosis: Optional[str] = None,
    actual_price: Optional[float] = None,
    status=None,
) -> Order:
    """
    ช่างบันทึกผลวินิจฉัย / ราคาจริง และเปลี่ยนสถานะไปพร้อมกันได้
    """
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.UPDATE_DETAILS, order, detail="Order is not assigned to you")

    values = {}
    if diagnosis is not None:
        values["diagnosis"] = diagnosis
    if actual_price is not None:
        if actual_price < 0:
            raise HTTPException(status_code=400, detail="Actual price must be non-negative")
        values["actual_price"] = actual_price
    if status is not None:
        status = _parse_status(status)
        if status not in allowed_status_targets(actor):
            raise HTTPException(status_code=403, detail="Permission denied to update order status")
        values["status"] = status

    if not values:
        raise HTTPException(status_code=400, detail="No fields to update")

    return _apply_transition(
        db, order.id, actor,
        values=values,
        technician_id=actor.id,
        action="update_details",
        notes=f"Order details updated: {', '.join(sorted(values))}",
        conflict_detail="Order is no longer assigned to you",
    )

def add_log(db: Session, order_id: int, actor: User, notes: str, images: Optional[List[str]] = None) -> OrderLog:
    """
    เพิ่มบันทึกการซ่อม ไม่เปลี่ยนสถานะออเดอร์
    """
    order = _load_order(db, order_id)
    _authorize(actor, OrderAction.ADD_LOG, order, detail="Access denied")

    if not notes or not notes.strip():
        raise HTTPException(status_code=400, detail="Log notes cannot be empty")

    try:
        log = order_log_crud.add_order_log(
            db, order_id=order.id, action="log", operator_id=actor.id, notes=notes.strip(), images=images
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(log)
    return log
