# flashfix/routers/orders.py

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from flashfix.database import get_db
from flashfix.models.order import OrderStatus
from flashfix.models.role import UserRole
from flashfix.models.user import User
from flashfix.crud.order import list_orders
from flashfix.schemas.order import (
    OrderCreate,
    OrderOut,
    OrderListItem,
    OrderDetail,
    AssignRequest,
    TransferRequest,
    StatusUpdateRequest,
    DetailsUpdateRequest,
)
from flashfix.schemas.order_log import OrderLogCreate, OrderLogOut
from flashfix.services.auth import get_current_user, require_roles
from flashfix.services import order_workflow
from flashfix.utils.response import success_response, paginated_response

# ทุก route ต้องเข้าสู่ระบบ สิทธิ์ละเอียดตรวจใน order_workflow / order_policy
router = APIRouter(prefix="/orders", tags=["Orders"])

technician_only = require_roles(UserRole.TECHNICIAN)
admin_only = require_roles(UserRole.ADMIN)

# ---------------------------------------------------------------------
# ทุกบทบาท
# ---------------------------------------------------------------------
@router.get("")
def get_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[OrderStatus] = None,
    search: Optional[str] = None,
    view: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ดึงรายการออเดอร์ ผลลัพธ์ขึ้นกับบทบาทของผู้เรียก
    view=unclaimed สำหรับช่างดูงานที่ยังไม่มีคนรับ
    """
    orders, total = list_orders(
        db,
        viewer=current_user,
        page=page,
        limit=limit,
        status=status.value if status else None,
        search=search,
        view=view,
    )
    data = [OrderListItem.model_validate(order) for order in orders]
    return paginated_response("Orders retrieved successfully", data, page, limit, total)

@router.post("")
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = order_workflow.create_order(db, current_user, payload.model_dump())
    return success_response("Order created successfully", OrderOut.model_validate(order), status_code=201)

@router.get("/{order_id}")
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = order_workflow.get_order_detail(db, order_id, current_user)
    return success_response("Order retrieved successfully", OrderDetail.model_validate(order))

@router.put("/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = order_workflow.update_status(db, order_id, current_user, payload.status)
    return success_response("Order status updated", OrderOut.model_validate(order))

@router.get("/{order_id}/logs")
def get_order_logs(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    logs = order_workflow.list_order_logs(db, order_id, current_user)
    return success_response("Order logs retrieved successfully", [OrderLogOut.model_validate(log) for log in logs])

@router.post("/{order_id}/logs")
def add_order_log(
    order_id: int,
    payload: OrderLogCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    เพิ่มบันทึกการซ่อม (ไม่เปลี่ยนสถานะออเดอร์)
    """
    log = order_workflow.add_log(db, order_id, current_user, payload.notes, payload.images)
    return success_response("Log added successfully", OrderLogOut.model_validate(log), status_code=201)

# ---------------------------------------------------------------------
# ช่างเท่านั้น
# ---------------------------------------------------------------------
@router.post("/{order_id}/claim")
def claim_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(technician_only),
):
    order = order_workflow.claim_order(db, order_id, current_user)
    return success_response("Order claimed successfully", OrderOut.model_validate(order))

@router.put("/{order_id}/accept")
def accept_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(technician_only),
):
    order = order_workflow.accept_order(db, order_id, current_user)
    return success_response("Order accepted", OrderOut.model_validate(order))

@router.put("/{order_id}/reject")
def reject_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(technician_only),
):
    order = order_workflow.reject_order(db, order_id, current_user)
    return success_response("Order rejected", OrderOut.model_validate(order))

@router.put("/{order_id}/transfer")
def transfer_order(
    order_id: int,
    payload: Optional[TransferRequest] = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(technician_only),
):
    """
    โอนงานให้ช่างคนอื่น (newTechnicianId) หรือปล่อยงานคืน pool ถ้าไม่ส่งมา
    """
    new_technician_id = payload.new_technician_id if payload else None
    order = order_workflow.transfer_order(db, order_id, current_user, new_technician_id)
    message = "Order abandoned successfully" if new_technician_id is None else "Order transferred successfully"
    return success_response(message, OrderOut.model_validate(order))

@router.put("/{order_id}/details")
def update_order_details(
    order_id: int,
    payload: DetailsUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(technician_only),
):
    order = order_workflow.update_details(
        db,
        order_id,
        current_user,
        diagnosis=payload.diagnosis,
        actual_price=payload.actual_price,
        status=payload.status,
    )
    return success_response("Order details updated", OrderOut.model_validate(order))

# ---------------------------------------------------------------------
# แอดมินเท่านั้น
# ---------------------------------------------------------------------
@router.put("/{order_id}/assign")
def assign_technician(
    order_id: int,
    payload: AssignRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    order = order_workflow.assign_technician(db, order_id, current_user, payload.technician_id)
    return success_response("Technician assigned successfully", OrderOut.model_validate(order))
