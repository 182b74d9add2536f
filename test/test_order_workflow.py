# test/test_order_workflow.py

import pytest
from fastapi import HTTPException

from flashfix.crud.order_log import count_order_logs, get_order_logs
from flashfix.database import SessionLocal
from flashfix.models import Order, UserRole
from flashfix.models.order import OrderStatus
from flashfix.services import order_workflow


def _new_order(db, customer, service):
    data = {
        "service_id": service.id,
        "device_type": "phone",
        "device_model": "Mi 11",
        "issue_description": "Battery drains fast",
        "contact_phone": "13900000000",
    }
    return order_workflow.create_order(db, customer, data)

def _expect_http(status_code, func, *args, **kwargs):
    with pytest.raises(HTTPException) as exc_info:
        func(*args, **kwargs)
    assert exc_info.value.status_code == status_code
    return exc_info.value


def test_create_order_starts_pending_with_base_price(db_session, customer, service):
    order = _new_order(db_session, customer, service)

    assert order.status == OrderStatus.PENDING.value
    assert order.technician_id is None
    assert order.estimated_price == service.base_price
    assert order.order_number.startswith("XGX")
    assert order.contact_address == "Pending confirmation"

    logs = get_order_logs(db_session, order.id)
    assert [log.action for log in logs] == ["create"]

def test_create_order_requires_active_service(db_session, customer, service):
    service.is_active = False
    db_session.commit()
    _expect_http(404, _new_order, db_session, customer, service)

def test_only_customers_create_orders(db_session, technicians, service):
    _expect_http(403, _new_order, db_session, technicians[0], service)

def test_assign_reject_claim_scenario(db_session, customer, admin, technicians, service):
    t1, t2, t3 = technicians
    order = _new_order(db_session, customer, service)

    order = order_workflow.assign_technician(db_session, order.id, admin, t1.id)
    assert order.status == OrderStatus.PENDING_ACCEPTANCE.value
    assert order.technician_id == t1.id

    order = order_workflow.reject_order(db_session, order.id, t1)
    assert order.status == OrderStatus.PENDING.value
    assert order.technician_id is None

    order = order_workflow.claim_order(db_session, order.id, t2)
    assert order.status == OrderStatus.IN_PROGRESS.value
    assert order.technician_id == t2.id

    exc = _expect_http(409, order_workflow.claim_order, db_session, order.id, t3)
    assert "already be taken" in exc.detail

    actions = [log.action for log in reversed(get_order_logs(db_session, order.id))]
    assert actions == ["create", "assign", "reject", "claim"]

def test_second_claim_conflicts_and_writes_no_log(db_session, customer, technicians, service):
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, technicians[0])
    before = count_order_logs(db_session, order.id)

    _expect_http(409, order_workflow.claim_order, db_session, order.id, technicians[1])

    assert count_order_logs(db_session, order.id) == before
    assert order_workflow.order_crud.get_order(db_session, order.id).technician_id == technicians[0].id

def test_abandon_returns_order_to_pool(db_session, customer, technicians, service):
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, technicians[0])

    order = order_workflow.transfer_order(db_session, order.id, technicians[0])

    assert order.status == OrderStatus.PENDING.value
    assert order.technician_id is None
    assert get_order_logs(db_session, order.id)[0].action == "abandon"

def test_transfer_to_other_technician(db_session, customer, technicians, service):
    t1, t2, _ = technicians
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, t1)

    order = order_workflow.transfer_order(db_session, order.id, t1, t2.id)
    assert order.technician_id == t2.id
    assert order.status == OrderStatus.PENDING_ACCEPTANCE.value

    order = order_workflow.accept_order(db_session, order.id, t2)
    assert order.status == OrderStatus.IN_PROGRESS.value

def test_transfer_rejects_self_and_unknown_target(db_session, customer, technicians, service):
    t1 = technicians[0]
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, t1)

    _expect_http(400, order_workflow.transfer_order, db_session, order.id, t1, t1.id)
    _expect_http(404, order_workflow.transfer_order, db_session, order.id, t1, customer.id)

def test_transfer_by_unassigned_technician_is_forbidden(db_session, customer, technicians, service):
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, technicians[0])
    _expect_http(403, order_workflow.transfer_order, db_session, order.id, technicians[1])

def test_assign_requires_technician_and_open_order(db_session, customer, admin, technicians, service):
    order = _new_order(db_session, customer, service)
    _expect_http(404, order_workflow.assign_technician, db_session, order.id, admin, customer.id)

    order_workflow.claim_order(db_session, order.id, technicians[0])
    _expect_http(409, order_workflow.assign_technician, db_session, order.id, admin, technicians[1].id)

def test_accept_requires_pending_acceptance(db_session, customer, technicians, service):
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, technicians[0])
    _expect_http(409, order_workflow.accept_order, db_session, order.id, technicians[0])

def test_customer_cancels_only_own_non_terminal_order(db_session, make_user, customer, service):
    other = make_user(UserRole.CUSTOMER, name="Customer B")
    order = _new_order(db_session, customer, service)

    _expect_http(403, order_workflow.update_status, db_session, order.id, other, "cancelled")
    _expect_http(403, order_workflow.update_status, db_session, order.id, customer, "completed")

    order = order_workflow.update_status(db_session, order.id, customer, "cancelled")
    assert order.status == OrderStatus.CANCELLED.value

    _expect_http(403, order_workflow.update_status, db_session, order.id, customer, "cancelled")

def test_technician_status_targets(db_session, customer, technicians, service):
    t1 = technicians[0]
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, t1)

    _expect_http(403, order_workflow.update_status, db_session, order.id, t1, "cancelled")
    order = order_workflow.update_status(db_session, order.id, t1, "completed")
    assert order.status == OrderStatus.COMPLETED.value

    actions = [log.action for log in get_order_logs(db_session, order.id)]
    assert actions[0] == "status_change"

def test_update_status_rejects_unknown_status(db_session, customer, admin, service):
    order = _new_order(db_session, customer, service)
    _expect_http(400, order_workflow.update_status, db_session, order.id, admin, "shipped")

def test_update_details(db_session, customer, technicians, service):
    t1 = technicians[0]
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, t1)

    order = order_workflow.update_details(db_session, order.id, t1, diagnosis="Bad battery", actual_price=180.0)
    assert order.diagnosis == "Bad battery"
    assert order.actual_price == 180.0

    log = get_order_logs(db_session, order.id)[0]
    assert log.action == "update_details"
    assert log.notes == "Order details updated: actual_price, diagnosis"

def test_update_details_validation(db_session, customer, technicians, service):
    t1 = technicians[0]
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, t1)
    before = count_order_logs(db_session, order.id)

    _expect_http(400, order_workflow.update_details, db_session, order.id, t1)
    _expect_http(400, order_workflow.update_details, db_session, order.id, t1, actual_price=-1)
    _expect_http(403, order_workflow.update_details, db_session, order.id, t1, status="cancelled")
    _expect_http(403, order_workflow.update_details, db_session, order.id, technicians[1], diagnosis="x")

    assert count_order_logs(db_session, order.id) == before

def test_add_log_keeps_status(db_session, customer, service):
    order = _new_order(db_session, customer, service)

    log = order_workflow.add_log(db_session, order.id, customer, "  Please call before visiting  ", ["a.jpg"])

    assert log.action == "log"
    assert log.notes == "Please call before visiting"
    assert order_workflow.order_crud.get_order(db_session, order.id).status == OrderStatus.PENDING.value
    _expect_http(400, order_workflow.add_log, db_session, order.id, customer, "   ")

def test_missing_order_is_404(db_session, technicians):
    _expect_http(404, order_workflow.claim_order, db_session, 999, technicians[0])

def test_detail_visibility(db_session, make_user, customer, technicians, service):
    order = _new_order(db_session, customer, service)
    stranger = make_user(UserRole.CUSTOMER, name="Stranger")

    # ช่างทุกคนเห็นออเดอร์ที่ยังไม่มีคนรับ
    assert order_workflow.get_order_detail(db_session, order.id, technicians[1]).id == order.id
    _expect_http(403, order_workflow.get_order_detail, db_session, order.id, stranger)

    order_workflow.claim_order(db_session, order.id, technicians[0])
    _expect_http(403, order_workflow.get_order_detail, db_session, order.id, technicians[1])
    assert order_workflow.get_order_detail(db_session, order.id, technicians[0]).technician_id == technicians[0].id

def test_admin_reopen_clears_technician(db_session, customer, admin, technicians, service):
    t1, t2, _ = technicians
    order = _new_order(db_session, customer, service)
    order_workflow.claim_order(db_session, order.id, t1)

    order = order_workflow.update_status(db_session, order.id, admin, "pending")
    assert order.status == OrderStatus.PENDING.value
    assert order.technician_id is None

    order = order_workflow.claim_order(db_session, order.id, t2)
    assert order.technician_id == t2.id

def test_stale_read_on_accept_conflicts(db_session, monkeypatch, customer, admin, technicians, service):
    t1, t2, _ = technicians
    order = _new_order(db_session, customer, service)
    order_workflow.assign_technician(db_session, order.id, admin, t1.id)
    before = count_order_logs(db_session, order.id)

    real_get_order = order_workflow.order_crud.get_order

    def get_order_then_reassign(db, order_id):
        # อ่านแถวเดิมก่อน แล้วให้อีก session เปลี่ยนช่างก่อนถึง UPDATE
        stale = real_get_order(db, order_id)
        other = SessionLocal()
        try:
            other.query(Order).filter(Order.id == order_id).update(
                {"technician_id": t2.id}, synchronize_session=False
            )
            other.commit()
        finally:
            other.close()
        return stale

    monkeypatch.setattr(order_workflow.order_crud, "get_order", get_order_then_reassign)
    exc = _expect_http(409, order_workflow.accept_order, db_session, order.id, t1)
    monkeypatch.undo()

    assert exc.detail == "Order is no longer waiting for acceptance"
    assert count_order_logs(db_session, order.id) == before
    db_session.expire_all()
    assert order_workflow.order_crud.get_order(db_session, order.id).technician_id == t2.id
