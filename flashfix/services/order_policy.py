# flashfix/services/order_policy.py

"""
Who may do what to an order.

Every rule lives in two tables:

* ``ORDER_PERMISSIONS`` maps ``(role, action)`` to the ownership relations
  that allow the action. A relation describes how the acting user stands
  to the order: the customer who placed it (``OWNER``), the technician on it
  (``ASSIGNED``), nobody on it yet (``UNASSIGNED``) or ``ANY``.
* ``STATUS_TARGETS`` maps a role to the statuses it may set through the
  generic status endpoint.

Whether a transition actually applies is decided later by the conditional
UPDATE in ``crud.order.update_order_if``; this module only answers the
permission question.
"""

import enum
from typing import Optional, Set
from flashfix.models.order import Order, OrderStatus
from flashfix.models.role import UserRole
from flashfix.models.user import User


class OrderAction(str, enum.Enum):
    CREATE = "create"
    VIEW = "view"
    ASSIGN = "assign"
    CLAIM = "claim"
    ACCEPT = "accept"
    REJECT = "reject"
    TRANSFER = "transfer"
    UPDATE_STATUS = "update_status"
    UPDATE_DETAILS = "update_details"
    ADD_LOG = "add_log"


class Relation(str, enum.Enum):
    ANY = "any"
    OWNER = "owner"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"


_ANY = frozenset({Relation.ANY})
_OWNER = frozenset({Relation.OWNER})
_ASSIGNED = frozenset({Relation.ASSIGNED})

ORDER_PERMISSIONS = {
    # ลูกค้า: สร้างออเดอร์ และจัดการได้เฉพาะออเดอร์ของตัวเอง
    (UserRole.CUSTOMER, OrderAction.CREATE): _ANY,
    (UserRole.CUSTOMER, OrderAction.VIEW): _OWNER,
    (UserRole.CUSTOMER, OrderAction.UPDATE_STATUS): _OWNER,
    (UserRole.CUSTOMER, OrderAction.ADD_LOG): _OWNER,

    # ช่าง: รับงานจาก pool ได้ทุกออเดอร์ (สถานะตรวจด้วย conditional update)
    # งานอื่นต้องเป็นช่างที่รับผิดชอบออเดอร์นั้นอยู่
    (UserRole.TECHNICIAN, OrderAction.VIEW): frozenset({Relation.ASSIGNED, Relation.UNASSIGNED}),
    (UserRole.TECHNICIAN, OrderAction.CLAIM): _ANY,
    (UserRole.TECHNICIAN, OrderAction.ACCEPT): _ASSIGNED,
    (UserRole.TECHNICIAN, OrderAction.REJECT): _ASSIGNED,
    (UserRole.TECHNICIAN, OrderAction.TRANSFER): _ASSIGNED,
    (UserRole.TECHNICIAN, OrderAction.UPDATE_STATUS): _ASSIGNED,
    (UserRole.TECHNICIAN, OrderAction.UPDATE_DETAILS): _ASSIGNED,
    (UserRole.TECHNICIAN, OrderAction.ADD_LOG): _ASSIGNED,

    (UserRole.ADMIN, OrderAction.VIEW): _ANY,
    (UserRole.ADMIN, OrderAction.ASSIGN): _ANY,
    (UserRole.ADMIN, OrderAction.UPDATE_STATUS): _ANY,
    (UserRole.ADMIN, OrderAction.ADD_LOG): _ANY,

    (UserRole.FINANCE, OrderAction.VIEW): _ANY,
    (UserRole.FINANCE, OrderAction.UPDATE_STATUS): _ANY,
    (UserRole.FINANCE, OrderAction.ADD_LOG): _ANY,

    (UserRole.SERVICE, OrderAction.VIEW): _ANY,
    (UserRole.SERVICE, OrderAction.ADD_LOG): _ANY,
}

STATUS_TARGETS = {
    UserRole.ADMIN: frozenset(OrderStatus),
    UserRole.FINANCE: frozenset(OrderStatus),
    UserRole.CUSTOMER: frozenset({OrderStatus.CANCELLED}),
    UserRole.TECHNICIAN: frozenset({OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED, OrderStatus.PAID}),
}

# บทบาทที่ต้องเปลี่ยนจากสถานะที่ยังไม่สิ้นสุดเท่านั้น
NON_TERMINAL_ONLY = frozenset({UserRole.CUSTOMER})


def _role_of(user: User) -> Optional[UserRole]:
    try:
        return UserRole(user.role)
    except ValueError:
        return None

def relations(user: User, order: Optional[Order]) -> Set[Relation]:
    """How ``user`` stands to ``order``"""
    found = {Relation.ANY}
    if order is None:
        return found
    if order.user_id == user.id:
        found.add(Relation.OWNER)
    if order.technician_id is None:
        found.add(Relation.UNASSIGNED)
    elif order.technician_id == user.id:
        found.add(Relation.ASSIGNED)
    return found

def is_allowed(user: User, action: OrderAction, order: Optional[Order] = None) -> bool:
    role = _role_of(user)
    required = ORDER_PERMISSIONS.get((role, OrderAction(action)))
    if not required:
        return False
    if Relation.ANY in required:
        return True
    return bool(required & relations(user, order))

def allowed_status_targets(user: User) -> frozenset:
    return STATUS_TARGETS.get(_role_of(user), frozenset())

def can_set_status(user: User, order: Order, new_status: OrderStatus) -> bool:
    """
    Generic status change rule:
    admin/finance any status; customer only cancels their own non-terminal order;
    technician only in_progress/completed/paid on an order assigned to them.
    """
    if not is_allowed(user, OrderAction.UPDATE_STATUS, order):
        return False
    if OrderStatus(new_status) not in allowed_status_targets(user):
        return False
    if _role_of(user) in NON_TERMINAL_ONLY and order.is_terminal:
        return False
    return True
