# flashfix/models/__init__.py

# นำเข้าโมเดลตามลำดับที่ถูกต้องเพื่อป้องกัน circular import
from flashfix.models.role import UserRole
from flashfix.models.user import User
from flashfix.models.service import Service
from flashfix.models.order import Order, OrderStatus
from flashfix.models.order_log import OrderLog
from flashfix.models.payment import Payment
from flashfix.models.review import Review

# Export all models
__all__ = [
    "UserRole",
    "User",
    "Service",
    "Order",
    "OrderStatus",
    "OrderLog",
    "Payment",
    "Review"
]
