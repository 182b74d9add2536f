# flashfix/models/order.py

import enum
from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from flashfix.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PENDING_ACCEPTANCE = "pending_acceptance"  # รอช่างกดรับงานที่แอดมินมอบหมาย
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAID = "paid"

    @classmethod
    def terminal(cls):
        return {cls.COMPLETED, cls.CANCELLED, cls.PAID}


URGENCY_LEVELS = ("low", "normal", "medium", "high", "urgent")

class Order(Base):
    __tablename__ = "tb_orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_number = Column(String(32), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("tb_users.id"), nullable=False)
    technician_id = Column(Integer, ForeignKey("tb_users.id"), nullable=True, index=True)
    service_id = Column(Integer, ForeignKey("tb_services.id"), nullable=False)
    device_type = Column(String(50), nullable=False)
    device_model = Column(String(100), nullable=False, default="")
    issue_description = Column(Text, nullable=False)
    diagnosis = Column(Text, nullable=True)
    urgency_level = Column(String(20), nullable=False, default="normal")
    preferred_time = Column(DateTime, nullable=True)
    status = Column(String(32), nullable=False, default=OrderStatus.PENDING.value, index=True)
    estimated_price = Column(Float, nullable=False)
    actual_price = Column(Float, nullable=True)
    contact_phone = Column(String(20), nullable=False)
    contact_address = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=True)

    # ความสัมพันธ์กับตารางอื่น
    customer = relationship("User", foreign_keys=[user_id], back_populates="orders")
    technician = relationship("User", foreign_keys=[technician_id], back_populates="assigned_orders")
    service = relationship("Service", back_populates="orders")
    logs = relationship("OrderLog", back_populates="order", order_by="OrderLog.id.desc()")
    payments = relationship("Payment", back_populates="order", order_by="Payment.id.desc()")
    reviews = relationship("Review", back_populates="order", order_by="Review.id.desc()")

    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"

    @property
    def is_terminal(self):
        return self.status in {status.value for status in OrderStatus.terminal()}
