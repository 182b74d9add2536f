# flashfix/models/user.py

from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from flashfix.database import Base
from flashfix.models.role import UserRole
import typing

if typing.TYPE_CHECKING:
    from .order import Order
    from .order_log import OrderLog

class User(Base):
    __tablename__ = "tb_users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(100), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)
    avatar = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=True)

    # ความสัมพันธ์กับตารางอื่น
    orders = relationship("Order", foreign_keys="Order.user_id", back_populates="customer")
    assigned_orders = relationship("Order", foreign_keys="Order.technician_id", back_populates="technician")

    def __repr__(self):
        return f"<User(id={self.id}, phone='{self.phone}', role='{self.role}')>"

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN.value
