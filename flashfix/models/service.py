# flashfix/models/service.py

from sqlalchemy import Column, Integer, Float, String, Text, DateTime, Boolean, func
from sqlalchemy.orm import relationship
from flashfix.database import Base

class Service(Base):
    __tablename__ = "tb_services"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    base_price = Column(Float, nullable=False)
    estimated_duration = Column(Integer, nullable=True)  # นาที
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=True)

    orders = relationship("Order", back_populates="service")

    def __repr__(self):
        return f"<Service(id={self.id}, name='{self.name}', base_price={self.base_price})>"
