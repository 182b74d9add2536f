# flashfix/models/review.py

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from flashfix.database import Base

class Review(Base):
    __tablename__ = "tb_reviews"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("tb_orders.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("tb_users.id"), nullable=False)
    technician_id = Column(Integer, ForeignKey("tb_users.id"), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())

    order = relationship("Order", back_populates="reviews")
