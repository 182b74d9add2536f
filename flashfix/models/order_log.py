# flashfix/models/order_log.py

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from flashfix.database import Base

class OrderLog(Base):
    """
    บันทึกการเปลี่ยนแปลงของออเดอร์ (append-only)
    เขียนหนึ่งแถวต่อการเปลี่ยนสถานะหรือการเพิ่มบันทึกการซ่อม
    """
    __tablename__ = "tb_order_logs"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("tb_orders.id"), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)
    images = Column(Text, nullable=True)  # JSON list ของ path รูปภาพ
    operator_id = Column(Integer, ForeignKey("tb_users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    order = relationship("Order", back_populates="logs")
    operator = relationship("User", foreign_keys=[operator_id])

    @property
    def operator_name(self):
        return self.operator.name if self.operator else "Unknown"

