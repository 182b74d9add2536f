# flashfix/schemas/order.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import List, Optional
from flashfix.models.order import OrderStatus, URGENCY_LEVELS
from flashfix.utils.validators import require_text
from flashfix.schemas.order_log import OrderLogOut
from flashfix.schemas.service import ServiceBrief
from flashfix.schemas.user import UserBrief

# ---------------------------------------------------------------------
# REQUEST BODIES (รับได้ทั้ง camelCase ของ frontend เดิมและ snake_case)
# ---------------------------------------------------------------------
class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service_id: int = Field(..., alias="serviceId")
    device_type: str = Field(..., alias="deviceType")
    device_model: str = Field(default="", alias="deviceModel")
    issue_description: str = Field(..., alias="issueDescription")
    urgency_level: str = Field(default="normal", alias="urgencyLevel")
    preferred_time: Optional[datetime] = Field(default=None, alias="preferredTime")
    contact_phone: str = Field(..., alias="contactPhone")
    contact_address: Optional[str] = Field(default=None, alias="contactAddress")

    @field_validator("device_type", "issue_description", "contact_phone")
    @classmethod
    def not_blank(cls, value):
        return require_text(value)

    @field_validator("urgency_level")
    @classmethod
    def check_urgency(cls, value):
        if value not in URGENCY_LEVELS:
            raise ValueError(f"urgency_level must be one of {', '.join(URGENCY_LEVELS)}")
        return value

class AssignRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    technician_id: int = Field(..., alias="technicianId")

class TransferRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # ไม่ระบุช่างคนใหม่ = ปล่อยงานคืนกลับเข้า pool
    new_technician_id: Optional[int] = Field(default=None, alias="newTechnicianId")

class StatusUpdateRequest(BaseModel):
    status: OrderStatus

class DetailsUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    diagnosis: Optional[str] = None
    actual_price: Optional[float] = Field(default=None, ge=0, alias="actualPrice")
    status: Optional[OrderStatus] = None

# ---------------------------------------------------------------------
# RESPONSES
# ---------------------------------------------------------------------
class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    user_id: int
    technician_id: Optional[int] = None
    service_id: int
    device_type: str
    device_model: str
    issue_description: str
    diagnosis: Optional[str] = None
    urgency_level: str
    preferred_time: Optional[datetime] = None
    status: str
    estimated_price: float
    actual_price: Optional[float] = None
    contact_phone: str
    contact_address: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class OrderListItem(OrderOut):
    customer: Optional[UserBrief] = None
    technician: Optional[UserBrief] = None
    service: Optional[ServiceBrief] = None

class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    amount: float
    method: str
    status: str
    transaction_id: Optional[str] = None
    created_at: datetime

class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    user_id: int
    technician_id: Optional[int] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime

class OrderDetail(OrderListItem):
    logs: List[OrderLogOut] = []
    payments: List[PaymentOut] = []
    reviews: List[ReviewOut] = []
