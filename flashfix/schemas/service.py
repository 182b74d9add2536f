# flashfix/schemas/service.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class ServiceBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    base_price: float

class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    base_price: float = Field(..., ge=0)
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    is_active: bool = True

class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    base_price: Optional[float] = Field(default=None, ge=0)
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str
    base_price: float
    estimated_duration: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

class PopularServiceOut(ServiceOut):
    order_count: int = 0
