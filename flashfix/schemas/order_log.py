# flashfix/schemas/order_log.py

import json
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import List, Optional

class OrderLogCreate(BaseModel):
    notes: str
    images: List[str] = Field(default_factory=list)

    @field_validator("notes")
    @classmethod
    def notes_not_empty(cls, value):
        if not value or not value.strip():
            raise ValueError("Log notes cannot be empty")
        return value.strip()

class OrderLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    action: str
    notes: Optional[str] = None
    images: List[str] = []
    operator_id: int
    operator_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("images", mode="before")
    @classmethod
    def decode_images(cls, value):
        # คอลัมน์ images เก็บเป็น JSON text
        if value is None:
            return []
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value
