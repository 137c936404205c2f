"""Client Schema"""
from typing import Optional, List, Any
from pydantic import BaseModel, field_validator
from datetime import date, datetime


class ClientResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClientItemResponse(BaseModel):
    id: int
    client_id: int
    item_name: str
    quantity: float
    date: date
    created_at: datetime

    @field_validator('quantity', mode='before')
    @classmethod
    def to_float(cls, v: Any) -> float:
        return float(v) if v is not None else 0.0

    class Config:
        from_attributes = True


class ClientItemListResponse(BaseModel):
    client: ClientResponse
    data: List[ClientItemResponse]
