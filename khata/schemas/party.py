"""Customer / employee / supplier Schema"""
from typing import Optional, Any
from pydantic import BaseModel, field_validator
from datetime import datetime


def _money(v: Any) -> float:
    """NULL from the database reads as 0"""
    return float(v) if v is not None else 0.0


class CustomerResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    balance: float = 0.0
    created_at: datetime

    @field_validator('balance', mode='before')
    @classmethod
    def fix_null_balance(cls, v: Any) -> float:
        return _money(v)

    class Config:
        from_attributes = True


class EmployeeResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    # sum of salary remaining, aggregated on read
    balance: float = 0.0
    created_at: datetime

    class Config:
        from_attributes = True


class SupplierResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    total_bill: float = 0.0
    paid: float = 0.0
    remaining: float = 0.0
    created_at: datetime
    updated_at: datetime

    @field_validator('total_bill', 'paid', 'remaining', mode='before')
    @classmethod
    def fix_null_amounts(cls, v: Any) -> float:
        return _money(v)

    class Config:
        from_attributes = True
