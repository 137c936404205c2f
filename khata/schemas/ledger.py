"""Daily sale / salary Schema"""
from typing import Optional, List, Any
from pydantic import BaseModel, field_validator
from datetime import date, datetime


class DailySaleSheetResponse(BaseModel):
    id: int
    date: date
    total_cylinders: int
    total_gas_kg: float

    @field_validator('total_gas_kg', mode='before')
    @classmethod
    def to_float(cls, v: Any) -> float:
        return float(v) if v is not None else 0.0

    class Config:
        from_attributes = True


class DailySaleResponse(BaseModel):
    id: int
    date: date
    customer_id: int
    sale_type: str
    gas_kg: Optional[float] = None
    total_amount: float
    paid: float
    remaining: float
    created_at: datetime

    customer_name: str = ""
    customer_phone: Optional[str] = None

    @field_validator('total_amount', 'paid', 'remaining', mode='before')
    @classmethod
    def to_float(cls, v: Any) -> float:
        return float(v) if v is not None else 0.0

    class Config:
        from_attributes = True


class DailySaleDayResponse(BaseModel):
    """Everything on the daily sales page for one date"""
    date: date
    opening: Optional[DailySaleSheetResponse] = None
    data: List[DailySaleResponse]
    total_amount: float = 0.0
    total_paid: float = 0.0
    total_remaining: float = 0.0
    total_gas_kg: float = 0.0


class SalaryRecordResponse(BaseModel):
    id: int
    employee_id: int
    month: str
    total_pay: float
    paid: float
    remaining: float
    created_at: datetime
    updated_at: datetime

    employee_name: str = ""
    employee_phone: Optional[str] = None

    @field_validator('total_pay', 'paid', 'remaining', mode='before')
    @classmethod
    def to_float(cls, v: Any) -> float:
        return float(v) if v is not None else 0.0

    class Config:
        from_attributes = True
