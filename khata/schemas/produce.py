"""Vegetable / chicken Schema"""
from typing import Any
from pydantic import BaseModel, field_validator
from datetime import date, datetime


class VegetableNameResponse(BaseModel):
    id: int
    name: str
    unit: str
    created_at: datetime

    class Config:
        from_attributes = True


class VegetableResponse(BaseModel):
    id: int
    name: str
    qty_bought: float
    qty_sold: float
    price_bought: float
    price_sold: float
    # qty_bought - qty_sold, may be negative
    remaining: float
    date: date
    created_at: datetime

    @field_validator('qty_bought', 'qty_sold', 'price_bought', 'price_sold', 'remaining', mode='before')
    @classmethod
    def to_float(cls, v: Any) -> float:
        return float(v) if v is not None else 0.0

    class Config:
        from_attributes = True


class ChickenRecordResponse(BaseModel):
    id: int
    type: str
    quantity: int
    weight_kg: float
    price: float
    date: date
    created_at: datetime

    @field_validator('weight_kg', 'price', mode='before')
    @classmethod
    def to_float(cls, v: Any) -> float:
        return float(v) if v is not None else 0.0

    class Config:
        from_attributes = True
