"""Cylinder Schema"""
from typing import Any
from pydantic import BaseModel, field_validator
from datetime import date, datetime


class CylinderTypeResponse(BaseModel):
    id: int
    name: str
    weight_kg: float
    cylinder_price: float
    gas_price: float
    no_of_cylinders: int
    created_at: datetime
    updated_at: datetime

    @field_validator('weight_kg', 'cylinder_price', 'gas_price', mode='before')
    @classmethod
    def to_float(cls, v: Any) -> float:
        return float(v) if v is not None else 0.0

    class Config:
        from_attributes = True


class CylinderAssignmentResponse(BaseModel):
    id: int
    client_id: int
    cylinder_type_id: int
    quantity: int
    date: date
    created_at: datetime

    # joined names
    client_name: str = ""
    cylinder_type_name: str = ""

    class Config:
        from_attributes = True
