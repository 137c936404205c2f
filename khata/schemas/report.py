"""Report Schema"""
from typing import List
from pydantic import BaseModel
from datetime import date

from khata.schemas.produce import VegetableResponse, ChickenRecordResponse


class CylinderTypeSummary(BaseModel):
    """Per-type counts; total = unassigned stock + assigned on the day"""
    cylinder_type_id: int
    name: str
    assigned: int
    unassigned: int
    total: int


class CylinderSummary(BaseModel):
    assigned: int = 0
    unassigned: int = 0
    total: int = 0
    by_type: List[CylinderTypeSummary] = []


class VegetableSummary(BaseModel):
    total_buy_price: float = 0.0
    total_sell_price: float = 0.0
    profit: float = 0.0


class ChickenSummary(BaseModel):
    bought_qty: int = 0
    bought_weight: float = 0.0
    bought_price: float = 0.0
    sold_qty: int = 0
    sold_weight: float = 0.0
    sold_price: float = 0.0
    remaining_qty: int = 0
    remaining_weight: float = 0.0
    profit: float = 0.0


class DashboardResponse(BaseModel):
    date: date
    cylinders: CylinderSummary
    vegetables: VegetableSummary
    chicken: ChickenSummary


class ClientItemLine(BaseModel):
    item_name: str
    quantity: float


class ClientItemsGroup(BaseModel):
    client_id: int
    client_name: str
    items: List[ClientItemLine]
    total_quantity: float


class DailyReportResponse(BaseModel):
    date: date
    vegetables: List[VegetableResponse]
    chicken_records: List[ChickenRecordResponse]
    chicken: ChickenSummary
    client_items: List[ClientItemsGroup]
