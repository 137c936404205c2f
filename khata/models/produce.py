"""
Produce models - vegetables and chicken
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Date, DateTime, DECIMAL
from khata.db.base import Base


class VegetableName(Base):
    """Vegetable catalogue entry"""
    __tablename__ = "vegetable_names"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name")
    name_key = Column(String(100), nullable=False, unique=True, comment="Name trimmed and case-folded, used for lookups")
    unit = Column(String(20), nullable=False, default="kg", comment="Unit, e.g. kg / dozen")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<VegetableName {self.name} ({self.unit})>"


class Vegetable(Base):
    """Vegetable bought and sold on a date

    remaining = qty_bought - qty_sold; selling more than was bought is not
    prevented here.
    """
    __tablename__ = "vegetables"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, comment="Vegetable name")
    qty_bought = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Quantity bought")
    qty_sold = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Quantity sold")
    price_bought = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Buying price")
    price_sold = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Selling price")
    date = Column(Date, nullable=False, index=True, comment="Business date")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Vegetable {self.date} {self.name}>"

    @property
    def remaining(self) -> Decimal:
        return (self.qty_bought or Decimal("0")) - (self.qty_sold or Decimal("0"))

    @property
    def profit(self) -> Decimal:
        return (self.price_sold or Decimal("0")) - (self.price_bought or Decimal("0"))


class ChickenRecord(Base):
    """Chicken bought or sold on a date"""
    __tablename__ = "chicken_records"

    id = Column(Integer, primary_key=True, index=True)

    # bought / sold
    type = Column(String(10), nullable=False, index=True, comment="bought / sold")
    quantity = Column(Integer, nullable=False, comment="Number of birds")
    weight_kg = Column(DECIMAL(12, 2), nullable=False, comment="Weight kg")
    price = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Price")
    date = Column(Date, nullable=False, index=True, comment="Business date")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<ChickenRecord {self.date} {self.type} x{self.quantity}>"
