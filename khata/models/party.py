"""
Party models - customers, employees and suppliers

All three are looked up by a title-cased name, case-insensitively, and created
on first use from the sale / salary / bill forms.

Balance bookkeeping differs per kind:
- Customer: stores a running ``balance``, shifted by each daily sale's remaining
- Employee: stores nothing, the balance is the sum of salary ``remaining`` on read
- Supplier: stores total_bill / paid / remaining directly on the row, no line history
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, DECIMAL
from sqlalchemy.orm import relationship
from khata.db.base import Base


class Customer(Base):
    """Customer - positive balance means the customer owes us"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name (title case)")
    name_key = Column(String(100), nullable=False, unique=True, comment="Name trimmed and case-folded, used for lookups")
    phone = Column(String(30), comment="Phone")
    balance = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Outstanding balance")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sales = relationship("DailySale", back_populates="customer")

    def __repr__(self):
        return f"<Customer {self.name} balance={self.balance}>"


class Employee(Base):
    """Employee"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name (title case)")
    name_key = Column(String(100), nullable=False, unique=True, comment="Name trimmed and case-folded, used for lookups")
    phone = Column(String(30), comment="Phone")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    salary_records = relationship("SalaryRecord", back_populates="employee", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Employee {self.name}>"


class Supplier(Base):
    """Supplier - positive remaining means we owe the supplier"""
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name (title case)")
    name_key = Column(String(100), nullable=False, unique=True, comment="Name trimmed and case-folded, used for lookups")
    phone = Column(String(30), comment="Phone")
    total_bill = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Total bill")
    paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Paid")
    remaining = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="total_bill - paid")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Supplier {self.name} remaining={self.remaining}>"
