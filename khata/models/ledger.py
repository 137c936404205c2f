"""
Ledger line models - daily sales and salary records

For every line ``remaining == total - paid``. A negative remaining is an
overpayment (credit) and is accepted.
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, DECIMAL, UniqueConstraint
from sqlalchemy.orm import relationship
from khata.db.base import Base


class DailySaleSheet(Base):
    """Opening stock snapshot for a day (at most one per date)"""
    __tablename__ = "daily_sale_sheets"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, unique=True, index=True, comment="Business date")
    total_cylinders = Column(Integer, nullable=False, default=0, comment="Cylinders at opening")
    total_gas_kg = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Gas kg at opening")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<DailySaleSheet {self.date}: {self.total_cylinders} / {self.total_gas_kg}kg>"


class DailySale(Base):
    """Sale to a customer"""
    __tablename__ = "daily_sales"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True, comment="Business date")
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    # gas: gas refill, gas_kg is set
    # other: anything else
    sale_type = Column(String(10), nullable=False, default="other", comment="Sale type")
    gas_kg = Column(DECIMAL(12, 2), comment="Gas kg (gas sales only)")

    total_amount = Column(DECIMAL(12, 2), nullable=False, comment="Total")
    paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Paid")
    remaining = Column(DECIMAL(12, 2), nullable=False, comment="total_amount - paid")

    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("Customer", back_populates="sales")

    def __repr__(self):
        return f"<DailySale {self.date} customer={self.customer_id} remaining={self.remaining}>"


class SalaryRecord(Base):
    """Salary for one employee and month (YYYY-MM)"""
    __tablename__ = "salary_records"
    __table_args__ = (
        UniqueConstraint("employee_id", "month", name="uq_salary_employee_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(String(7), nullable=False, index=True, comment="YYYY-MM")
    total_pay = Column(DECIMAL(12, 2), nullable=False, comment="Total pay")
    paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Paid")
    remaining = Column(DECIMAL(12, 2), nullable=False, comment="total_pay - paid")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee", back_populates="salary_records")

    def __repr__(self):
        return f"<SalaryRecord {self.employee_id} {self.month} remaining={self.remaining}>"
