"""
Cylinder models

CylinderType.no_of_cylinders is the *unassigned* stock. Assigning cylinders to
a client moves them out of it, returning or deleting an assignment moves them
back, so for every type

    no_of_cylinders + sum(assignment.quantity) == fleet size
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, DECIMAL, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from khata.db.base import Base


class CylinderType(Base):
    """Cylinder type and its unassigned stock"""
    __tablename__ = "cylinder_types"
    __table_args__ = (
        CheckConstraint("no_of_cylinders >= 0", name="ck_cylinder_types_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name, e.g. 12kg")
    name_key = Column(String(100), nullable=False, unique=True, comment="Name trimmed and case-folded, used for lookups")
    weight_kg = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Gas weight per cylinder")
    cylinder_price = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Cylinder price")
    gas_price = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Gas price")
    no_of_cylinders = Column(Integer, nullable=False, default=0, comment="Unassigned cylinders in stock")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    assignments = relationship("CylinderAssignment", back_populates="cylinder_type", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<CylinderType {self.name} available={self.no_of_cylinders}>"


class CylinderAssignment(Base):
    """Cylinders handed to a client on a date

    One row per (client, type, date): assigning again on the same day adds to
    the existing quantity.
    """
    __tablename__ = "cylinder_assignments"
    __table_args__ = (
        UniqueConstraint("client_id", "cylinder_type_id", "date", name="uq_assignment_client_type_date"),
        CheckConstraint("quantity >= 1", name="ck_assignment_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    cylinder_type_id = Column(Integer, ForeignKey("cylinder_types.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, comment="Cylinders assigned")
    date = Column(Date, nullable=False, index=True, comment="Assignment date")

    created_at = Column(DateTime, default=datetime.utcnow)

    client = relationship("Client", back_populates="assignments")
    cylinder_type = relationship("CylinderType", back_populates="assignments")

    def __repr__(self):
        return f"<CylinderAssignment {self.client_id}:{self.cylinder_type_id} {self.date} x{self.quantity}>"
