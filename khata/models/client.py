"""
Client model - gas cylinder clients
Clients receive cylinders (CylinderAssignment) and miscellaneous items (ClientItem)
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from khata.db.base import Base


class Client(Base):
    """Client - name is unique case-insensitively (enforced by the engine)"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True, comment="Name")
    name_key = Column(String(100), nullable=False, unique=True, comment="Name trimmed and case-folded, used for lookups")
    phone = Column(String(30), comment="Phone")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship("ClientItem", back_populates="client", cascade="all, delete-orphan")
    assignments = relationship("CylinderAssignment", back_populates="client", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Client {self.id}: {self.name}>"


class ClientItem(Base):
    """Item handed to a client on a date"""
    __tablename__ = "client_items"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    item_name = Column(String(100), nullable=False, comment="Item name")
    quantity = Column(DECIMAL(12, 2), nullable=False, comment="Quantity")
    date = Column(Date, nullable=False, index=True, comment="Business date")

    created_at = Column(DateTime, default=datetime.utcnow)

    client = relationship("Client", back_populates="items")

    def __repr__(self):
        return f"<ClientItem {self.client_id}: {self.item_name} x {self.quantity}>"
