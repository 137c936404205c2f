# Data models

from khata.models.client import Client, ClientItem
from khata.models.cylinder import CylinderType, CylinderAssignment
from khata.models.party import Customer, Employee, Supplier
from khata.models.ledger import DailySaleSheet, DailySale, SalaryRecord
from khata.models.produce import VegetableName, Vegetable, ChickenRecord

__all__ = [
    "Client",
    "ClientItem",
    "CylinderType",
    "CylinderAssignment",
    "Customer",
    "Employee",
    "Supplier",
    "DailySaleSheet",
    "DailySale",
    "SalaryRecord",
    "VegetableName",
    "Vegetable",
    "ChickenRecord",
]
