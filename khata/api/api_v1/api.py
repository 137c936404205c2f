"""V1 API routes (no authentication, the identity provider sits in front)"""
from fastapi import APIRouter

from khata.api.api_v1.endpoints import (
    clients, cylinder_types, cylinders, daily_sales, salary, suppliers,
    vegetable_names, vegetables, chicken, reports, system,
)

api_router = APIRouter()

# Settings / catalogues
api_router.include_router(clients.router, prefix="/clients", tags=["Clients"])
api_router.include_router(cylinder_types.router, prefix="/cylinder-types", tags=["Cylinder types"])
api_router.include_router(vegetable_names.router, prefix="/vegetable-names", tags=["Vegetable names"])

# Day-to-day business
api_router.include_router(cylinders.router, prefix="/cylinders", tags=["Cylinders"])
api_router.include_router(daily_sales.router, prefix="/daily-sales", tags=["Daily sales"])
api_router.include_router(salary.router, prefix="/salary", tags=["Salary"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["Suppliers"])
api_router.include_router(vegetables.router, prefix="/vegetables", tags=["Vegetables"])
api_router.include_router(chicken.router, prefix="/chicken", tags=["Chicken"])

# Reports / system
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(system.router, prefix="/system", tags=["System"])
