"""
Catalogue maintenance - clients, cylinder types, vegetable names, client items

Names are trimmed and must be unique ignoring case; a clash raises
DuplicateNameError ("duplicate") before anything is written.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.config import settings
from khata.core.exceptions import InvalidFormValue, RecordNotFoundError
from khata.models.client import Client, ClientItem
from khata.models.cylinder import CylinderType
from khata.models.produce import VegetableName
from khata.services.inventory import return_client_cylinders
from khata.services.naming import ensure_unique_name, name_key, normalize_name, set_name

logger = logging.getLogger(__name__)


async def _get_or_raise(db: AsyncSession, model, row_id: int):
    row = await db.get(model, row_id)
    if row is None:
        logger.warning(f"{model.__tablename__} {row_id} not found")
        raise RecordNotFoundError(f"{model.__tablename__} {row_id} not found")
    return row


# ===== Clients =====

async def add_client(db: AsyncSession, name: str, phone: Optional[str]) -> Client:
    name = normalize_name(name)
    await ensure_unique_name(db, Client, name)

    client = Client(name=name, name_key=name_key(name), phone=phone or None)
    db.add(client)
    await db.flush()
    logger.info(f"Added client {client.id}: {name}")
    return client


async def update_client(db: AsyncSession, client_id: int, name: str, phone: Optional[str]) -> Client:
    name = normalize_name(name)
    await ensure_unique_name(db, Client, name, exclude_id=client_id)

    client = await _get_or_raise(db, Client, client_id)
    set_name(client, name)
    client.phone = phone or None
    logger.info(f"Updated client {client_id}: {name}")
    return client


async def delete_client(db: AsyncSession, client_id: int) -> bool:
    """Delete a client with its items and assignments, returning its cylinders to stock"""
    client = await db.get(Client, client_id)
    if client is None:
        logger.warning(f"Client {client_id} already deleted")
        return False
    await return_client_cylinders(db, client_id)
    await db.delete(client)
    logger.info(f"Deleted client {client_id}")
    return True


async def add_client_item(
    db: AsyncSession,
    client_id: int,
    item_name: str,
    quantity: Decimal,
    day: date,
) -> ClientItem:
    await _get_or_raise(db, Client, client_id)
    item = ClientItem(
        client_id=client_id,
        item_name=normalize_name(item_name),
        quantity=quantity,
        date=day,
    )
    db.add(item)
    await db.flush()
    logger.info(f"Added item {item.item_name} x {quantity} for client {client_id} on {day}")
    return item


async def delete_client_item(db: AsyncSession, item_id: int) -> bool:
    item = await db.get(ClientItem, item_id)
    if item is None:
        return False
    await db.delete(item)
    logger.info(f"Deleted client item {item_id}")
    return True


# ===== Cylinder types =====

def _check_cylinder_fields(no_of_cylinders: int, *amounts: Decimal) -> None:
    if no_of_cylinders < 0:
        raise InvalidFormValue("no_of_cylinders cannot be negative")
    if any(amount < 0 for amount in amounts):
        raise InvalidFormValue("weights and prices cannot be negative")


async def add_cylinder_type(
    db: AsyncSession,
    name: str,
    weight_kg: Decimal,
    cylinder_price: Decimal,
    gas_price: Decimal,
    no_of_cylinders: int,
) -> CylinderType:
    name = normalize_name(name)
    _check_cylinder_fields(no_of_cylinders, weight_kg, cylinder_price, gas_price)
    await ensure_unique_name(db, CylinderType, name)

    cylinder_type = CylinderType(
        name=name,
        name_key=name_key(name),
        weight_kg=weight_kg,
        cylinder_price=cylinder_price,
        gas_price=gas_price,
        no_of_cylinders=no_of_cylinders,
    )
    db.add(cylinder_type)
    await db.flush()
    logger.info(f"Added cylinder type {cylinder_type.id}: {name} with {no_of_cylinders} in stock")
    return cylinder_type


async def update_cylinder_type(
    db: AsyncSession,
    cylinder_type_id: int,
    name: str,
    weight_kg: Decimal,
    cylinder_price: Decimal,
    gas_price: Decimal,
    no_of_cylinders: int,
) -> CylinderType:
    """Edit a type; ``no_of_cylinders`` overwrites the unassigned stock (manual count)"""
    name = normalize_name(name)
    _check_cylinder_fields(no_of_cylinders, weight_kg, cylinder_price, gas_price)
    await ensure_unique_name(db, CylinderType, name, exclude_id=cylinder_type_id)

    cylinder_type = await _get_or_raise(db, CylinderType, cylinder_type_id)
    set_name(cylinder_type, name)
    cylinder_type.weight_kg = weight_kg
    cylinder_type.cylinder_price = cylinder_price
    cylinder_type.gas_price = gas_price
    cylinder_type.no_of_cylinders = no_of_cylinders
    logger.info(f"Updated cylinder type {cylinder_type_id}: {name}, stock set to {no_of_cylinders}")
    return cylinder_type


async def delete_cylinder_type(db: AsyncSession, cylinder_type_id: int) -> bool:
    """Delete a type together with its assignments"""
    cylinder_type = await db.get(CylinderType, cylinder_type_id)
    if cylinder_type is None:
        return False
    await db.delete(cylinder_type)
    logger.info(f"Deleted cylinder type {cylinder_type_id}")
    return True


# ===== Vegetable names =====

async def add_vegetable_name(db: AsyncSession, name: str, unit: Optional[str]) -> VegetableName:
    name = normalize_name(name)
    await ensure_unique_name(db, VegetableName, name)

    vegetable_name = VegetableName(name=name, name_key=name_key(name), unit=unit or settings.DEFAULT_VEGETABLE_UNIT)
    db.add(vegetable_name)
    await db.flush()
    logger.info(f"Added vegetable name {vegetable_name.id}: {name} ({vegetable_name.unit})")
    return vegetable_name


async def update_vegetable_name(
    db: AsyncSession,
    vegetable_name_id: int,
    name: str,
    unit: Optional[str],
) -> VegetableName:
    name = normalize_name(name)
    await ensure_unique_name(db, VegetableName, name, exclude_id=vegetable_name_id)

    vegetable_name = await _get_or_raise(db, VegetableName, vegetable_name_id)
    set_name(vegetable_name, name)
    vegetable_name.unit = unit or settings.DEFAULT_VEGETABLE_UNIT
    logger.info(f"Updated vegetable name {vegetable_name_id}: {name} ({vegetable_name.unit})")
    return vegetable_name


async def delete_vegetable_name(db: AsyncSession, vegetable_name_id: int) -> bool:
    vegetable_name = await db.get(VegetableName, vegetable_name_id)
    if vegetable_name is None:
        return False
    await db.delete(vegetable_name)
    logger.info(f"Deleted vegetable name {vegetable_name_id}")
    return True
