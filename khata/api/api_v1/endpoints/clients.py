"""Client API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.client import Client, ClientItem
from khata.schemas.action import ActionResult
from khata.schemas.client import ClientItemListResponse, ClientItemResponse, ClientResponse
from khata.services import catalogue
from khata.services.parsing import clean_optional, parse_date, parse_decimal

router = APIRouter()


@router.get("/", response_model=List[ClientResponse])
async def list_clients(*, db: AsyncSession = Depends(get_db)) -> Any:
    """All clients by name"""
    result = await db.execute(select(Client).order_by(Client.name))
    return result.scalars().all()


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(*, db: AsyncSession = Depends(get_db), client_id: int) -> Any:
    client = await db.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.post("/", response_model=ActionResult)
async def add_client(
    *,
    db: AsyncSession = Depends(get_db),
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
) -> Any:
    async def action():
        client = await catalogue.add_client(db, name, clean_optional(phone))
        return client.id
    return await run_action(db, action)


@router.put("/{client_id}", response_model=ActionResult)
async def update_client(
    *,
    db: AsyncSession = Depends(get_db),
    client_id: int,
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
) -> Any:
    async def action():
        client = await catalogue.update_client(db, client_id, name, clean_optional(phone))
        return client.id
    return await run_action(db, action)


@router.delete("/{client_id}", response_model=ActionResult)
async def delete_client(*, db: AsyncSession = Depends(get_db), client_id: int) -> Any:
    async def action():
        await catalogue.delete_client(db, client_id)
    return await run_action(db, action)


# ===== Client items =====

@router.get("/{client_id}/items", response_model=ClientItemListResponse)
async def list_client_items(*, db: AsyncSession = Depends(get_db), client_id: int) -> Any:
    client = await db.get(Client, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    result = await db.execute(
        select(ClientItem)
        .where(ClientItem.client_id == client_id)
        .order_by(ClientItem.date.desc(), ClientItem.created_at.desc())
    )
    return ClientItemListResponse(
        client=ClientResponse.model_validate(client),
        data=[ClientItemResponse.model_validate(i) for i in result.scalars().all()],
    )


@router.post("/{client_id}/items", response_model=ActionResult)
async def add_client_item(
    *,
    db: AsyncSession = Depends(get_db),
    client_id: int,
    item_name: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
) -> Any:
    async def action():
        item = await catalogue.add_client_item(
            db,
            client_id,
            item_name,
            parse_decimal(quantity, "quantity"),
            parse_date(date),
        )
        return item.id
    return await run_action(db, action)


@router.delete("/items/{item_id}", response_model=ActionResult)
async def delete_client_item(*, db: AsyncSession = Depends(get_db), item_id: int) -> Any:
    async def action():
        await catalogue.delete_client_item(db, item_id)
    return await run_action(db, action)
