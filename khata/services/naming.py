"""
Name rules shared by every name-keyed table

- Lookups are exact matches, case-insensitive, ignoring surrounding whitespace.
  Each name-keyed row stores ``name_key`` (trimmed and case-folded in Python)
  and lookups compare against it, so non-ASCII names match too.
- Catalogue names (clients, cylinder types, vegetable names) must be unique
- Party names (customers, employees, suppliers) are stored in title case and
  resolved with find_or_create_party
"""

import logging
import re
from typing import Optional, Tuple, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.exceptions import DuplicateNameError, InvalidFormValue

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

_WORD_START = re.compile(r"\b\w")


def normalize_name(name: Optional[str]) -> str:
    """Trim a name, rejecting empty input"""
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidFormValue("name is required")
    return cleaned


def to_title_case(name: Optional[str]) -> str:
    """"  ali  KHAN" -> "Ali Khan" """
    return _WORD_START.sub(lambda m: m.group(0).upper(), normalize_name(name).lower())


def name_key(name: str) -> str:
    """Lookup key of a name: "  Ömer " -> "ömer" """
    return name.strip().casefold()


def set_name(row, name: str) -> None:
    """Assign ``name`` together with its lookup key"""
    row.name = name
    row.name_key = name_key(name)


def _name_matches(model, name: str):
    return model.name_key == name_key(name)


async def find_by_name(db: AsyncSession, model: Type[ModelT], name: str) -> Optional[ModelT]:
    """First row whose name equals ``name`` ignoring case and surrounding spaces"""
    result = await db.execute(
        select(model).where(_name_matches(model, name)).order_by(model.id).limit(1)
    )
    return result.scalars().first()


async def ensure_unique_name(
    db: AsyncSession,
    model,
    name: str,
    exclude_id: Optional[int] = None,
) -> None:
    """Raise DuplicateNameError if another row already uses ``name``

    The row being updated (``exclude_id``) never conflicts with itself, so a
    rename to a different casing of its own name is allowed.
    """
    query = select(model.id).where(_name_matches(model, name))
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    existing = (await db.execute(query.limit(1))).scalar_one_or_none()
    if existing is not None:
        logger.warning(f"Duplicate {model.__tablename__} name rejected: {name!r} (clashes with id={existing})")
        raise DuplicateNameError(f"{name} already exists")


async def find_or_create_party(
    db: AsyncSession,
    model: Type[ModelT],
    name: str,
    phone: Optional[str] = None,
    **defaults,
) -> Tuple[ModelT, bool]:
    """Resolve a free-text party name to a row, creating it on first use

    The name is title-cased before matching and storing. An existing party's
    phone is only replaced by a non-empty ``phone``; it is never blanked.

    Returns (party, created).
    """
    title_name = to_title_case(name)
    phone = (phone or "").strip() or None

    party = await find_by_name(db, model, title_name)
    if party is not None:
        if phone:
            party.phone = phone
        return party, False

    party = model(name=title_name, name_key=name_key(title_name), phone=phone, **defaults)
    db.add(party)
    await db.flush()
    logger.info(f"Created {model.__tablename__} {party.id}: {title_name}")
    return party, True
