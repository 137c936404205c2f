"""
Tests for name handling across catalogues and parties.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from khata.core.exceptions import DuplicateNameError, InvalidFormValue
from khata.models.client import Client
from khata.models.party import Customer
from khata.models.produce import VegetableName
from khata.services import catalogue
from khata.services.naming import (
    ensure_unique_name, find_by_name, find_or_create_party, name_key, normalize_name,
    to_title_case,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("ali", "Ali"),
        ("  ali  KHAN ", "Ali  Khan"),
        ("MUHAMMAD", "Muhammad"),
        ("o'neil-smith", "O'Neil-Smith"),
    ],
)
def test_to_title_case(raw, expected):
    assert to_title_case(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_empty_names_are_rejected(raw):
    with pytest.raises(InvalidFormValue) as exc:
        normalize_name(raw)
    assert exc.value.code == "invalid_input"


async def test_find_by_name_ignores_case_and_spaces(db, make_client):
    client_id = await make_client("Ali Traders")

    found = await find_by_name(db, Client, "  ali TRADERS ")
    assert found is not None
    assert found.id == client_id
    assert await find_by_name(db, Client, "Ali Trader") is None


async def test_ensure_unique_name_excludes_the_row_itself(db, make_client):
    client_id = await make_client("Ali Traders")

    await ensure_unique_name(db, Client, "ALI traders", exclude_id=client_id)
    with pytest.raises(DuplicateNameError):
        await ensure_unique_name(db, Client, "ALI traders")


async def test_vegetable_name_duplicates_are_rejected(db):
    await catalogue.add_vegetable_name(db, "Tomato", "kg")
    await db.commit()

    with pytest.raises(DuplicateNameError) as exc:
        await catalogue.add_vegetable_name(db, " tomato ", "kg")
    assert exc.value.code == "duplicate"
    await db.rollback()

    total = (await db.execute(select(func.count(VegetableName.id)))).scalar_one()
    assert total == 1


async def test_vegetable_unit_defaults(db):
    row = await catalogue.add_vegetable_name(db, "Eggs", None)
    assert row.unit == "kg"


async def test_client_can_be_renamed_to_a_variant_of_its_own_name(db, make_client):
    client_id = await make_client("Ali Traders")

    client = await catalogue.update_client(db, client_id, "ALI TRADERS", "0300")
    await db.commit()
    assert client.name == "ALI TRADERS"
    assert client.phone == "0300"


async def test_client_cannot_take_another_clients_name(db, make_client):
    await make_client("Ali Traders")
    other_id = await make_client("Bilal Gas")

    with pytest.raises(DuplicateNameError):
        await catalogue.update_client(db, other_id, "ali traders", None)


async def test_duplicate_client_is_rejected(db, make_client):
    await make_client("Ali Traders")
    with pytest.raises(DuplicateNameError):
        await catalogue.add_client(db, "Ali Traders ", None)


async def test_duplicate_cylinder_type_is_rejected(db, make_cylinder_type):
    await make_cylinder_type("12kg", 5)
    with pytest.raises(DuplicateNameError):
        await catalogue.add_cylinder_type(db, "12KG", Decimal("12"), Decimal("1"), Decimal("1"), 1)


async def test_negative_cylinder_stock_is_invalid(db):
    with pytest.raises(InvalidFormValue):
        await catalogue.add_cylinder_type(db, "45kg", Decimal("45"), Decimal("1"), Decimal("1"), -1)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Ömer ", "ömer"),
        ("ALI Traders", "ali traders"),
        ("Straße", "strasse"),
    ],
)
def test_name_key_is_trimmed_and_case_folded(raw, expected):
    assert name_key(raw) == expected


async def test_non_ascii_party_names_resolve_to_one_row(db):
    first, created = await find_or_create_party(db, Customer, "Ömer", None, balance=Decimal("0"))
    second, created_again = await find_or_create_party(db, Customer, " ömer ", "0300", balance=Decimal("0"))

    assert created is True
    assert created_again is False
    assert second.id == first.id
    assert first.name == "Ömer"
    assert (await db.execute(select(func.count(Customer.id)))).scalar_one() == 1


async def test_non_ascii_catalogue_duplicates_are_rejected(db, make_client):
    await catalogue.add_vegetable_name(db, "Çilek", "kg")
    await make_client("Şahin Gas")

    with pytest.raises(DuplicateNameError):
        await catalogue.add_vegetable_name(db, "çilek", "kg")
    with pytest.raises(DuplicateNameError):
        await catalogue.add_client(db, "şahin gas", None)


async def test_rename_keeps_lookup_key_in_step(db, make_client):
    client_id = await make_client("Ali Traders")

    await catalogue.update_client(db, client_id, "Ömer Traders", None)
    await db.commit()

    assert await find_by_name(db, Client, "ali traders") is None
    found = await find_by_name(db, Client, "ÖMER TRADERS")
    assert found is not None and found.id == client_id
