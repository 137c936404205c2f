"""
Debt / balance reconciliation

Two bookkeeping shapes coexist and are kept apart on purpose:

LineHistoryLedger
    A party with one line per period (daily sales per customer, salary per
    employee and month). Every line stores ``remaining = total - paid``. When
    the party keeps a stored running balance (customers), each write shifts
    that balance by the change in ``remaining`` so that

        party.balance == sum(line.remaining for the party's live lines)

    Deleting a line subtracts the line's *stored* remaining. Parties without a
    stored balance (employees) get the same sum aggregated on read.

FlatLedger
    The party row itself carries total / paid / remaining (suppliers). A new
    bill for an existing supplier overwrites those fields; there is no history.

Overpayment (paid > total) gives a negative remaining and is accepted.

Amounts are rounded to cents before anything is written, so the delta added
to a balance is exactly the remaining the line stores.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.exceptions import InvalidFormValue, RecordNotFoundError
from khata.models.ledger import DailySale, DailySaleSheet, SalaryRecord
from khata.models.party import Customer, Employee, Supplier
from khata.services.naming import find_or_create_party
from khata.services.parsing import to_amount

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class LineHistoryLedger:
    """Party + per-period lines

    Attributes:
        party_model: table holding the parties
        line_model: table holding the lines
        party_field: foreign key column on the line pointing at the party
        period_field: date / month column on the line
        total_field: column holding the line total
        stored_balance: party keeps a running ``balance`` column
        one_line_per_period: a second line for the same (party, period)
            replaces the first instead of adding a row
    """

    party_model: Any
    line_model: Any
    party_field: str
    period_field: str
    total_field: str
    stored_balance: bool
    one_line_per_period: bool

    @property
    def name(self) -> str:
        return self.line_model.__tablename__

    async def _shift_balance(self, db: AsyncSession, party, delta: Decimal) -> None:
        """party.balance += delta as one UPDATE statement"""
        if not self.stored_balance or delta == ZERO:
            return
        model = self.party_model
        await db.execute(
            update(model)
            .where(model.id == party.id)
            .values(balance=model.balance + delta)
            .execution_options(synchronize_session=False)
        )
        await db.refresh(party, attribute_names=["balance"])

    async def record_line(
        self,
        db: AsyncSession,
        party_name: str,
        phone: Optional[str],
        period,
        total: Decimal,
        paid: Decimal,
        **extra,
    ):
        """Add a line for a party named ``party_name`` (created on first use)"""
        total, paid = to_amount(total), to_amount(paid)
        remaining = total - paid
        defaults: Dict[str, Any] = {"balance": ZERO} if self.stored_balance else {}
        party, _ = await find_or_create_party(db, self.party_model, party_name, phone, **defaults)

        line = None
        delta = remaining
        if self.one_line_per_period:
            result = await db.execute(
                select(self.line_model).where(
                    getattr(self.line_model, self.party_field) == party.id,
                    getattr(self.line_model, self.period_field) == period,
                )
            )
            line = result.scalars().first()

        if line is not None:
            delta = remaining - line.remaining
            setattr(line, self.total_field, total)
            line.paid = paid
            line.remaining = remaining
            for field, value in extra.items():
                setattr(line, field, value)
            logger.info(f"{self.name}: replaced line {line.id} for {party.name} {period}, remaining={remaining}")
        else:
            line = self.line_model(
                **{
                    self.party_field: party.id,
                    self.period_field: period,
                    self.total_field: total,
                },
                paid=paid,
                remaining=remaining,
                **extra,
            )
            db.add(line)
            await db.flush()
            logger.info(f"{self.name}: recorded line {line.id} for {party.name} {period}, remaining={remaining}")

        await self._shift_balance(db, party, delta)
        return line

    async def update_line(
        self,
        db: AsyncSession,
        line_id: int,
        total: Decimal,
        paid: Decimal,
        phone: Optional[str] = None,
    ):
        """Recompute a line from a new total / paid; a non-empty phone updates the party"""
        line = await db.get(self.line_model, line_id)
        if line is None:
            logger.warning(f"{self.name}: line {line_id} not found for update")
            raise RecordNotFoundError(f"{self.name} {line_id} not found")

        total, paid = to_amount(total), to_amount(paid)
        remaining = total - paid
        delta = remaining - line.remaining
        setattr(line, self.total_field, total)
        line.paid = paid
        line.remaining = remaining

        party = await db.get(self.party_model, getattr(line, self.party_field))
        if party is not None:
            phone = (phone or "").strip()
            if phone:
                party.phone = phone
            await self._shift_balance(db, party, delta)

        logger.info(f"{self.name}: updated line {line_id}, remaining={remaining}")
        return line

    async def delete_line(self, db: AsyncSession, line_id: int) -> Optional[Decimal]:
        """Delete a line and take its stored remaining back off the party

        Returns the removed remaining, or None if the line was already gone.
        """
        line = await db.get(self.line_model, line_id)
        if line is None:
            logger.warning(f"{self.name}: line {line_id} already deleted")
            return None

        remaining = line.remaining
        party = await db.get(self.party_model, getattr(line, self.party_field))
        if party is not None:
            await self._shift_balance(db, party, -remaining)
        await db.delete(line)

        logger.info(f"{self.name}: deleted line {line_id}, reversed remaining={remaining}")
        return remaining

    async def party_balance(self, db: AsyncSession, party_id: int) -> Decimal:
        """Signed sum of the party's outstanding remaining"""
        if self.stored_balance:
            result = await db.execute(
                select(self.party_model.balance).where(self.party_model.id == party_id)
            )
            balance = result.scalar_one_or_none()
            if balance is None:
                raise RecordNotFoundError(f"{self.party_model.__tablename__} {party_id} not found")
            return balance
        return await self.aggregate_balance(db, party_id)

    async def aggregate_balance(self, db: AsyncSession, party_id: int) -> Decimal:
        """Sum of remaining over the party's lines, recomputed from scratch"""
        result = await db.execute(
            select(func.coalesce(func.sum(self.line_model.remaining), 0)).where(
                getattr(self.line_model, self.party_field) == party_id
            )
        )
        return Decimal(str(result.scalar_one()))


@dataclass(frozen=True)
class FlatLedger:
    """Party row carrying total / paid / remaining itself"""

    party_model: Any
    total_field: str

    @property
    def name(self) -> str:
        return self.party_model.__tablename__

    def _apply(self, party, total: Decimal, paid: Decimal) -> None:
        total, paid = to_amount(total), to_amount(paid)
        setattr(party, self.total_field, total)
        party.paid = paid
        party.remaining = total - paid

    async def upsert_by_name(
        self,
        db: AsyncSession,
        party_name: str,
        phone: Optional[str],
        total: Decimal,
        paid: Decimal,
    ) -> Tuple[Any, bool]:
        """Create the party or overwrite the totals of the one with that name"""
        party, created = await find_or_create_party(db, self.party_model, party_name, phone)
        self._apply(party, total, paid)
        logger.info(
            f"{self.name}: {'created' if created else 'overwrote'} {party.name}, remaining={party.remaining}"
        )
        return party, created

    async def update(
        self,
        db: AsyncSession,
        party_id: int,
        phone: Optional[str],
        total: Decimal,
        paid: Decimal,
    ):
        """Edit a party by id; phone is set exactly as given"""
        party = await db.get(self.party_model, party_id)
        if party is None:
            logger.warning(f"{self.name}: {party_id} not found for update")
            raise RecordNotFoundError(f"{self.name} {party_id} not found")
        party.phone = (phone or "").strip() or None
        self._apply(party, total, paid)
        logger.info(f"{self.name}: updated {party_id}, remaining={party.remaining}")
        return party

    async def delete(self, db: AsyncSession, party_id: int) -> bool:
        party = await db.get(self.party_model, party_id)
        if party is None:
            logger.warning(f"{self.name}: {party_id} already deleted")
            return False
        await db.delete(party)
        logger.info(f"{self.name}: deleted {party_id}")
        return True


DAILY_SALES = LineHistoryLedger(
    party_model=Customer,
    line_model=DailySale,
    party_field="customer_id",
    period_field="date",
    total_field="total_amount",
    stored_balance=True,
    one_line_per_period=False,
)

SALARIES = LineHistoryLedger(
    party_model=Employee,
    line_model=SalaryRecord,
    party_field="employee_id",
    period_field="month",
    total_field="total_pay",
    stored_balance=False,
    one_line_per_period=True,
)

SUPPLIERS = FlatLedger(party_model=Supplier, total_field="total_bill")


async def save_day_opening(
    db: AsyncSession,
    day: date,
    total_cylinders: int,
    total_gas_kg: Decimal,
) -> DailySaleSheet:
    """Create or overwrite the opening snapshot for ``day``"""
    result = await db.execute(select(DailySaleSheet).where(DailySaleSheet.date == day))
    sheet = result.scalars().first()
    if sheet is None:
        sheet = DailySaleSheet(date=day)
        db.add(sheet)
    sheet.total_cylinders = total_cylinders
    sheet.total_gas_kg = to_amount(total_gas_kg)
    await db.flush()
    logger.info(f"Day opening {day}: {total_cylinders} cylinders, {total_gas_kg} kg")
    return sheet


SALE_TYPES = ("gas", "other")


async def record_daily_sale(
    db: AsyncSession,
    day: date,
    customer_name: str,
    phone: Optional[str],
    sale_type: Optional[str],
    gas_kg: Optional[Decimal],
    total_amount: Decimal,
    paid: Decimal,
) -> DailySale:
    """Daily sale against a customer; gas_kg is only kept for gas sales"""
    sale_type = sale_type or "other"
    if sale_type not in SALE_TYPES:
        raise InvalidFormValue(f"sale_type must be one of {', '.join(SALE_TYPES)}")
    return await DAILY_SALES.record_line(
        db,
        customer_name,
        phone,
        day,
        total_amount,
        paid,
        sale_type=sale_type,
        gas_kg=gas_kg if sale_type == "gas" else None,
    )
