"""
Party ledger reconstruction.

A ledger is rebuilt on every request from a party's orders, itemized payments
and adjustments (refunds or returns). Orders are debits for their full total;
payments and adjustments are credits. Entries are ordered by date and carry a
running balance.

Paid amounts are recorded twice: as itemized payment rows and as the order's
aggregate paid field. Older orders may only have the aggregate. The summary
takes the larger of the two sums, and any part of an order's aggregate that
no itemized payment covers becomes a synthetic "historical" payment entry
dated on the order date.
"""

import enum
import logging
from decimal import Decimal
from typing import List, Optional

from crud.ledger_sources import LedgerSource
from schemas.ledgers import (
    Ledger,
    LedgerAdjustment,
    LedgerEntry,
    LedgerEntryType,
    LedgerOrder,
    LedgerOverviewItem,
    LedgerSummary,
)
from utils.date_range import DateRange, in_range

logger = logging.getLogger("ledgers")

ZERO = Decimal(0)


class LedgerNotFound(LookupError):
    def __init__(self, party_label: str, party_id):
        self.party_label = party_label
        self.party_id = party_id
        super().__init__(f"{party_label} not found")


class LedgerErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    DATA_ACCESS = "data_access"


class LedgerError:
    def __init__(self, kind: LedgerErrorKind, message: str, cause: Optional[BaseException] = None):
        self.kind = kind
        self.message = message
        self.cause = cause

    def __repr__(self):
        return f"LedgerError(kind={self.kind.name}, message={self.message!r})"


class LedgerResult:
    """Either a built ledger or the reason it could not be built."""

    def __init__(self, ledger: Optional[Ledger] = None, error: Optional[LedgerError] = None):
        if (ledger is None) == (error is None):
            raise ValueError("LedgerResult needs exactly one of ledger or error")
        self.ledger = ledger
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Ledger:
        """Return the ledger, raising LedgerNotFound or the original data-access error."""
        if self.error is None:
            return self.ledger
        raise self.error.cause


def sum_itemized_payments(order: LedgerOrder) -> Decimal:
    return sum((p.amount for p in order.payments), ZERO)


def reconcile_total_paid(orders: List[LedgerOrder]) -> Decimal:
    """
    Total paid across orders: the larger of the itemized payment sum and the
    aggregate paid sum, never their sum.

    Known approximation: when both mechanisms record the same payment without
    one containing the other, the larger sum can still over-count.
    """
    itemized = sum((sum_itemized_payments(o) for o in orders), ZERO)
    aggregate = sum((o.amount_paid for o in orders), ZERO)
    return max(itemized, aggregate)


def historical_payment_entries(orders: List[LedgerOrder]) -> List[LedgerEntry]:
    entries = []
    for order in orders:
        if order.amount_paid <= 0:
            continue
        covered = sum_itemized_payments(order)
        uncovered = order.amount_paid - covered
        if uncovered <= 0:
            continue
        coverage = "Partial" if covered > 0 else "Full"
        entries.append(LedgerEntry(
            id=f"historical-{order.id}",
            date=order.order_date,
            type=LedgerEntryType.PAYMENT,
            reference=order.order_number,
            description=f"Payment - Historical ({coverage})",
            credit=uncovered,
        ))
    return entries


def _payment_description(method: Optional[str], reference_number: Optional[str]) -> str:
    description = f"Payment - {method or 'Unspecified'}"
    if reference_number:
        description += f" ({reference_number})"
    return description


def compose_entries(
    source: LedgerSource,
    orders: List[LedgerOrder],
    adjustments: List[LedgerAdjustment],
) -> List[LedgerEntry]:
    """Combine all events and sort by date.

    Same-date entries keep the composition order: orders, adjustments, itemized
    payments, historical payments. sorted() is stable, so that order is the tie-break.
    """
    entries = [
        LedgerEntry(
            id=f"order-{order.id}",
            date=order.order_date,
            type=LedgerEntryType.ORDER,
            reference=order.order_number,
            description=f"{source.order_label} - {order.status}",
            debit=order.total_amount,
        )
        for order in orders
    ]
    entries.extend(
        LedgerEntry(
            id=f"adjustment-{adjustment.id}",
            date=adjustment.adjustment_date,
            type=LedgerEntryType.ADJUSTMENT,
            reference=adjustment.number,
            description=f"{source.adjustment_label} - {adjustment.reason or 'No reason given'}",
            credit=adjustment.amount,
        )
        for adjustment in adjustments
    )
    entries.extend(
        LedgerEntry(
            id=f"payment-{payment.id}",
            date=payment.payment_date,
            type=LedgerEntryType.PAYMENT,
            reference=order.order_number,
            description=_payment_description(payment.method, payment.reference_number),
            credit=payment.amount,
        )
        for order in orders
        for payment in order.payments
    )
    entries.extend(historical_payment_entries(orders))
    return sorted(entries, key=lambda entry: entry.date)


def apply_running_balance(entries: List[LedgerEntry]) -> List[LedgerEntry]:
    running_balance = ZERO
    for entry in entries:
        running_balance += entry.debit - entry.credit
        entry.balance = running_balance
    return entries


def build_ledger(
    source: LedgerSource,
    party_id: int,
    date_range: Optional[DateRange] = None,
    logger: logging.Logger = logger,
) -> LedgerResult:
    """
    Rebuild the ledger of one party.

    Args:
        source: Data access for the party's context (customers or suppliers).
        party_id: The party to build the ledger for.
        date_range: Optional inclusive bounds. Orders are filtered by order date,
            adjustments by their own date. Payments follow their order.
        logger: Receives the summary figures and data-access failures.

    Returns:
        LedgerResult holding the Ledger, a NOT_FOUND error when the party does not
        exist, or a DATA_ACCESS error wrapping whatever the source raised.
    """
    try:
        party = source.find_party(party_id)
    except Exception as e:
        logger.exception(f"Error loading {source.party_label.lower()} {party_id} for ledger")
        return LedgerResult(error=LedgerError(LedgerErrorKind.DATA_ACCESS, str(e), e))

    if party is None:
        not_found = LedgerNotFound(source.party_label, party_id)
        return LedgerResult(error=LedgerError(LedgerErrorKind.NOT_FOUND, str(not_found), not_found))

    try:
        orders = source.find_orders(party_id, date_range)
        adjustments = source.find_adjustments(party_id, date_range)
    except Exception as e:
        logger.exception(f"Error loading ledger events for {source.party_label.lower()} {party_id}")
        return LedgerResult(error=LedgerError(LedgerErrorKind.DATA_ACCESS, str(e), e))

    orders = [o for o in orders if in_range(o.order_date, date_range)]
    adjustments = [a for a in adjustments if in_range(a.adjustment_date, date_range)]

    total_orders = sum((o.total_amount for o in orders), ZERO)
    total_paid = reconcile_total_paid(orders)
    total_adjustments = sum((a.amount for a in adjustments), ZERO)
    current_balance = total_orders - total_paid - total_adjustments

    entries = apply_running_balance(compose_entries(source, orders, adjustments))

    payment_count = sum(len(o.payments) for o in orders)
    logger.info(
        f"{source.party_label} {party_id} ledger calculated - Orders: {total_orders}, Paid: {total_paid}, "
        f"Adjustments: {total_adjustments}, Balance: {current_balance}"
    )
    logger.debug(f"{len(orders)} orders, {payment_count} itemized payments, {len(adjustments)} adjustments")

    return LedgerResult(ledger=Ledger(
        party=party,
        summary=LedgerSummary(
            total_orders=total_orders,
            total_paid=total_paid,
            total_adjustments=total_adjustments,
            current_balance=current_balance,
            total_transactions=len(entries),
        ),
        entries=entries,
    ))


def get_ledger_overview(source: LedgerSource, search: Optional[str] = None) -> List[LedgerOverviewItem]:
    """One all-time summary row per active party, ordered by name."""
    overview = []
    # One ledger build per party
    for party in source.find_parties(search):
        ledger = build_ledger(source, party.id).unwrap()
        overview.append(LedgerOverviewItem(
            id=party.id,
            name=party.name,
            code=party.code,
            email=party.email,
            phone=party.phone,
            address=party.address,
            balance=ledger.summary.current_balance,
            total_orders=ledger.summary.total_orders,
            total_paid=ledger.summary.total_paid,
            total_adjustments=ledger.summary.total_adjustments,
            last_transaction_date=ledger.entries[-1].date if ledger.entries else None,
            transaction_count=ledger.summary.total_transactions,
        ))
    return overview
