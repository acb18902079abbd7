import logging
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from crud.ledgers import (
    LedgerErrorKind,
    LedgerNotFound,
    LedgerResult,
    build_ledger,
    reconcile_total_paid,
)
from schemas.ledgers import (
    LedgerAdjustment,
    LedgerEntryType,
    LedgerOrder,
    LedgerParty,
    LedgerPayment,
)
from utils.date_range import DateRange, in_range


class FakeLedgerSource:
    party_label = "Customer"
    order_label = "Sale"
    adjustment_label = "Refund"

    def __init__(self, parties=None, orders=None, adjustments=None):
        self.parties = {p.id: p for p in (parties or [])}
        self.orders = orders or {}
        self.adjustments = adjustments or {}
        self.calls = []

    def find_party(self, party_id):
        self.calls.append("find_party")
        return self.parties.get(party_id)

    def find_orders(self, party_id, date_range=None):
        self.calls.append("find_orders")
        return [o for o in self.orders.get(party_id, []) if in_range(o.order_date, date_range)]

    def find_adjustments(self, party_id, date_range=None):
        self.calls.append("find_adjustments")
        return [a for a in self.adjustments.get(party_id, []) if in_range(a.adjustment_date, date_range)]

    def find_parties(self, search=None):
        return list(self.parties.values())


class BrokenLedgerSource(FakeLedgerSource):
    def find_orders(self, party_id, date_range=None):
        raise OperationalError("SELECT ...", {}, Exception("connection reset"))


PARTY = LedgerParty(id=1, name="Acme Traders", code="CUST-001")


def D(value):
    return Decimal(value)


def order(id, number, order_date, total, paid="0", status="Approved", payments=()):
    return LedgerOrder(
        id=id,
        order_number=number,
        order_date=order_date,
        total_amount=D(total),
        amount_paid=D(paid),
        status=status,
        payments=list(payments),
    )


def payment(id, payment_date, amount, method="Cash", reference=None):
    return LedgerPayment(id=id, amount=D(amount), method=method, reference_number=reference, payment_date=payment_date)


def adjustment(id, number, adjustment_date, amount, reason="Damaged"):
    return LedgerAdjustment(id=id, number=number, adjustment_date=adjustment_date, amount=D(amount), reason=reason)


def example_source():
    sale = order(
        10, "SO-1", date(2024, 1, 10), "500.00", paid="500.00", status="Paid",
        payments=[payment(20, date(2024, 1, 12), "300.00", method="UPI", reference="TXN-77")],
    )
    refund = adjustment(30, "RF-1", date(2024, 1, 15), "50.00", reason="Broken trays")
    return FakeLedgerSource(parties=[PARTY], orders={1: [sale]}, adjustments={1: [refund]})


def build(source, party_id=1, date_range=None):
    result = build_ledger(source, party_id, date_range)
    assert result.ok
    return result.ledger


def assert_ledger_consistent(ledger):
    previous = D("0")
    for entry in ledger.entries:
        assert entry.balance == previous + entry.debit - entry.credit
        previous = entry.balance
    dates = [e.date for e in ledger.entries]
    assert dates == sorted(dates)


def test_worked_example_entries_and_summary():
    ledger = build(example_source())

    assert [(e.date, e.type, e.debit, e.credit, e.balance) for e in ledger.entries] == [
        (date(2024, 1, 10), LedgerEntryType.ORDER, D("500.00"), D("0"), D("500.00")),
        (date(2024, 1, 10), LedgerEntryType.PAYMENT, D("0"), D("200.00"), D("300.00")),
        (date(2024, 1, 12), LedgerEntryType.PAYMENT, D("0"), D("300.00"), D("0.00")),
        (date(2024, 1, 15), LedgerEntryType.ADJUSTMENT, D("0"), D("50.00"), D("-50.00")),
    ]
    assert ledger.summary.total_orders == D("500.00")
    assert ledger.summary.total_paid == D("500.00")
    assert ledger.summary.total_adjustments == D("50.00")
    assert ledger.summary.current_balance == D("-50.00")
    assert ledger.summary.total_transactions == 4
    assert ledger.entries[-1].balance == ledger.summary.current_balance
    assert ledger.party == PARTY


def test_entry_ids_references_and_descriptions():
    ledger = build(example_source())
    by_id = {e.id: e for e in ledger.entries}

    assert by_id["order-10"].description == "Sale - Paid"
    assert by_id["order-10"].reference == "SO-1"
    assert by_id["historical-10"].description == "Payment - Historical (Partial)"
    assert by_id["historical-10"].reference == "SO-1"
    assert by_id["payment-20"].description == "Payment - UPI (TXN-77)"
    assert by_id["payment-20"].reference == "SO-1"
    assert by_id["adjustment-30"].description == "Refund - Broken trays"
    assert by_id["adjustment-30"].reference == "RF-1"


def test_same_date_entries_keep_composition_order():
    same_day = date(2024, 3, 1)
    sale = order(1, "SO-1", same_day, "100", paid="80", payments=[payment(2, same_day, "30")])
    refund = adjustment(3, "RF-1", same_day, "10")
    source = FakeLedgerSource(parties=[PARTY], orders={1: [sale]}, adjustments={1: [refund]})

    ledger = build(source)

    assert [e.id for e in ledger.entries] == ["order-1", "adjustment-3", "payment-2", "historical-1"]
    assert ledger.entries[-1].balance == D("10")


def test_total_paid_is_max_of_itemized_and_aggregate():
    # itemized 150 vs aggregate 120
    orders = [
        order(1, "SO-1", date(2024, 1, 1), "200", paid="100", payments=[payment(1, date(2024, 1, 2), "150")]),
        order(2, "SO-2", date(2024, 1, 5), "100", paid="20"),
    ]
    assert reconcile_total_paid(orders) == D("150")

    source = FakeLedgerSource(parties=[PARTY], orders={1: orders})
    assert build(source).summary.total_paid == D("150")

    # itemized 40 vs aggregate 140
    orders = [
        order(1, "SO-1", date(2024, 1, 1), "200", paid="100", payments=[payment(1, date(2024, 1, 2), "40")]),
        order(2, "SO-2", date(2024, 1, 5), "100", paid="40"),
    ]
    assert reconcile_total_paid(orders) == D("140")


def test_fully_covered_order_gets_no_historical_entry():
    sale = order(1, "SO-1", date(2024, 1, 1), "100", paid="100", payments=[
        payment(1, date(2024, 1, 2), "60"),
        payment(2, date(2024, 1, 3), "40"),
    ])
    ledger = build(FakeLedgerSource(parties=[PARTY], orders={1: [sale]}))

    assert not [e for e in ledger.entries if e.id.startswith("historical-")]
    assert ledger.summary.current_balance == D("0")


def test_partially_covered_order_gets_one_historical_entry():
    sale = order(1, "SO-1", date(2024, 1, 1), "100", paid="100", payments=[payment(1, date(2024, 1, 2), "40")])
    ledger = build(FakeLedgerSource(parties=[PARTY], orders={1: [sale]}))

    historical = [e for e in ledger.entries if e.id.startswith("historical-")]
    assert len(historical) == 1
    assert historical[0].credit == D("60")
    assert historical[0].date == date(2024, 1, 1)
    assert historical[0].type == LedgerEntryType.PAYMENT


def test_uncovered_order_is_tagged_full_historical_payment():
    sale = order(7, "SO-7", date(2024, 2, 1), "250", paid="250", status="Paid")
    ledger = build(FakeLedgerSource(parties=[PARTY], orders={1: [sale]}))

    assert [e.id for e in ledger.entries] == ["order-7", "historical-7"]
    assert ledger.entries[1].description == "Payment - Historical (Full)"
    assert ledger.entries[1].credit == D("250")


def test_over_covered_order_gets_no_historical_entry():
    sale = order(1, "SO-1", date(2024, 1, 1), "100", paid="30", payments=[payment(1, date(2024, 1, 2), "50")])
    ledger = build(FakeLedgerSource(parties=[PARTY], orders={1: [sale]}))

    assert [e.id for e in ledger.entries] == ["order-1", "payment-1"]
    assert ledger.summary.total_paid == D("50")


def test_every_entry_has_exactly_one_side():
    ledger = build(example_source())
    for entry in ledger.entries:
        assert (entry.debit != 0) != (entry.credit != 0)
        assert entry.debit >= 0 and entry.credit >= 0


def test_every_order_contributes_one_full_debit():
    orders = [
        order(1, "SO-1", date(2024, 1, 1), "100", paid="100"),
        order(2, "SO-2", date(2024, 1, 8), "75.50", paid="10", payments=[payment(5, date(2024, 1, 9), "10")]),
    ]
    ledger = build(FakeLedgerSource(parties=[PARTY], orders={1: orders}))

    debits = [e for e in ledger.entries if e.type == LedgerEntryType.ORDER]
    assert [(e.id, e.debit) for e in debits] == [("order-1", D("100")), ("order-2", D("75.50"))]
    assert_ledger_consistent(ledger)
    assert ledger.entries[-1].balance == ledger.summary.current_balance == D("65.50")


def test_rebuilding_is_idempotent():
    source = example_source()
    first = build(source)
    second = build(source)

    assert first.model_dump_json() == second.model_dump_json()


def test_empty_history_has_zero_balance():
    ledger = build(FakeLedgerSource(parties=[PARTY]))

    assert ledger.entries == []
    assert ledger.summary.current_balance == 0
    assert ledger.summary.total_transactions == 0


def test_date_range_filters_orders_and_adjustments_independently():
    sale_in = order(1, "SO-1", date(2024, 1, 10), "100", payments=[payment(1, date(2024, 2, 20), "40")])
    sale_out = order(2, "SO-2", date(2023, 12, 30), "900")
    refund_out_of_range = adjustment(1, "RF-1", date(2024, 3, 5), "10")
    refund_in_range = adjustment(2, "RF-2", date(2024, 1, 20), "15")
    source = FakeLedgerSource(
        parties=[PARTY],
        orders={1: [sale_out, sale_in]},
        adjustments={1: [refund_in_range, refund_out_of_range]},
    )

    ledger = build(source, date_range=DateRange(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)))

    # Payments follow their order even when dated outside the range
    assert [e.id for e in ledger.entries] == ["order-1", "adjustment-2", "payment-1"]
    assert ledger.summary.total_orders == D("100")
    assert ledger.summary.total_adjustments == D("15")


def test_open_ended_range():
    orders = [order(1, "SO-1", date(2024, 1, 1), "10"), order(2, "SO-2", date(2024, 6, 1), "20")]
    source = FakeLedgerSource(parties=[PARTY], orders={1: orders})

    assert [e.id for e in build(source, date_range=DateRange(start_date=date(2024, 2, 1))).entries] == ["order-2"]
    assert [e.id for e in build(source, date_range=DateRange(end_date=date(2024, 2, 1))).entries] == ["order-1"]


def test_unknown_party_is_not_found_and_nothing_else_is_queried():
    source = example_source()
    result = build_ledger(source, 999)

    assert not result.ok
    assert result.error.kind is LedgerErrorKind.NOT_FOUND
    assert source.calls == ["find_party"]
    with pytest.raises(LedgerNotFound):
        result.unwrap()


def test_data_access_failure_propagates_unchanged(caplog):
    source = BrokenLedgerSource(parties=[PARTY])

    with caplog.at_level(logging.ERROR, logger="ledgers"):
        result = build_ledger(source, 1)

    assert result.ledger is None
    assert result.error.kind is LedgerErrorKind.DATA_ACCESS
    assert isinstance(result.error.cause, OperationalError)
    with pytest.raises(OperationalError):
        result.unwrap()
    assert "Error loading ledger events" in caplog.text


def test_summary_is_logged_through_injected_logger(caplog):
    injected = logging.getLogger("ledger-test")
    with caplog.at_level(logging.INFO, logger="ledger-test"):
        build_ledger(example_source(), 1, logger=injected)

    assert "Balance: -50.00" in caplog.text


def test_result_requires_exactly_one_side():
    with pytest.raises(ValueError):
        LedgerResult()


def test_unevenly_covered_orders_leave_last_balance_apart_from_summary():
    # One order paid only through the aggregate field, the other only through itemized payments
    aggregate_only = order(1, "SO-1", date(2024, 1, 1), "100", paid="100")
    itemized_only = order(2, "SO-2", date(2024, 1, 5), "100", paid="0", payments=[payment(9, date(2024, 1, 6), "100")])
    ledger = build(FakeLedgerSource(parties=[PARTY], orders={1: [aggregate_only, itemized_only]}))

    assert [e.id for e in ledger.entries] == ["order-1", "historical-1", "order-2", "payment-9"]
    assert_ledger_consistent(ledger)
    assert ledger.entries[-1].balance == D("0")
    # max(itemized 100, aggregate 100) counts only one of the two payments
    assert ledger.summary.total_paid == D("100")
    assert ledger.summary.current_balance == D("100")
