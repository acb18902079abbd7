from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional
import enum

class LedgerEntryType(str, enum.Enum):
    ORDER = "ORDER"
    PAYMENT = "PAYMENT"
    ADJUSTMENT = "ADJUSTMENT"

# Records read from the data store. Sales and purchase data are both mapped onto these.
class LedgerParty(BaseModel):
    id: int
    name: str
    code: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

class LedgerPayment(BaseModel):
    id: int
    amount: Decimal
    method: Optional[str] = None
    reference_number: Optional[str] = None
    payment_date: date
    notes: Optional[str] = None

class LedgerOrder(BaseModel):
    id: int
    order_number: str
    order_date: date
    total_amount: Decimal
    amount_paid: Decimal = Decimal(0)
    status: str
    payments: List[LedgerPayment] = []

class LedgerAdjustment(BaseModel):
    id: int
    number: str
    adjustment_date: date
    amount: Decimal
    reason: Optional[str] = None
    order_number: Optional[str] = None

# Derived ledger
class LedgerEntry(BaseModel):
    id: str
    date: date
    type: LedgerEntryType
    reference: str
    description: str
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)
    balance: Decimal = Decimal(0)

class LedgerSummary(BaseModel):
    total_orders: Decimal
    total_paid: Decimal
    total_adjustments: Decimal
    current_balance: Decimal
    total_transactions: int

class Ledger(BaseModel):
    party: LedgerParty
    summary: LedgerSummary
    entries: List[LedgerEntry]

class LedgerOverviewItem(BaseModel):
    id: int
    name: str
    code: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    balance: Decimal
    total_orders: Decimal
    total_paid: Decimal
    total_adjustments: Decimal
    last_transaction_date: Optional[date] = None
    transaction_count: int
