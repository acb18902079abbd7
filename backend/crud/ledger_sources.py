from typing import List, Optional, Protocol
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload, contains_eager
from models.business_partners import BusinessPartner, PartnerStatus
from models.sales_orders import SalesOrder
from models.sales_refunds import SalesRefund
from models.purchase_orders import PurchaseOrder
from models.purchase_returns import PurchaseReturn
from schemas.ledgers import LedgerParty, LedgerOrder, LedgerPayment, LedgerAdjustment
from utils.date_range import DateRange


class LedgerSource(Protocol):
    """Read-only access to one party context (customers or suppliers)."""
    party_label: str
    order_label: str
    adjustment_label: str

    def find_party(self, party_id: int) -> Optional[LedgerParty]: ...

    def find_orders(self, party_id: int, date_range: Optional[DateRange] = None) -> List[LedgerOrder]: ...

    def find_adjustments(self, party_id: int, date_range: Optional[DateRange] = None) -> List[LedgerAdjustment]: ...

    def find_parties(self, search: Optional[str] = None) -> List[LedgerParty]: ...


def _to_party(partner: BusinessPartner) -> LedgerParty:
    return LedgerParty(
        id=partner.id,
        name=partner.name,
        code=partner.partner_code,
        email=partner.email,
        phone=partner.phone,
        address=partner.address,
    )


def _apply_date_bounds(query, column, date_range: Optional[DateRange]):
    if date_range is None or not date_range.is_bounded:
        return query
    if date_range.start_date is not None:
        query = query.filter(column >= date_range.start_date)
    if date_range.end_date is not None:
        query = query.filter(column <= date_range.end_date)
    return query


def _escape_like(text: str) -> str:
    # LIKE wildcards in search text match literally
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_payments(payments) -> List[LedgerPayment]:
    # Relationship loads skip the global soft-delete filter
    live = [p for p in payments if p.deleted_at is None]
    live.sort(key=lambda p: (p.payment_date, p.id))
    return [
        LedgerPayment(
            id=p.id,
            amount=p.amount_paid,
            method=p.payment_mode,
            reference_number=p.reference_number,
            payment_date=p.payment_date,
            notes=p.notes,
        )
        for p in live
    ]


class _PartnerLookup:
    """Partner queries shared by both contexts. `role_flag` selects customers or vendors."""
    role_flag = None

    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    def _partners(self):
        return self.db.query(BusinessPartner).filter(
            BusinessPartner.tenant_id == self.tenant_id,
            getattr(BusinessPartner, self.role_flag),
        )

    def find_party(self, party_id: int) -> Optional[LedgerParty]:
        partner = self._partners().filter(BusinessPartner.id == party_id).first()
        if partner is None:
            return None
        return _to_party(partner)

    def find_parties(self, search: Optional[str] = None) -> List[LedgerParty]:
        query = self._partners().filter(BusinessPartner.status == PartnerStatus.ACTIVE)
        if search:
            pattern = f"%{_escape_like(search.strip())}%"
            query = query.filter(or_(
                BusinessPartner.name.ilike(pattern, escape="\\"),
                BusinessPartner.email.ilike(pattern, escape="\\"),
                BusinessPartner.phone.ilike(pattern, escape="\\"),
                BusinessPartner.partner_code.ilike(pattern, escape="\\"),
            ))
        return [_to_party(p) for p in query.order_by(BusinessPartner.name.asc(), BusinessPartner.id.asc()).all()]


def format_so_number(order: SalesOrder) -> str:
    return f"SO-{order.so_number if order.so_number is not None else order.id}"


def format_po_number(order: PurchaseOrder) -> str:
    return f"PO-{order.po_number if order.po_number is not None else order.id}"


class CustomerLedgerSource(_PartnerLookup):
    """Sales orders, sales payments and sales refunds of one tenant."""
    party_label = "Customer"
    order_label = "Sale"
    adjustment_label = "Refund"
    role_flag = "is_customer"

    def find_orders(self, party_id: int, date_range: Optional[DateRange] = None) -> List[LedgerOrder]:
        query = self.db.query(SalesOrder).options(selectinload(SalesOrder.payments)).filter(
            SalesOrder.customer_id == party_id,
            SalesOrder.tenant_id == self.tenant_id,
        )
        query = _apply_date_bounds(query, SalesOrder.order_date, date_range)
        sales_orders = query.order_by(SalesOrder.order_date.asc(), SalesOrder.id.asc()).all()

        return [
            LedgerOrder(
                id=so.id,
                order_number=format_so_number(so),
                order_date=so.order_date,
                total_amount=so.total_amount,
                amount_paid=so.total_amount_paid or 0,
                status=so.status.value,
                payments=_to_payments(so.payments),
            )
            for so in sales_orders
        ]

    def find_adjustments(self, party_id: int, date_range: Optional[DateRange] = None) -> List[LedgerAdjustment]:
        query = (
            self.db.query(SalesRefund)
            .join(SalesOrder, SalesRefund.sales_order_id == SalesOrder.id)
            .options(contains_eager(SalesRefund.sales_order))
            .filter(
                SalesOrder.customer_id == party_id,
                SalesOrder.deleted_at.is_(None),
                SalesRefund.tenant_id == self.tenant_id,
            )
        )
        query = _apply_date_bounds(query, SalesRefund.refund_date, date_range)
        refunds = query.order_by(SalesRefund.refund_date.asc(), SalesRefund.id.asc()).all()

        return [
            LedgerAdjustment(
                id=refund.id,
                number=refund.refund_number,
                adjustment_date=refund.refund_date,
                amount=refund.amount,
                reason=refund.reason,
                order_number=format_so_number(refund.sales_order),
            )
            for refund in refunds
        ]


class SupplierLedgerSource(_PartnerLookup):
    """Purchase orders, purchase payments and purchase returns of one tenant."""
    party_label = "Supplier"
    order_label = "Purchase Order"
    adjustment_label = "Purchase Return"
    role_flag = "is_vendor"

    def find_orders(self, party_id: int, date_range: Optional[DateRange] = None) -> List[LedgerOrder]:
        query = self.db.query(PurchaseOrder).options(selectinload(PurchaseOrder.payments)).filter(
            PurchaseOrder.vendor_id == party_id,
            PurchaseOrder.tenant_id == self.tenant_id,
        )
        query = _apply_date_bounds(query, PurchaseOrder.order_date, date_range)
        purchase_orders = query.order_by(PurchaseOrder.order_date.asc(), PurchaseOrder.id.asc()).all()

        return [
            LedgerOrder(
                id=po.id,
                order_number=format_po_number(po),
                order_date=po.order_date,
                total_amount=po.total_amount,
                amount_paid=po.total_amount_paid or 0,
                status=po.status.value,
                payments=_to_payments(po.payments),
            )
            for po in purchase_orders
        ]

    def find_adjustments(self, party_id: int, date_range: Optional[DateRange] = None) -> List[LedgerAdjustment]:
        query = (
            self.db.query(PurchaseReturn)
            .join(PurchaseOrder, PurchaseReturn.purchase_order_id == PurchaseOrder.id)
            .options(contains_eager(PurchaseReturn.purchase_order))
            .filter(
                PurchaseOrder.vendor_id == party_id,
                PurchaseOrder.deleted_at.is_(None),
                PurchaseReturn.tenant_id == self.tenant_id,
            )
        )
        query = _apply_date_bounds(query, PurchaseReturn.return_date, date_range)
        returns = query.order_by(PurchaseReturn.return_date.asc(), PurchaseReturn.id.asc()).all()

        return [
            LedgerAdjustment(
                id=purchase_return.id,
                number=purchase_return.return_number,
                adjustment_date=purchase_return.return_date,
                amount=purchase_return.amount,
                reason=purchase_return.reason,
                order_number=format_po_number(purchase_return.purchase_order),
            )
            for purchase_return in returns
        ]
