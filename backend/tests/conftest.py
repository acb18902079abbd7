import os
import tempfile

# Must be set before database.py is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "ledger-test-logs"))

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models
from models.business_partners import BusinessPartner, PartnerStatus
from models.sales_orders import SalesOrder, SalesOrderStatus
from models.sales_payments import SalesPayment
from models.sales_refunds import SalesRefund
from models.purchase_orders import PurchaseOrder, PurchaseOrderStatus
from models.payments import Payment
from models.purchase_returns import PurchaseReturn
from utils.auth_utils import get_current_user

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    from main import app

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: {"sub": "test-user", "email": "tester@example.com"}
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def add_partner(db, name, tenant_id=TENANT, code=None, is_customer=True, is_vendor=True,
                status=PartnerStatus.ACTIVE, **fields):
    partner = BusinessPartner(
        name=name,
        partner_code=code,
        tenant_id=tenant_id,
        is_customer=is_customer,
        is_vendor=is_vendor,
        status=status,
        **fields,
    )
    db.add(partner)
    db.commit()
    db.refresh(partner)
    return partner


def add_sale(db, customer, so_number, order_date, total, paid=0, status=SalesOrderStatus.APPROVED, tenant_id=TENANT):
    order = SalesOrder(
        so_number=so_number,
        customer_id=customer.id,
        order_date=order_date,
        total_amount=Decimal(str(total)),
        total_amount_paid=Decimal(str(paid)),
        status=status,
        tenant_id=tenant_id,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def add_sales_payment(db, order, payment_date, amount, mode="Cash", reference=None, tenant_id=TENANT, **fields):
    payment = SalesPayment(
        sales_order_id=order.id,
        payment_date=payment_date,
        amount_paid=Decimal(str(amount)),
        payment_mode=mode,
        reference_number=reference,
        tenant_id=tenant_id,
        **fields,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


def add_refund(db, order, number, refund_date, amount, reason="Damaged", tenant_id=TENANT, **fields):
    refund = SalesRefund(
        sales_order_id=order.id,
        refund_number=number,
        refund_date=refund_date,
        amount=Decimal(str(amount)),
        reason=reason,
        tenant_id=tenant_id,
        **fields,
    )
    db.add(refund)
    db.commit()
    db.refresh(refund)
    return refund


def add_purchase(db, vendor, po_number, order_date, total, paid=0, status=PurchaseOrderStatus.APPROVED, tenant_id=TENANT):
    order = PurchaseOrder(
        po_number=po_number,
        vendor_id=vendor.id,
        order_date=order_date,
        total_amount=Decimal(str(total)),
        total_amount_paid=Decimal(str(paid)),
        status=status,
        tenant_id=tenant_id,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def add_purchase_payment(db, order, payment_date, amount, mode="Bank Transfer", reference=None, tenant_id=TENANT):
    payment = Payment(
        purchase_order_id=order.id,
        payment_date=payment_date,
        amount_paid=Decimal(str(amount)),
        payment_mode=mode,
        reference_number=reference,
        tenant_id=tenant_id,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


def add_purchase_return(db, order, number, return_date, amount, reason="Expired", tenant_id=TENANT):
    purchase_return = PurchaseReturn(
        purchase_order_id=order.id,
        return_number=number,
        return_date=return_date,
        amount=Decimal(str(amount)),
        reason=reason,
        tenant_id=tenant_id,
    )
    db.add(purchase_return)
    db.commit()
    db.refresh(purchase_return)
    return purchase_return


@pytest.fixture
def example_customer(db):
    """One sale of 500 marked fully paid, 300 of it itemized, plus a 50 refund."""
    customer = add_partner(db, "Acme Traders", code="CUST-001", phone="9876543210", email="acme@example.com")
    sale = add_sale(db, customer, 1, date(2024, 1, 10), "500.00", paid="500.00", status=SalesOrderStatus.PAID)
    add_sales_payment(db, sale, date(2024, 1, 12), "300.00", mode="UPI", reference="TXN-77")
    add_refund(db, sale, "RF-1", date(2024, 1, 15), "50.00", reason="Broken trays")
    return customer
