from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from io import BytesIO
import logging

from database import get_db
from crud.ledger_sources import SupplierLedgerSource
from crud.ledgers import build_ledger, get_ledger_overview, LedgerErrorKind
from schemas.ledgers import Ledger, LedgerOverviewItem
from utils.auth_utils import get_current_user, get_user_identifier
from utils.date_range import parse_date_range, DateRangeError
from utils.ledger_export import to_csv, to_report
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/suppliers",
    tags=["Supplier Ledger"],
    dependencies=[Depends(get_current_user)],
)
logger = logging.getLogger("supplier_ledger")


def _load_ledger(db: Session, tenant_id: str, supplier_id: int, start_date: Optional[str], end_date: Optional[str]) -> Ledger:
    try:
        date_range = parse_date_range(start_date, end_date)
    except DateRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = build_ledger(SupplierLedgerSource(db, tenant_id), supplier_id, date_range, logger=logger)
    if not result.ok and result.error.kind is LedgerErrorKind.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return result.unwrap()


@router.get("/ledger-overview", response_model=List[LedgerOverviewItem])
def read_supplier_ledger_overview(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Balance and totals for every active supplier, optionally filtered by name, email, phone or code."""
    return get_ledger_overview(SupplierLedgerSource(db, tenant_id), search)


@router.get("/{supplier_id}/ledger", response_model=Ledger)
def read_supplier_ledger(
    supplier_id: int,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Supplier ledger with running balance."""
    return _load_ledger(db, tenant_id, supplier_id, start_date, end_date)


@router.get("/{supplier_id}/ledger/export/csv")
def export_supplier_ledger_csv(
    supplier_id: int,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(get_current_user)
):
    ledger = _load_ledger(db, tenant_id, supplier_id, start_date, end_date)
    headers = {
        'Content-Disposition': f'attachment; filename=supplier-{supplier_id}-ledger.csv'
    }
    logger.info(f"CSV ledger export for supplier {supplier_id} ({len(ledger.entries)} entries) for tenant {tenant_id} by {get_user_identifier(user)}")
    return Response(content=to_csv(ledger), media_type='text/csv', headers=headers)


@router.get("/{supplier_id}/ledger/export/pdf")
def export_supplier_ledger_pdf(
    supplier_id: int,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(get_current_user)
):
    ledger = _load_ledger(db, tenant_id, supplier_id, start_date, end_date)
    pdf_file = BytesIO(to_report(ledger, party_label="Supplier"))
    headers = {
        'Content-Disposition': f'attachment; filename=supplier-{supplier_id}-ledger.pdf'
    }
    logger.info(f"PDF ledger export for supplier {supplier_id} ({len(ledger.entries)} entries) for tenant {tenant_id} by {get_user_identifier(user)}")
    return StreamingResponse(pdf_file, media_type='application/pdf', headers=headers)
