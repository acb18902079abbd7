from typing import Optional
from fastapi import Header, HTTPException

def get_tenant_id(x_tenant_id: Optional[str] = Header(None)) -> str:
    """Tenant whose records a request may read, taken from the X-Tenant-ID header."""
    tenant_id = (x_tenant_id or "").strip()
    if not tenant_id:
        raise HTTPException(status_code=400, detail="X-Tenant-ID header is missing")
    return tenant_id
