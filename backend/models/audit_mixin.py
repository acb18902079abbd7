from sqlalchemy import Column, DateTime, String
from datetime import datetime
import os
import pytz

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")


def local_now() -> datetime:
    return datetime.now(pytz.timezone(APP_TIMEZONE))


class TimestampMixin:
    """Created/updated timestamps and the user that wrote the row.

    Timestamps are timezone-aware; DateTime(timezone=True) keeps the offset in the database.
    """
    created_at = Column(DateTime(timezone=True), default=local_now)
    updated_at = Column(DateTime(timezone=True), onupdate=local_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Soft-delete columns (deleted_at, deleted_by).

    Every financial record the ledger reads carries these. A row with deleted_at set
    never contributes to a ledger.
    """
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)


class AuditMixin(TimestampMixin, SoftDeleteMixin):
    pass
