from sqlalchemy import Column, Integer, Numeric, Date, String, ForeignKey, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class SalesRefund(Base, AuditMixin):
    __tablename__ = "sales_refunds"

    id = Column(Integer, primary_key=True, index=True)
    sales_order_id = Column(Integer, ForeignKey("sales_orders.id"), nullable=False)
    refund_number = Column(String, nullable=False, index=True)
    refund_date = Column(Date, nullable=False)
    amount = Column(Numeric(10, 3), nullable=False)
    reason = Column(Text, nullable=True)
    tenant_id = Column(String, index=True)

    # Relationships
    sales_order = relationship("SalesOrder", back_populates="refunds")
