from sqlalchemy import Column, Integer, Numeric, Date, String, ForeignKey, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import AuditMixin

class PurchaseReturn(Base, AuditMixin):
    __tablename__ = "purchase_returns"

    id = Column(Integer, primary_key=True, index=True)
    purchase_order_id = Column(Integer, ForeignKey("purchase_orders.id"), nullable=False)
    return_number = Column(String, nullable=False, index=True)
    return_date = Column(Date, nullable=False)
    amount = Column(Numeric(10, 3), nullable=False) # Credit owed back by the supplier
    reason = Column(Text, nullable=True)
    tenant_id = Column(String, index=True)

    # Relationships
    purchase_order = relationship("PurchaseOrder", back_populates="returns")
