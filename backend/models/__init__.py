from models.business_partners import BusinessPartner, PartnerStatus
from models.sales_orders import SalesOrder, SalesOrderStatus
from models.sales_payments import SalesPayment
from models.sales_refunds import SalesRefund
from models.purchase_orders import PurchaseOrder, PurchaseOrderStatus
from models.payments import Payment
from models.purchase_returns import PurchaseReturn

__all__ = ['BusinessPartner', 'PartnerStatus', 'Payment', 'PurchaseOrder', 'PurchaseOrderStatus', 'PurchaseReturn', 'SalesOrder', 'SalesOrderStatus', 'SalesPayment', 'SalesRefund',]
