from .auditlog import AuditLog
from .billing import BillingNote
from .docnumber import DocumentNumberConfig, DocumentNumberSequence
from .job import Job, JobItem
from .receipt import Receipt
from .user import User
from .vendor import VatConfig, Vendor
from .voucher import PaymentVoucher
