from .actions import (approve_billing_notes, cancel_billing_notes,
                      cancel_payment_vouchers, submit_billing_notes)
from .auditlog import AuditLogAdmin
from .billing import BillingNoteAdmin, ReceiptAdmin
from .forms import UserAdminChangeForm, UserAdminCreationForm
from .inlines import BilledJobInline, JobItemInline, VoucherBillingNoteInline
from .job import JobAdmin
from .membership import UserAdmin
from .mixins import VendorAdminMixin
from .vendor import (DocumentNumberConfigAdmin, DocumentNumberSequenceAdmin,
                     VatConfigAdmin, VendorAdmin)
from .voucher import PaymentVoucherAdmin
