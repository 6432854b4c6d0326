from django.urls import path
from . import views

urlpatterns = [
    path("jobs/", views.jobs_view, name="jobs"),
    path("jobs/<int:pk>/", views.job_detail_view, name="job-detail"),

    path("billing/", views.billing_notes_view, name="billing-notes"),
    path("billing/preview/", views.billing_preview_view, name="billing-preview"),
    path("billing/<int:pk>/", views.billing_note_detail_view, name="billing-note-detail"),
    path("billing/<int:pk>/status/", views.billing_note_status_view, name="billing-note-status"),
    path("billing/<int:pk>/cancel/", views.billing_note_cancel_view, name="billing-note-cancel"),

    path("receipts/", views.receipts_view, name="receipts"),
    path("receipts/<int:pk>/", views.receipt_detail_view, name="receipt-detail"),
    path("receipts/<int:pk>/status/", views.receipt_status_view, name="receipt-status"),

    path("payment-vouchers/", views.payment_vouchers_view, name="payment-vouchers"),
    path("payment-vouchers/<int:pk>/", views.payment_voucher_detail_view,
         name="payment-voucher-detail"),
    path("payment-vouchers/<int:pk>/status/", views.payment_voucher_status_view,
         name="payment-voucher-status"),
    path("payment-vouchers/<int:pk>/cancel/", views.payment_voucher_cancel_view,
         name="payment-voucher-cancel"),
    path("payment-vouchers/billing-notes/<int:vendor_id>/",
         views.voucherable_billing_notes_view, name="voucherable-billing-notes"),

    path("document-number/config/", views.doc_number_config_view, name="doc-number-config"),
    path("document-number/preview/", views.doc_number_preview_view, name="doc-number-preview"),
    path("settings/tax/", views.tax_settings_view, name="tax-settings"),
]
