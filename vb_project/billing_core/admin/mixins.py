from billing_core.services.access import Principal, can_act_as_privileged


class VendorAdminMixin:
    """
    Enforce vendor isolation in Django admin.
    Uses request.principal (set by CurrentPrincipalMiddleware)
    or builds it from request.user.
    """

    def _get_request_principal(self, request):
        # prefer request.principal (middleware)
        principal = getattr(request, "principal", None)
        if principal is None and request.user.is_authenticated:
            principal = Principal.from_user(request.user)
        return principal

    def _sees_everything(self, request):
        principal = self._get_request_principal(request)
        return request.user.is_superuser or (
            principal is not None and can_act_as_privileged(principal)
        )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        # Admin / back-office users see every vendor
        if self._sees_everything(request):
            return qs
        principal = self._get_request_principal(request)
        if principal is None or principal.vendor_id is None:
            # If no vendor available in request, return none
            return qs.none()
        return qs.filter(vendor_id=principal.vendor_id)

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        """Restrict the vendor dropdown to the user's own vendor."""
        if db_field.name == "vendor" and not self._sees_everything(request):
            principal = self._get_request_principal(request)
            vendor_id = principal.vendor_id if principal else None
            kwargs["queryset"] = db_field.related_model.objects.filter(pk=vendor_id)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)
