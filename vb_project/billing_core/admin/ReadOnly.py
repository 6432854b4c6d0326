from django.contrib import admin
from .mixins import VendorAdminMixin


class ReadOnlyAdmin(VendorAdminMixin, admin.ModelAdmin):
    """
    Records written only by the billing services (audit trail, number
    counters).  Vendor users see their own rows, nobody edits anything.
    """
    list_per_page = 50

    # every model field is shown, none editable
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False  # view permission still opens the detail page

    def has_delete_permission(self, request, obj=None):
        return False

    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop("delete_selected", None)
        return actions

    # Vendor filter only makes sense for users who see every vendor
    def get_list_filter(self, request):
        filters = list(super().get_list_filter(request))
        if self._sees_everything(request) and "vendor" not in filters:
            filters.insert(0, "vendor")
        return tuple(filters)
