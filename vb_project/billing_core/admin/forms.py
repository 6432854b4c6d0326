from django.contrib.auth.forms import (
    UserChangeForm as DjangoUserChangeForm,
    UserCreationForm as DjangoUserCreationForm)
from django.core.exceptions import ValidationError
from billing_core.models import User

# -----------------------------
# Register custom admin forms
# ----------------------------


def _check_role_vendor(cleaned):
    # Vendor accounts must be bound to a vendor, staff accounts must not
    role = cleaned.get("role")
    vendor = cleaned.get("vendor")
    if role == "VENDOR" and vendor is None:
        raise ValidationError({"vendor": "A vendor account needs a vendor."})
    if role in ("ADMIN", "USER") and vendor is not None:
        raise ValidationError({"vendor": "Admin / user accounts are not bound to a vendor."})
    return cleaned


# Subclass `DjangoUserCreationForm` (form used when adding a new user)
class UserAdminCreationForm(DjangoUserCreationForm):
    class Meta(DjangoUserCreationForm.Meta):
        model = User  # Points `model` to custom User model
        fields = ("username", "email", "role", "vendor")

    def clean(self):
        return _check_role_vendor(super().clean())


# Subclass `DjangoUserChangeForm` (form used when editing an existing user)
class UserAdminChangeForm(DjangoUserChangeForm):
    # override `Meta` to include custom model & any extra fields
    class Meta(DjangoUserChangeForm.Meta):
        model = User
        fields = (
            "username",
            "email",
            "is_active",
            "is_staff",
            "is_superuser",
            "role",
            "vendor",
        )

    def clean(self):
        return _check_role_vendor(super().clean())
