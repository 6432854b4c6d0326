from django.db import models
from django.contrib.auth.base_user import BaseUserManager


# -----------------------------------------
# Enforce vendor scoping across all models
# that belong to a vendor
# -----------------------------------------
class VendorQuerySet(models.QuerySet):
    def for_vendor(self, vendor):
        # accepts a Vendor instance or a raw vendor id
        return self.filter(vendor=vendor)

    def with_status(self, status):
        if not status:
            return self
        return self.filter(status=status)
    # Enables query:
    # BillingNote.objects.for_vendor(vendor_id).with_status("PENDING")


class VendorScopedManager(models.Manager):
    def get_queryset(self):
        return VendorQuerySet(self.model, using=self._db)

    def for_vendor(self, vendor):
        return self.get_queryset().for_vendor(vendor)

    def for_principal(self, principal):
        """Vendors only see their own rows, privileged roles see everything."""
        from .services.access import can_act_as_privileged

        if can_act_as_privileged(principal):
            return self.get_queryset()
        return self.get_queryset().for_vendor(principal.vendor_id)


class UserManager(BaseUserManager):
    """ Enforce rules around how users are created """

    use_in_migrations = True

    # Shared logic for both create_user() & create_superuser()
    def _create_user(self, username, email, password, **extra_fields):
        if not username:
            raise ValueError("The given username must be set")
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)  # Password is hashed
        user.save(using=self._db)
        return user

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", "VENDOR")
        return self._create_user(username, email, password, **extra_fields)

    # Used by Django when running `createsuperuser`
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "ADMIN")
        # You cannot pass conflicting values
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True")
        return self._create_user(username, email, password, **extra_fields)
