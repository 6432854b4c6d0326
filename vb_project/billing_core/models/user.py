from django.contrib.auth.models import AbstractUser
from django.db import models
from ..managers import UserManager

ROLE_CHOICES = [
    ("ADMIN", "Admin"),  # full control, may cancel vouchers
    ("USER", "User"),  # back-office staff, may build vouchers
    ("VENDOR", "Vendor"),  # scoped to its own vendor's documents
]


class User(AbstractUser):
    """
    Before you run your very first migrate,
    'AUTH_USER_MODEL = "billing_core.User"' must be in settings.py
    """

    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default="VENDOR")

    # Vendor accounts are bound to exactly one vendor
    vendor = models.ForeignKey(
        "Vendor",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="users",
    )

    objects = UserManager()

    class Meta:
        indexes = [models.Index(fields=["role", "vendor"], name="user_role_vendor_idx")]

    def __str__(self):
        return self.get_full_name() or self.username
