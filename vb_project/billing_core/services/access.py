"""Role capability checks.  Handlers never compare raw role strings."""
from dataclasses import dataclass
from typing import Optional
from django.core.exceptions import PermissionDenied, ValidationError

PRIVILEGED_ROLES = ("ADMIN", "USER")


@dataclass(frozen=True)
class Principal:
    user_id: Optional[int]
    role: str
    vendor_id: Optional[int] = None

    @classmethod
    def from_user(cls, user):
        return cls(
            user_id=user.pk,
            role=getattr(user, "role", "VENDOR"),
            vendor_id=getattr(user, "vendor_id", None),
        )


def can_act_as_privileged(principal: Principal) -> bool:
    return principal.role in PRIVILEGED_ROLES


def is_admin(principal: Principal) -> bool:
    return principal.role == "ADMIN"


def require_privileged(principal: Principal):
    if not can_act_as_privileged(principal):
        raise PermissionDenied("Only admin/user can perform this action")


def require_admin(principal: Principal):
    if not is_admin(principal):
        raise PermissionDenied("Only admin can perform this action")


def require_vendor(principal: Principal) -> int:
    """Return the caller's vendor id, or refuse callers without one."""
    if not principal.vendor_id:
        raise PermissionDenied("Vendor information missing for this account")
    return principal.vendor_id


def vendor_scope(principal: Principal, vendor_id=None) -> int:
    """
    Vendor callers are pinned to their own vendor.
    Admin/user callers must name the vendor explicitly.
    """
    if can_act_as_privileged(principal):
        if not vendor_id:
            raise ValidationError("Vendor ID is required for admin/user access")
        try:
            return int(vendor_id)
        except (TypeError, ValueError):
            raise ValidationError("Vendor ID must be a number")
    return require_vendor(principal)
