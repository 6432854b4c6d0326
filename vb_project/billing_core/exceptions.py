from django.core.exceptions import ValidationError


class ConsistencyViolation(ValidationError):
    """Raised when linked documents would end up in inconsistent states
    (job not owned / already billed, note already receipted or vouchered)."""
    pass


class DuplicateReference(ValidationError):
    """Raised when a billing / receipt / voucher reference is already taken."""
    pass
