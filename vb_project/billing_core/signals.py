from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import BillingNote, Job, Receipt

"""Block job deletion while it is linked to a billing note."""


# pre_delete signal auto-fires just before Django deletes a model instance
@receiver(pre_delete, sender=Job)
def prevent_delete_billed_job(sender, instance, **kwargs):
    if instance.status == "BILLED":
        raise ValidationError("Cannot delete a billed job.")


"""Block billing note deletion once a receipt was issued for it."""


@receiver(pre_delete, sender=BillingNote)
def prevent_delete_billing_note_with_receipt(sender, instance, **kwargs):
    if Receipt.objects.filter(billing_note=instance).exists():
        raise ValidationError("Cannot delete billing note with receipt.")


"""Release the jobs of a billing note that is being deleted."""


@receiver(pre_delete, sender=BillingNote)
def release_jobs_of_deleted_billing_note(sender, instance, **kwargs):
    # SET_NULL alone would leave BILLED jobs without a note
    Job.objects.filter(billing_note=instance).update(status="PENDING", billing_note=None)
