import logging
import os
from celery import shared_task
from django.conf import settings

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def remove_document_files(paths):
    """Delete generated PDFs / uploaded receipt files.
    ``paths`` are relative to MEDIA_ROOT; missing files are skipped."""
    root = os.path.realpath(settings.MEDIA_ROOT)
    removed = []
    for relative in paths:
        full_path = os.path.realpath(os.path.join(root, relative.lstrip("/")))
        # never leave the media root
        if os.path.commonpath([root, full_path]) != root:
            logger.warning("Refusing to delete %s outside MEDIA_ROOT", relative)
            continue
        if not os.path.exists(full_path):
            continue
        try:
            os.remove(full_path)
        except OSError:
            logger.exception("Failed to delete document file %s", full_path)
            continue
        logger.info("Deleted document file %s", full_path)
        removed.append(relative)
    return removed
