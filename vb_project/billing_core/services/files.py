from django.db import transaction


def schedule_file_removal(paths):
    """Queue removal of stored document files once the current transaction
    commits.  Nothing is removed if it rolls back."""
    paths = [path for path in paths if path]
    if not paths:
        return
    from ..tasks import remove_document_files

    transaction.on_commit(lambda: remove_document_files.delay(paths))
