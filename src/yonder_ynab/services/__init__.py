"""Import services shared by every ingress channel."""

from .importer import BatchValidationError, CsvImporter, create_importer
from .notifier import HELP_MESSAGE, format_failure, format_success, status_for_error

__all__ = [
    "CsvImporter",
    "BatchValidationError",
    "create_importer",
    "HELP_MESSAGE",
    "format_success",
    "format_failure",
    "status_for_error",
]
