"""Entry transactions: payload building, validation, submission, confirmation."""

from perception.transactions.builder import TransactionBuilder
from perception.transactions.poller import ConfirmationPoller
from perception.transactions.submitter import TransactionSubmitter, normalize_submission_result

__all__ = [
    "ConfirmationPoller",
    "TransactionBuilder",
    "TransactionSubmitter",
    "normalize_submission_result",
]
