"""Entry payloads, submission results and transaction handles."""

from __future__ import annotations

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

ENTRY_FUNCTION_PAYLOAD = "entry_function_payload"


class EntryFunctionPayload(BaseModel):
    """Named entry function plus ordered string arguments."""

    function: str
    type_arguments: list[str] = Field(default_factory=list)
    arguments: list[str] = Field(default_factory=list)

    @property
    def name(self) -> str:
        """Bare function name (last path segment)."""
        return self.function.rsplit("::", 1)[-1]

    def to_wallet_payload(self) -> dict[str, Any]:
        """Dict accepted by wallet sign-and-submit."""
        return {
            "type": ENTRY_FUNCTION_PAYLOAD,
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": list(self.arguments),
        }


class SubmissionShape(str, Enum):
    """Observed shapes of a wallet's sign-and-submit return value."""

    BARE_STRING = "bare_string"
    HASH_FIELD = "hash_field"
    TRANSACTION_HASH_FIELD = "transaction_hash_field"
    NO_HASH = "no_hash"


class NormalizedSubmission(BaseModel):
    shape: SubmissionShape
    hash: str | None = None

    @property
    def has_hash(self) -> bool:
        return self.shape is not SubmissionShape.NO_HASH


class TransactionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset(
    {
        TransactionStatus.CONFIRMED,
        TransactionStatus.FAILED,
        TransactionStatus.TIMED_OUT,
        TransactionStatus.CANCELLED,
    }
)


class TransactionHandle(BaseModel):
    """A submitted transaction, owned by the submitter until terminal."""

    hash: str
    submitted_at: int = Field(default_factory=lambda: int(time.time() * 1000))  # ms epoch
    status: TransactionStatus = TransactionStatus.PENDING
    vm_status: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class SubmissionReceipt(BaseModel):
    """What the caller gets back from a submission."""

    function: str
    submission: NormalizedSubmission
    handle: TransactionHandle | None = None

    @property
    def unconfirmed(self) -> bool:
        """Submitted, but no confirmed terminal state is known."""
        if self.handle is None:
            return True
        return self.handle.status in (
            TransactionStatus.PENDING,
            TransactionStatus.TIMED_OUT,
            TransactionStatus.CANCELLED,
        )
