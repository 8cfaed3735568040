"""Exception hierarchy for the ledger interaction layer.

Read-path failures never reach callers as exceptions: the query client turns
them into a degraded ``QueryResult``. Everything below is raised on the write
path or by configuration, where the caller must be told.

Error code ranges:
  1xxx: Configuration
  2xxx: Ledger transport
  3xxx: Input validation
  4xxx: Wallet / auth
  5xxx: Transactions
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perception.models import TransactionHandle


class PerceptionError(Exception):
    """Base error."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


# --- 1xxx: Configuration ---

class ConfigurationError(PerceptionError):
    def __init__(self, message: str) -> None:
        super().__init__(1001, message)


# --- 2xxx: Ledger transport ---

class RpcError(PerceptionError):
    """Transport or contract failure talking to the ledger node."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(2001, message)


# --- 3xxx: Input validation ---

class InputValidationError(PerceptionError):
    """Malformed or temporally invalid user input; blocks submission."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(3001, f"{field}: {message}")


# --- 4xxx: Wallet / auth ---

class NotAuthenticatedError(PerceptionError):
    def __init__(self, message: str = "Wallet is not connected") -> None:
        super().__init__(4001, message)


class WalletUnavailableError(PerceptionError):
    def __init__(self, message: str = "No wallets detected") -> None:
        super().__init__(4002, message)


# --- 5xxx: Transactions ---

class SubmissionError(PerceptionError):
    """The wallet's sign-and-submit call raised."""

    def __init__(self, function: str, message: str) -> None:
        self.function = function
        super().__init__(5001, f"Submission of {function} failed: {message}")


class TransactionFailedError(PerceptionError):
    """The ledger reported an explicit failure for a submitted transaction."""

    def __init__(self, handle: TransactionHandle, vm_status: str | None = None) -> None:
        self.handle = handle
        self.vm_status = vm_status
        detail = f" ({vm_status})" if vm_status else ""
        super().__init__(5002, f"Transaction {handle.hash} failed on-chain{detail}")


class ConfirmationTimeoutError(PerceptionError):
    """No terminal status within the budget. Recoverable: the transaction may still land."""

    def __init__(self, handle: TransactionHandle, timeout_sec: float) -> None:
        self.handle = handle
        self.timeout_sec = timeout_sec
        super().__init__(
            5003, f"Transaction {handle.hash} not confirmed within {timeout_sec:g}s"
        )
