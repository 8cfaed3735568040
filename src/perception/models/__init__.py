"""Typed domain entities (Pydantic) - Market, Position, transactions, wallet session."""

from perception.models.market import Market, MarketSnapshot, MarketStatus, Position
from perception.models.transaction import (
    EntryFunctionPayload,
    NormalizedSubmission,
    SubmissionReceipt,
    SubmissionShape,
    TransactionHandle,
    TransactionStatus,
)
from perception.models.wallet import WalletSession

__all__ = [
    "Market",
    "MarketSnapshot",
    "MarketStatus",
    "Position",
    "EntryFunctionPayload",
    "NormalizedSubmission",
    "SubmissionReceipt",
    "SubmissionShape",
    "TransactionHandle",
    "TransactionStatus",
    "WalletSession",
]
