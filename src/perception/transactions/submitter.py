"""Submission through the wallet and normalization of its heterogeneous results."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import structlog

from perception.errors import (
    ConfirmationTimeoutError,
    NotAuthenticatedError,
    SubmissionError,
    TransactionFailedError,
)
from perception.models import (
    EntryFunctionPayload,
    NormalizedSubmission,
    SubmissionReceipt,
    SubmissionShape,
    TransactionHandle,
    TransactionStatus,
)
from perception.transactions.poller import ConfirmationPoller
from perception.wallet.adapter import WalletSessionAdapter

log = structlog.get_logger(__name__)

_HASH_FIELDS = (
    ("hash", SubmissionShape.HASH_FIELD),
    ("transaction_hash", SubmissionShape.TRANSACTION_HASH_FIELD),
)


def _field(raw: Any, key: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(key)
    return getattr(raw, key, None)


def normalize_submission_result(raw: Any) -> NormalizedSubmission:
    """Bare string, {hash}, {transaction_hash} (mapping or attribute); anything else has no hash."""
    if isinstance(raw, str):
        if raw:
            return NormalizedSubmission(shape=SubmissionShape.BARE_STRING, hash=raw)
        return NormalizedSubmission(shape=SubmissionShape.NO_HASH)
    for key, shape in _HASH_FIELDS:
        value = _field(raw, key)
        if isinstance(value, str) and value:
            return NormalizedSubmission(shape=shape, hash=value)
    return NormalizedSubmission(shape=SubmissionShape.NO_HASH)


class TransactionSubmitter:
    def __init__(self, wallet: WalletSessionAdapter, poller: ConfirmationPoller) -> None:
        self.wallet = wallet
        self.poller = poller

    async def submit(self, payload: EntryFunctionPayload) -> SubmissionReceipt:
        """
        Sign and submit. Returns a receipt with a PENDING handle, or without a handle
        when the wallet gave no recognizable hash (submitted, unconfirmed).
        """
        if not self.wallet.connected:
            raise NotAuthenticatedError("Connect a wallet before submitting transactions")
        try:
            raw = await self.wallet.sign_and_submit(payload.to_wallet_payload())
        except NotAuthenticatedError:
            raise
        except Exception as e:
            log.error("submission_failed", function=payload.name, error=str(e))
            raise SubmissionError(payload.name, str(e)) from e

        normalized = normalize_submission_result(raw)
        if not normalized.has_hash:
            log.warning(
                "submission_without_hash", function=payload.name, result_type=type(raw).__name__
            )
            return SubmissionReceipt(function=payload.function, submission=normalized)

        handle = TransactionHandle(hash=normalized.hash)
        log.info(
            "transaction_submitted",
            function=payload.name,
            tx_hash=handle.hash,
            shape=normalized.shape.value,
        )
        return SubmissionReceipt(function=payload.function, submission=normalized, handle=handle)

    async def submit_and_confirm(
        self, payload: EntryFunctionPayload, cancel: asyncio.Event | None = None
    ) -> SubmissionReceipt:
        """
        Submit, then poll for a terminal status. A timeout is not a failure: the receipt
        comes back TIMED_OUT and unconfirmed. An explicit on-chain failure raises.
        """
        receipt = await self.submit(payload)
        if receipt.handle is None:
            return receipt
        try:
            await self.poller.wait(receipt.handle, cancel)
        except ConfirmationTimeoutError as e:
            log.warning(
                "confirmation_timeout",
                function=payload.name,
                tx_hash=e.handle.hash,
                timeout_sec=e.timeout_sec,
            )
            return receipt
        if receipt.handle.status is TransactionStatus.FAILED:
            log.error(
                "transaction_failed",
                function=payload.name,
                tx_hash=receipt.handle.hash,
                vm_status=receipt.handle.vm_status,
            )
            raise TransactionFailedError(receipt.handle, receipt.handle.vm_status)
        return receipt
