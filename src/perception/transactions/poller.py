"""Confirmation polling: Pending -> Confirmed | Failed | TimedOut (| Cancelled)."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import structlog

from perception.errors import ConfirmationTimeoutError, RpcError
from perception.ledger.rpc import LedgerRpc
from perception.models import TransactionHandle, TransactionStatus

log = structlog.get_logger(__name__)

EXECUTED_SUCCESSFULLY = "executed successfully"


def interpret_status(body: Any) -> tuple[TransactionStatus, str | None]:
    """
    Map a by-hash response body to a status. A boolean `success` wins; otherwise a
    `vm_status` string decides. Neither means the ledger has not indexed it yet.
    """
    if not isinstance(body, dict):
        return TransactionStatus.PENDING, None
    vm_status = body.get("vm_status")
    if not isinstance(vm_status, str) or not vm_status:
        vm_status = None
    success = body.get("success")
    if isinstance(success, bool):
        return (TransactionStatus.CONFIRMED if success else TransactionStatus.FAILED), vm_status
    if vm_status is not None:
        if vm_status.strip().lower() == EXECUTED_SUCCESSFULLY:
            return TransactionStatus.CONFIRMED, vm_status
        return TransactionStatus.FAILED, vm_status
    return TransactionStatus.PENDING, None


class ConfirmationPoller:
    """
    Fixed-interval status polling with a total time budget. No backoff, so the
    request volume per transaction is bounded by timeout / interval.
    """

    def __init__(
        self,
        rpc: LedgerRpc,
        *,
        timeout_sec: float = 60.0,
        interval_sec: float = 1.0,
    ) -> None:
        if timeout_sec <= 0 or interval_sec <= 0:
            raise ValueError("timeout_sec and interval_sec must be positive")
        self.rpc = rpc
        self.timeout_sec = timeout_sec
        self.interval_sec = interval_sec

    async def poll_once(self, tx_hash: str) -> tuple[TransactionStatus, str | None]:
        """Single status query. Transport errors and non-2xx responses count as pending."""
        try:
            resp = await self.rpc.transaction_by_hash(tx_hash)
        except RpcError as e:
            log.debug("poll_transport_error", tx_hash=tx_hash, error=str(e))
            return TransactionStatus.PENDING, None
        if not resp.is_success:
            log.debug("poll_not_available", tx_hash=tx_hash, status_code=resp.status_code)
            return TransactionStatus.PENDING, None
        try:
            body = resp.json()
        except ValueError:
            return TransactionStatus.PENDING, None
        return interpret_status(body)

    async def _attempt(self, tx_hash: str, remaining: float) -> tuple[TransactionStatus, str | None]:
        """poll_once bounded by the remaining budget; a request cut off by it counts as pending."""
        try:
            return await asyncio.wait_for(self.poll_once(tx_hash), timeout=remaining)
        except TimeoutError:
            log.debug("poll_attempt_cut_off", tx_hash=tx_hash, remaining_sec=round(remaining, 3))
            return TransactionStatus.PENDING, None

    async def _sleep(self, cancel: asyncio.Event | None, remaining: float) -> None:
        delay = min(self.interval_sec, remaining)
        if delay <= 0:
            return
        if cancel is None:
            await asyncio.sleep(delay)
            return
        try:
            await asyncio.wait_for(cancel.wait(), timeout=delay)
        except TimeoutError:
            pass

    async def wait(
        self, handle: TransactionHandle, cancel: asyncio.Event | None = None
    ) -> TransactionHandle:
        """
        Poll until the handle reaches a terminal status and return it.

        Raises ConfirmationTimeoutError (handle left in TIMED_OUT) once the budget is
        spent; no attempt starts or finishes past it. Setting `cancel` stops polling
        at the next check and marks it CANCELLED.
        """
        start = time.monotonic()
        attempts = 0
        while True:
            if cancel is not None and cancel.is_set():
                handle.status = TransactionStatus.CANCELLED
                log.info("confirmation_cancelled", tx_hash=handle.hash, attempts=attempts)
                return handle
            remaining = self.timeout_sec - (time.monotonic() - start)
            if remaining <= 0:
                handle.status = TransactionStatus.TIMED_OUT
                raise ConfirmationTimeoutError(handle, self.timeout_sec)
            attempts += 1
            status, vm_status = await self._attempt(handle.hash, remaining)
            if status is not TransactionStatus.PENDING:
                handle.status = status
                handle.vm_status = vm_status
                log.info(
                    "transaction_terminal",
                    tx_hash=handle.hash,
                    status=status.value,
                    vm_status=vm_status,
                    attempts=attempts,
                    elapsed_sec=round(time.monotonic() - start, 3),
                )
                return handle
            await self._sleep(cancel, self.timeout_sec - (time.monotonic() - start))

    async def wait_for_hash(
        self, tx_hash: str, cancel: asyncio.Event | None = None
    ) -> TransactionHandle:
        return await self.wait(TransactionHandle(hash=tx_hash), cancel)
