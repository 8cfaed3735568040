"""Identity gate: a signed-in identity is required before a wallet may connect.

This is a business rule applied by callers, not by the wallet adapter.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

import structlog

from perception.errors import NotAuthenticatedError
from perception.models import WalletSession
from perception.wallet.adapter import WalletSessionAdapter

log = structlog.get_logger(__name__)


class IdentityProvider(Protocol):
    """Auth service. The callback receives the signed-in identity or None."""

    def on_auth_state_changed(self, callback: Callable[[Any | None], None]) -> Callable[[], None]: ...


class IdentityGate:
    def __init__(self, provider: IdentityProvider) -> None:
        self._identity: Any | None = None
        self._unsubscribe: Callable[[], None] | None = provider.on_auth_state_changed(
            self._on_change
        )

    def _on_change(self, identity: Any | None) -> None:
        self._identity = identity
        log.debug("identity_changed", signed_in=identity is not None)

    @property
    def identity(self) -> Any | None:
        return self._identity

    @property
    def signed_in(self) -> bool:
        return self._identity is not None

    def require(self) -> Any:
        if self._identity is None:
            raise NotAuthenticatedError("Sign in before connecting a wallet")
        return self._identity

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


async def connect_wallet(
    gate: IdentityGate, adapter: WalletSessionAdapter, name: str | None = None
) -> WalletSession:
    """Connect only when an identity session exists."""
    gate.require()
    return await adapter.connect(name)
