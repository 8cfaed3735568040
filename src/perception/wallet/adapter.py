"""Wallet session adapter over an external wallet provider."""

from __future__ import annotations

from typing import Any, Protocol

import structlog

from perception.errors import NotAuthenticatedError, WalletUnavailableError
from perception.models import WalletSession

log = structlog.get_logger(__name__)


class WalletProvider(Protocol):
    """External wallet (browser extension, hardware, ...). Signing happens inside it."""

    def wallets(self) -> list[str]: ...
    async def connect(self, name: str) -> str: ...
    async def disconnect(self) -> None: ...
    async def sign_and_submit(self, payload: dict[str, Any]) -> Any: ...


def short_address(address: Any) -> str:
    """0x1234...abcd style, for display."""
    addr = address if isinstance(address, str) else str(address or "")
    if not addr:
        return ""
    if len(addr) <= 10:
        return addr
    return f"{addr[:6]}...{addr[-4:]}"


class WalletSessionAdapter:
    """Holds the connection state; the only source of truth for "is a wallet connected"."""

    def __init__(self, provider: WalletProvider) -> None:
        self.provider = provider
        self._session = WalletSession()

    @property
    def session(self) -> WalletSession:
        return self._session.model_copy()

    @property
    def connected(self) -> bool:
        return self._session.connected and bool(self._session.account)

    @property
    def account(self) -> str | None:
        return self._session.account

    def available_wallets(self) -> list[str]:
        return [w for w in self.provider.wallets() if w]

    async def connect(self, name: str | None = None) -> WalletSession:
        """Connect `name`, or the first detected wallet."""
        if name is None:
            wallets = self.available_wallets()
            if not wallets:
                raise WalletUnavailableError()
            name = wallets[0]
        account = await self.provider.connect(name)
        self._session = WalletSession(connected=True, account=str(account), provider_name=name)
        log.info("wallet_connected", provider=name, account=short_address(account))
        return self.session

    async def disconnect(self) -> None:
        if not self._session.connected:
            return
        try:
            await self.provider.disconnect()
        finally:
            log.info("wallet_disconnected", provider=self._session.provider_name)
            self._session = WalletSession()

    async def sign_and_submit(self, payload: dict[str, Any]) -> Any:
        """Raw provider result; shape varies by provider."""
        if not self.connected:
            raise NotAuthenticatedError()
        return await self.provider.sign_and_submit(payload)
