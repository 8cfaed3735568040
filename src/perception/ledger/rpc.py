"""Ledger node REST client - view calls and transaction lookup by hash."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from perception.config import LedgerConfig
from perception.errors import RpcError

log = structlog.get_logger(__name__)


class LedgerRpc:
    """Thin async wrapper over the node API. One instance per LedgerConfig, shared by reference."""

    def __init__(
        self,
        config: LedgerConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.node_url,
            timeout=config.request_timeout_sec,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> LedgerRpc:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def function_id(self, name: str) -> str:
        return self.config.function_id(name)

    async def view(self, name: str, arguments: list[Any] | None = None) -> list[Any]:
        """Call view function `name` on the configured module and return the result tuple."""
        function = self.function_id(name)
        body = {"function": function, "type_arguments": [], "arguments": list(arguments or [])}
        try:
            resp = await self._client.post("/view", json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise RpcError(
                f"view {name} returned HTTP {e.response.status_code}: {e.response.text[:200]}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RpcError(f"view {name} failed: {e}") from e
        if not isinstance(data, list):
            raise RpcError(f"view {name} returned {type(data).__name__}, expected a list")
        log.debug("view_ok", function=name, values=len(data))
        return data

    async def transaction_by_hash(self, tx_hash: str) -> httpx.Response:
        """Raw lookup response; status interpretation is left to the caller."""
        try:
            return await self._client.get(f"/transactions/by_hash/{tx_hash}")
        except httpx.HTTPError as e:
            raise RpcError(f"transaction lookup {tx_hash} failed: {e}") from e
