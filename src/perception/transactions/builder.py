"""Entry-function payloads for each mutating action. Pure; no validation beyond shape."""

from __future__ import annotations

from perception.config import LedgerConfig
from perception.models import EntryFunctionPayload


def _bool_arg(value: bool) -> str:
    return "true" if value else "false"


class TransactionBuilder:
    def __init__(self, config: LedgerConfig) -> None:
        self.config = config

    def _payload(self, name: str, *arguments: str) -> EntryFunctionPayload:
        return EntryFunctionPayload(
            function=self.config.function_id(name),
            type_arguments=[],
            arguments=list(arguments),
        )

    def create_market(self, question: str, resolve_ts: int) -> EntryFunctionPayload:
        return self._payload("create_market", question, str(int(resolve_ts)))

    def buy_yes(self, market_id: int, amount: int, agreement_percentage: int) -> EntryFunctionPayload:
        return self._payload(
            "buy_yes", str(int(market_id)), str(int(amount)), str(int(agreement_percentage))
        )

    def buy_no(self, market_id: int, amount: int, agreement_percentage: int) -> EntryFunctionPayload:
        return self._payload(
            "buy_no", str(int(market_id)), str(int(amount)), str(int(agreement_percentage))
        )

    def buy(
        self, market_id: int, is_yes: bool, amount: int, agreement_percentage: int
    ) -> EntryFunctionPayload:
        if is_yes:
            return self.buy_yes(market_id, amount, agreement_percentage)
        return self.buy_no(market_id, amount, agreement_percentage)

    def settle_market(self, market_id: int, result: bool) -> EntryFunctionPayload:
        """Admin only on the contract side."""
        return self._payload("settle_market", str(int(market_id)), _bool_arg(result))

    def initialize(self) -> EntryFunctionPayload:
        """One-time registry setup, admin only."""
        return self._payload("initialize")
