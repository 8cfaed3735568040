"""Ledger access: REST transport, tuple decoding, view-function queries."""

from perception.ledger.queries import LedgerQueryClient, QueryResult, QueryState
from perception.ledger.rpc import LedgerRpc

__all__ = ["LedgerQueryClient", "LedgerRpc", "QueryResult", "QueryState"]
