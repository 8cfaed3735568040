"""View-call result tuples -> Market / Position / price.

u64 values arrive as JSON strings, booleans as JSON booleans. Decoders raise
ValueError on malformed tuples; an empty tuple means "not found".
"""

from __future__ import annotations

from typing import Any

from perception.models import Market, Position

MARKET_FIELDS = 9
POSITION_FIELDS = 6


def _int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected integer, got bool {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"expected integer, got {value!r}") from e


def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError(f"expected bool, got {value!r}")


def _require(row: list[Any], n: int, what: str) -> None:
    if len(row) < n:
        raise ValueError(f"{what} tuple has {len(row)} values, expected {n}")


def decode_market(market_id: int, row: list[Any]) -> Market | None:
    """get_market -> (question, creator, resolve_ts, yes_shares, no_shares, yes_vol, no_vol, settled, result)."""
    if not row:
        return None
    _require(row, MARKET_FIELDS, "get_market")
    return Market(
        id=market_id,
        question=str(row[0]),
        creator=str(row[1]),
        resolve_ts=_int(row[2]),
        total_yes_shares=_int(row[3]),
        total_no_shares=_int(row[4]),
        total_yes_volume=_int(row[5]),
        total_no_volume=_int(row[6]),
        settled=_bool(row[7]),
        result=_bool(row[8]),
        created_at=0,
    )


def decode_position(user: str, market_id: int, row: list[Any]) -> Position | None:
    """get_user_position -> (yes_shares, no_shares, yes_cost, no_cost, agreement_pct, prediction_side)."""
    if not row:
        return None
    _require(row, POSITION_FIELDS, "get_user_position")
    return Position(
        market_id=market_id,
        user=user,
        yes_shares=_int(row[0]),
        no_shares=_int(row[1]),
        yes_cost=_int(row[2]),
        no_cost=_int(row[3]),
        agreement_percentage=_int(row[4]),
        prediction_side=_bool(row[5]),
    )


def decode_count(row: list[Any]) -> int:
    _require(row, 1, "get_markets_count")
    count = _int(row[0])
    if count < 0:
        raise ValueError(f"negative market count {count}")
    return count


def decode_price(row: list[Any]) -> float:
    """Ledger percentage in [0, 100] -> price in [0, 1]. Taken as-is, not re-derived from share totals."""
    _require(row, 1, "get_market_price")
    pct = _int(row[0])
    if not 0 <= pct <= 100:
        raise ValueError(f"price percentage {pct} outside [0, 100]")
    return pct / 100
