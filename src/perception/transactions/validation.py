"""Caller-side input checks, run before a payload is built or anything touches the network."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any

from perception.errors import InputValidationError


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_question(question: str) -> str:
    question = (question or "").strip()
    if not question:
        raise InputValidationError("question", "must not be empty")
    return question


def validate_resolve_timestamp(resolve_ts: int, now: float | None = None) -> int:
    """Resolution time must be strictly in the future."""
    if not _is_int(resolve_ts):
        raise InputValidationError("resolve_ts", "must be unix seconds")
    now = time.time() if now is None else now
    if resolve_ts <= now:
        raise InputValidationError("resolve_ts", "resolution time must be in the future")
    return resolve_ts


def resolve_timestamp_from(date_str: str, time_str: str) -> int:
    """Local date (YYYY-MM-DD) and time (HH:MM) -> unix seconds."""
    try:
        dt = datetime.strptime(f"{date_str}T{time_str}", "%Y-%m-%dT%H:%M")
    except ValueError as e:
        raise InputValidationError(
            "resolve_ts", f"invalid date/time {date_str!r} {time_str!r}"
        ) from e
    return int(dt.timestamp())


def validate_amount(amount: int) -> int:
    if not _is_int(amount) or amount <= 0:
        raise InputValidationError("amount", "must be a positive integer")
    return amount


def validate_agreement_percentage(pct: int) -> int:
    if not _is_int(pct) or not 0 <= pct <= 100:
        raise InputValidationError("agreement_percentage", "must be an integer in [0, 100]")
    return pct


def validate_market_id(market_id: int) -> int:
    if not _is_int(market_id) or market_id < 0:
        raise InputValidationError("market_id", "must be a non-negative integer")
    return market_id
