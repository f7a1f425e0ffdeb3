from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Iterable, Mapping

from tradelog.dates import format_date_key, minutes_since_midnight, parse_local_date
from tradelog.models import RESULT_LOSS, RESULT_WIN, RESULTS, SIDE_LONG, SIDES, Trade

POLICY_RAW = "raw"
POLICY_SIGNED = "signed"
POLICIES = (POLICY_RAW, POLICY_SIGNED)

DEFAULT_INSTRUMENT = "NQ!"

MISSING_FIELDS_MESSAGE = "Please fill in all fields"
INVALID_NUMBERS_MESSAGE = "Please enter valid numbers for Risk Reward and Profit/Loss"


def build_trade(
    form: Mapping[str, Any],
    *,
    trade_id: int,
    policy: str = POLICY_RAW,
    default_instrument: str = DEFAULT_INSTRUMENT,
) -> Trade:
    """Validate a submitted trade form and build a normalized ``Trade``.

    Raises ``ValueError`` with a user-facing message when the form is
    incomplete or malformed.
    """
    date_value = _text(_pick(form, "date"))
    time_value = _text(_pick(form, "time"))
    risk_raw = _pick(form, "riskReward", "risk_reward")
    pnl_raw = _pick(form, "profitLoss", "profit_loss")

    if not date_value or not time_value or risk_raw is None or pnl_raw is None:
        raise ValueError(MISSING_FIELDS_MESSAGE)

    try:
        risk_reward = float(risk_raw)
        profit_loss = float(pnl_raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(INVALID_NUMBERS_MESSAGE) from exc
    if not (math.isfinite(risk_reward) and math.isfinite(profit_loss)):
        raise ValueError(INVALID_NUMBERS_MESSAGE)

    parsed_date = parse_local_date(date_value)
    if parsed_date is None:
        raise ValueError(f"Invalid date: {date_value}")
    if minutes_since_midnight(time_value) is None:
        raise ValueError(f"Invalid time: {time_value}")

    side = (_text(_pick(form, "side")) or SIDE_LONG).lower()
    if side not in SIDES:
        raise ValueError(f"Unknown side: {side}")
    result = (_text(_pick(form, "result")) or RESULT_WIN).lower()
    if result not in RESULTS:
        raise ValueError(f"Unknown result: {result}")
    instrument = _text(_pick(form, "instrument")) or default_instrument

    trade = Trade(
        trade_id=trade_id,
        date=format_date_key(parsed_date),
        time=time_value,
        side=side,
        instrument=instrument,
        result=result,
        risk_reward=risk_reward,
        profit_loss=profit_loss,
    )
    return normalize_trade(trade, policy)


def normalize_trade(trade: Trade, policy: str) -> Trade:
    if policy == POLICY_RAW:
        return trade
    if policy == POLICY_SIGNED:
        magnitude = abs(trade.profit_loss or 0.0)
        if trade.result == RESULT_LOSS:
            return replace(trade, risk_reward=-1.0, profit_loss=-magnitude)
        return replace(trade, profit_loss=magnitude)
    raise ValueError(f"Unknown normalization policy: {policy}")


def next_trade_id(now_ms: int, existing_ids: Iterable[int]) -> int:
    highest = max(existing_ids, default=0)
    return now_ms if now_ms > highest else highest + 1


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
