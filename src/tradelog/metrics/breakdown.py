from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from tradelog.dates import TIME_BUCKETS, TRADING_WEEKDAYS, classify_time_bucket, classify_weekday
from tradelog.metrics.summary import round_half_up
from tradelog.models import Trade


@dataclass(frozen=True)
class BreakdownRow:
    key: str
    trades: int
    wins: int
    losses: int
    win_rate: float
    pnl: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": self.win_rate,
            "pnl": self.pnl,
        }


def time_bucket_breakdown(trades: Iterable[Trade]) -> list[BreakdownRow]:
    return _breakdown(trades, TIME_BUCKETS, lambda trade: classify_time_bucket(trade.time))


def weekday_breakdown(trades: Iterable[Trade]) -> list[BreakdownRow]:
    return _breakdown(trades, TRADING_WEEKDAYS, lambda trade: classify_weekday(trade.date))


def instrument_breakdown(
    trades: Iterable[Trade],
    all_trades: Iterable[Trade],
) -> list[BreakdownRow]:
    return _breakdown(trades, discover_instruments(all_trades), lambda trade: trade.instrument)


def discover_instruments(trades: Iterable[Trade]) -> list[str]:
    return list(dict.fromkeys(trade.instrument for trade in trades))


def _breakdown(
    trades: Iterable[Trade],
    categories: Sequence[str],
    key_fn: Callable[[Trade], str],
) -> list[BreakdownRow]:
    buckets: dict[str, list[Trade]] = {category: [] for category in categories}
    for trade in trades:
        key = key_fn(trade)
        if key in buckets:
            buckets[key].append(trade)
    return [_bucket_summary(category, buckets[category]) for category in categories]


def _bucket_summary(key: str, items: list[Trade]) -> BreakdownRow:
    wins = sum(1 for item in items if item.is_win)
    losses = sum(1 for item in items if item.is_loss)
    total = len(items)
    win_rate = round_half_up(wins / total * 100, 1) if total else 0.0
    return BreakdownRow(
        key=key,
        trades=total,
        wins=wins,
        losses=losses,
        win_rate=win_rate,
        pnl=sum(item.pnl_value for item in items),
    )
