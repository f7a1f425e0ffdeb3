from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable

from tradelog.models import Trade

PROFIT_FACTOR_INFINITE = math.inf
INFINITY_DISPLAY = "∞"


@dataclass(frozen=True)
class MetricsSnapshot:
    total_trades: int
    wins: int
    losses: int
    win_rate: float
    total_win_rr: float
    total_loss_rr: float
    profit_factor: float
    avg_rr: float
    net_pnl: float

    @property
    def profit_factor_is_infinite(self) -> bool:
        return math.isinf(self.profit_factor)

    def to_payload(self) -> dict[str, Any]:
        return {
            "total_trades": self.total_trades,
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": self.win_rate,
            "win_rate_display": f"{self.win_rate:.2f}",
            "total_win_rr": self.total_win_rr,
            "total_loss_rr": self.total_loss_rr,
            "profit_factor": None if self.profit_factor_is_infinite else self.profit_factor,
            "profit_factor_display": format_ratio(self.profit_factor),
            "profit_factor_infinite": self.profit_factor_is_infinite,
            "avg_rr": self.avg_rr,
            "avg_rr_display": f"{self.avg_rr:.2f}",
            "net_pnl": self.net_pnl,
        }


def compute_metrics(trades: Iterable[Trade]) -> MetricsSnapshot:
    trade_list = list(trades)
    total = len(trade_list)
    wins = [trade for trade in trade_list if trade.is_win]
    losses = [trade for trade in trade_list if trade.is_loss]

    win_rate = 0.0
    if total:
        win_rate = round_half_up(len(wins) / total * 100, 2)

    total_win_rr = sum(trade.risk_reward for trade in wins)
    total_loss_rr = abs(sum(trade.risk_reward for trade in losses))

    avg_rr = 0.0
    if total:
        avg_rr = round_half_up(sum(trade.risk_reward for trade in trade_list) / total, 2)

    return MetricsSnapshot(
        total_trades=total,
        wins=len(wins),
        losses=len(losses),
        win_rate=win_rate,
        total_win_rr=total_win_rr,
        total_loss_rr=total_loss_rr,
        profit_factor=profit_factor(total_win_rr, total_loss_rr),
        avg_rr=avg_rr,
        net_pnl=sum(trade.pnl_value for trade in trade_list),
    )


def profit_factor(total_win_rr: float, total_loss_rr: float) -> float:
    if total_loss_rr > 0:
        return max(0.0, round_half_up(total_win_rr / total_loss_rr, 2))
    if total_win_rr > 0:
        return PROFIT_FACTOR_INFINITE
    return 0.0


def round_half_up(value: float, places: int) -> float:
    """Round half away from zero, looking at the exact binary value of ``value``."""
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Wide enough for any finite double at any practical number of places.
        ctx.prec = 400
        return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_ratio(value: float) -> str:
    if math.isinf(value):
        return INFINITY_DISPLAY
    return f"{value:.2f}"
