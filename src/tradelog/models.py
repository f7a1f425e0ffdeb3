from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

SIDE_LONG = "long"
SIDE_SHORT = "short"
SIDES = (SIDE_LONG, SIDE_SHORT)

RESULT_WIN = "win"
RESULT_LOSS = "loss"
RESULTS = (RESULT_WIN, RESULT_LOSS)

ALL = "all"


@dataclass(frozen=True)
class Trade:
    trade_id: int
    date: str
    time: str
    side: str
    instrument: str
    result: str
    risk_reward: float
    profit_loss: float | None = None

    @property
    def pnl_value(self) -> float:
        return self.profit_loss or 0.0

    @property
    def is_win(self) -> bool:
        return self.result == RESULT_WIN

    @property
    def is_loss(self) -> bool:
        return self.result == RESULT_LOSS

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.trade_id,
            "date": self.date,
            "time": self.time,
            "side": self.side,
            "instrument": self.instrument,
            "result": self.result,
            "riskReward": self.risk_reward,
            "profitLoss": self.profit_loss,
        }


@dataclass(frozen=True)
class DateRange:
    start: date | None = None
    end: date | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date | None) -> bool:
        if self.is_unbounded:
            return True
        if day is None:
            return False
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def to_payload(self) -> dict[str, str | None]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


@dataclass(frozen=True)
class RangeSpec:
    preset: str | None = None
    start: date | None = None
    end: date | None = None

    @classmethod
    def all_time(cls) -> RangeSpec:
        return cls(preset="all-time")

    @classmethod
    def explicit(cls, start: date | None, end: date | None) -> RangeSpec:
        return cls(preset=None, start=start, end=end)


@dataclass(frozen=True)
class FilterConfig:
    range_spec: RangeSpec = field(default_factory=RangeSpec.all_time)
    time_bucket: str = ALL
    weekday: str = ALL
    instrument: str = ALL
    search: str = ""
