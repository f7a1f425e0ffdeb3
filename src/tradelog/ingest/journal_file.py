from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from tradelog.entries import POLICY_RAW, build_trade
from tradelog.models import Trade


@dataclass(frozen=True)
class IngestResult:
    trades: list[Trade]
    skipped: int = 0


def load_trades(path: str | Path, *, policy: str = POLICY_RAW) -> IngestResult:
    source_path = Path(path)
    suffix = source_path.suffix.lower()
    if suffix == ".json":
        with source_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return load_trades_payload(payload, policy=policy)
    if suffix in {".csv", ".tsv"}:
        with source_path.open("r", encoding="utf-8", newline="") as handle:
            reader = csv.DictReader(handle, delimiter="\t" if suffix == ".tsv" else ",")
            trades, skipped = _normalize_records(reader, policy=policy)
        return IngestResult(trades=trades, skipped=skipped)
    raise ValueError(f"Unsupported file type: {source_path.suffix}")


def load_trades_payload(payload: Any, *, policy: str = POLICY_RAW) -> IngestResult:
    records = [_default_profit_loss(record) for record in _extract_records(payload)]
    trades, skipped = _normalize_records(records, policy=policy)
    return IngestResult(trades=trades, skipped=skipped)


def dump_trades(trades: Iterable[Trade], path: str | Path) -> int:
    out_path = Path(path)
    payload = [trade.to_payload() for trade in trades]
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return len(payload)


def _extract_records(payload: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("trades", "data"):
            if key in payload and isinstance(payload[key], list):
                return payload[key]
    raise ValueError("Unsupported JSON format for trades payload")


def _default_profit_loss(record: Any) -> Any:
    # Saved journals predating the P&L field load with zero P&L.
    if not isinstance(record, Mapping):
        return record
    value = record.get("profitLoss", record.get("profit_loss"))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return record
    patched = dict(record)
    patched.pop("profit_loss", None)
    patched["profitLoss"] = 0
    return patched


def _normalize_records(
    records: Iterable[Mapping[str, Any]],
    *,
    policy: str,
) -> tuple[list[Trade], int]:
    trades: list[Trade] = []
    skipped = 0
    seen: set[int] = set()
    for raw in records:
        try:
            trade = _normalize_trade(raw, policy=policy)
        except (TypeError, ValueError):
            skipped += 1
            continue
        if trade.trade_id in seen:
            skipped += 1
            continue
        seen.add(trade.trade_id)
        trades.append(trade)
    return trades, skipped


def _normalize_trade(raw: Mapping[str, Any], *, policy: str) -> Trade:
    if not isinstance(raw, Mapping):
        raise ValueError("Trade record must be an object")
    trade_id = _pick(raw, "id", "trade_id", "tradeId")
    if trade_id is None:
        raise ValueError("Missing trade id")
    return build_trade(raw, trade_id=int(trade_id), policy=policy)


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None
