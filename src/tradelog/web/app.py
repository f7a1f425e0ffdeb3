from __future__ import annotations

import time
from datetime import date
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from jinja2 import Undefined

from tradelog.config.app_config import AppConfig, load_app_config
from tradelog.dates import TIME_BUCKETS, WEEKDAYS, parse_local_date
from tradelog.entries import build_trade, next_trade_id
from tradelog.metrics.breakdown import discover_instruments
from tradelog.metrics.calendar import calendar_index, calendar_month, day_trades, month_options, parse_month
from tradelog.metrics.dashboard import compute_dashboard
from tradelog.metrics.filters import build_filters
from tradelog.metrics.ranges import preset_options
from tradelog.metrics.summary import format_ratio
from tradelog.models import FilterConfig, Trade
from tradelog.storage import sqlite_reader
from tradelog.storage.sqlite_store import connect, delete_trade, init_db, insert_trade, replace_trade

APP_ROOT = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(APP_ROOT / "templates"))


app = FastAPI(title="Trade Journal")


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request) -> HTMLResponse:
    app_config = load_app_config()
    today = _today()
    trades = _load_trades(app_config)
    filters = _filters_from_request(request, app_config)
    state = compute_dashboard(trades, filters, today)
    month = parse_month(request.query_params.get("month")) or date(today.year, today.month, 1)
    context = {
        "page": "dashboard",
        "state": state,
        "filters": filters,
        "calendar": calendar_month(state.calendar, month, week_start=app_config.calendar.week_start),
        "month_options": month_options(trades, today),
        "filter_query": _query_without_month(request),
        **_filter_options(trades),
        "data_note": None if trades else "No trades recorded yet.",
    }
    return TEMPLATES.TemplateResponse(request, "dashboard.html", context)


@app.get("/api/dashboard")
def dashboard_api(request: Request) -> dict[str, Any]:
    app_config = load_app_config()
    trades = _load_trades(app_config)
    filters = _filters_from_request(request, app_config)
    return compute_dashboard(trades, filters, _today()).to_payload()


@app.get("/api/filters")
def filters_api() -> dict[str, Any]:
    trades = _load_trades(load_app_config())
    return _filter_options(trades)


@app.get("/api/calendar")
def calendar_api(request: Request) -> dict[str, Any]:
    app_config = load_app_config()
    today = _today()
    trades = _load_trades(app_config)
    month = parse_month(request.query_params.get("month")) or date(today.year, today.month, 1)
    index = calendar_index(trades)
    return {
        "month": calendar_month(index, month, week_start=app_config.calendar.week_start),
        "month_options": month_options(trades, today),
        "days": {key: day.to_payload() for key, day in index.items()},
    }


@app.get("/api/calendar/{day}")
def calendar_day_api(day: str) -> dict[str, Any]:
    if parse_local_date(day) is None:
        raise HTTPException(status_code=400, detail=f"Invalid date: {day}")
    trades = _load_trades(load_app_config())
    items = day_trades(calendar_index(trades), day)
    return {"date": day, "trades": [trade.to_payload() for trade in items]}


@app.get("/api/trades")
def trades_api() -> list[dict[str, Any]]:
    return [trade.to_payload() for trade in _load_trades(load_app_config())]


@app.post("/api/trades", status_code=201)
def create_trade_api(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    app_config = load_app_config()
    conn = _connect(app_config)
    try:
        trade_id = next_trade_id(int(time.time() * 1000), sqlite_reader.trade_ids(conn))
        trade = _build_trade(payload, trade_id, app_config)
        insert_trade(conn, trade)
    finally:
        conn.close()
    return trade.to_payload()


@app.put("/api/trades/{trade_id}")
def update_trade_api(trade_id: int, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    app_config = load_app_config()
    conn = _connect(app_config)
    try:
        if sqlite_reader.get_trade(conn, trade_id) is None:
            raise HTTPException(status_code=404, detail="Trade not found")
        trade = _build_trade(payload, trade_id, app_config)
        replace_trade(conn, trade)
    finally:
        conn.close()
    return trade.to_payload()


@app.delete("/api/trades/{trade_id}")
def delete_trade_api(trade_id: int) -> dict[str, Any]:
    conn = _connect(load_app_config())
    try:
        if not delete_trade(conn, trade_id):
            raise HTTPException(status_code=404, detail="Trade not found")
    finally:
        conn.close()
    return {"deleted": trade_id}


def _today() -> date:
    return date.today()


def _resolve_db_path(app_config: AppConfig) -> Path:
    return app_config.app.db_path


def _connect(app_config: AppConfig):
    conn = connect(_resolve_db_path(app_config))
    init_db(conn)
    return conn


def _load_trades(app_config: AppConfig) -> list[Trade]:
    conn = _connect(app_config)
    try:
        return sqlite_reader.load_trades(conn)
    finally:
        conn.close()


def _build_trade(payload: dict[str, Any], trade_id: int, app_config: AppConfig) -> Trade:
    try:
        return build_trade(
            payload,
            trade_id=trade_id,
            policy=app_config.journal.normalization,
            default_instrument=app_config.journal.default_instrument,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _filters_from_request(request: Request, app_config: AppConfig) -> FilterConfig:
    params = request.query_params
    return build_filters(
        range_name=params.get("range"),
        from_value=params.get("from"),
        to_value=params.get("to"),
        time_bucket=params.get("time_bucket"),
        weekday=params.get("weekday"),
        instrument=params.get("instrument"),
        search=params.get("search"),
        default_range=app_config.journal.default_range,
    )


def _query_without_month(request: Request) -> str:
    params = [(key, value) for key, value in request.query_params.multi_items() if key != "month" and value]
    return urlencode(params) + "&" if params else ""


def _filter_options(trades: list[Trade]) -> dict[str, Any]:
    return {
        "range_options": preset_options(),
        "time_bucket_options": list(TIME_BUCKETS),
        "weekday_options": list(WEEKDAYS),
        "instrument_options": discover_instruments(trades),
    }


def money_filter(value: float | None) -> str:
    if value is None or isinstance(value, Undefined):
        return "n/a"
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return "n/a"
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def ratio_filter(value: float | None) -> str:
    if value is None or isinstance(value, Undefined):
        return "n/a"
    return format_ratio(float(value))


TEMPLATES.env.filters.update(
    {
        "money": money_filter,
        "ratio": ratio_filter,
    }
)


def main() -> None:
    import uvicorn

    app_config = load_app_config()
    uvicorn.run(
        "tradelog.web.app:app",
        host=app_config.app.host,
        port=app_config.app.port,
        reload=app_config.app.reload,
    )


if __name__ == "__main__":
    main()
