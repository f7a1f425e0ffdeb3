import re

import pytest
from fastapi.testclient import TestClient

from strategies import TODAY, make_trade
from tradelog.config.app_config import CONFIG_ENV_VAR
from tradelog.entries import MISSING_FIELDS_MESSAGE
from tradelog.storage.sqlite_store import connect, init_db, insert_trades
from tradelog.web import app as app_module

NEW_TRADE = {
    "date": "2024-03-13",
    "time": "09:52",
    "side": "short",
    "instrument": "ES!",
    "result": "win",
    "riskReward": 1.5,
    "profitLoss": 300,
}


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "journal.sqlite"
    config_path = tmp_path / "app.toml"
    config_path.write_text(f'[app]\ndb_path = "{path.as_posix()}"\n', encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    monkeypatch.setattr(app_module, "_today", lambda: TODAY)
    return path


@pytest.fixture
def client(db_path):
    return TestClient(app_module.app)


@pytest.fixture
def seeded(db_path):
    conn = connect(db_path)
    init_db(conn)
    insert_trades(
        conn,
        [
            make_trade(1, date="2024-03-04", time="09:35", profit_loss=200.0),
            make_trade(2, date="2024-03-04", time="10:40", result="loss", risk_reward=-1.0, profit_loss=-100.0),
            make_trade(3, date="2024-02-20", instrument="ES!", profit_loss=50.0),
        ],
    )
    conn.close()


class TestTradeEndpoints:
    def test_create_list_update_delete(self, client):
        created = client.post("/api/trades", json=NEW_TRADE)
        assert created.status_code == 201
        trade = created.json()
        assert trade["instrument"] == "ES!"
        assert trade["riskReward"] == 1.5

        listed = client.get("/api/trades").json()
        assert [item["id"] for item in listed] == [trade["id"]]

        updated = client.put(f"/api/trades/{trade['id']}", json={**NEW_TRADE, "instrument": "NQ!"})
        assert updated.status_code == 200
        assert updated.json()["id"] == trade["id"]
        assert client.get("/api/trades").json()[0]["instrument"] == "NQ!"

        assert client.delete(f"/api/trades/{trade['id']}").json() == {"deleted": trade["id"]}
        assert client.get("/api/trades").json() == []
        assert client.delete(f"/api/trades/{trade['id']}").status_code == 404

    def test_created_ids_increase(self, client):
        first = client.post("/api/trades", json=NEW_TRADE).json()["id"]
        second = client.post("/api/trades", json=NEW_TRADE).json()["id"]
        assert second > first

    def test_invalid_trade_is_rejected(self, client):
        response = client.post("/api/trades", json={"date": "2024-03-13"})
        assert response.status_code == 400
        assert response.json()["detail"] == MISSING_FIELDS_MESSAGE
        assert client.get("/api/trades").json() == []

    def test_update_missing_trade(self, client):
        assert client.put("/api/trades/404", json=NEW_TRADE).status_code == 404


@pytest.mark.usefixtures("seeded")
class TestAnalyticsEndpoints:
    def test_dashboard_all_time(self, client):
        payload = client.get("/api/dashboard", params={"range": "all-time"}).json()
        metrics = payload["metrics"]
        assert metrics["total_trades"] == 3
        assert metrics["win_rate_display"] == "66.67"
        assert metrics["profit_factor_display"] == "4.00"
        assert metrics["net_pnl"] == 150
        assert [row["key"] for row in payload["instruments"]] == ["NQ!", "ES!"]
        assert payload["daily_series"][0]["date"] == "2024-02-20"
        assert payload["daily_series"][-1]["date"] == "2024-03-04"
        assert payload["daily_series"][-1]["cumulative"] == 150

    def test_dashboard_filters(self, client):
        payload = client.get(
            "/api/dashboard",
            params={"range": "month-to-date", "weekday": "monday", "time_bucket": "9:30-9:45"},
        ).json()
        assert [trade["id"] for trade in payload["trades"]] == [1]
        assert payload["metrics"]["profit_factor"] is None
        assert payload["metrics"]["profit_factor_display"] == "∞"
        assert payload["range"]["start"] == "2024-03-01"
        # Calendar covers the whole journal regardless of filters.
        assert set(payload["calendar"]) == {"2024-03-04", "2024-02-20"}

    def test_explicit_dates_override_preset(self, client):
        payload = client.get(
            "/api/dashboard", params={"range": "today", "from": "2024-02-01", "to": "2024-02-29"}
        ).json()
        assert [trade["id"] for trade in payload["trades"]] == [3]
        assert len(payload["daily_series"]) == 29

    def test_filter_options(self, client):
        payload = client.get("/api/filters").json()
        assert payload["instrument_options"] == ["NQ!", "ES!"]
        assert payload["weekday_options"][0] == "Sunday"
        assert "10:30+" in payload["time_bucket_options"]

    def test_calendar(self, client):
        payload = client.get("/api/calendar", params={"month": "2024-03"}).json()
        assert payload["month"]["month_key"] == "2024-03"
        assert payload["month"]["prev_month"] == "2024-02"
        assert [option["key"] for option in payload["month_options"]] == ["2024-03", "2024-02"]
        assert payload["days"]["2024-03-04"]["net_pnl"] == 100

    def test_calendar_day(self, client):
        payload = client.get("/api/calendar/2024-03-04").json()
        assert [trade["id"] for trade in payload["trades"]] == [1, 2]
        assert client.get("/api/calendar/2024-03-05").json()["trades"] == []
        assert client.get("/api/calendar/not-a-day").status_code == 400

    def test_dashboard_page(self, client):
        response = client.get("/", params={"month": "2024-03"})
        assert response.status_code == 200
        assert "Trade Journal" in response.text
        assert "March 2024" in response.text
        assert "$150.00" in response.text

    def test_dashboard_page_keeps_filters_in_month_links(self, client):
        params = {"range": "month-to-date", "instrument": "NQ!", "month": "2024-03"}
        text = client.get("/", params=params).text
        assert re.search(r'href="\?range=month-to-date&(amp;)?instrument=NQ%21&(amp;)?month=2024-02"', text)
        assert '<option value="2024-02"' in text

    def test_dashboard_page_shows_custom_dates(self, client):
        text = client.get("/", params={"from": "2024-02-01", "to": "2024-02-29"}).text
        assert 'name="from" value="2024-02-01"' in text
        assert 'name="to" value="2024-02-29"' in text
        assert re.search(r'href="\?from=2024-02-01&(amp;)?to=2024-02-29&(amp;)?month=', text)


def test_dashboard_page_without_trades(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "No trades recorded yet." in response.text


def test_money_filter():
    assert app_module.money_filter(-1234.5) == "-$1,234.50"
    assert app_module.money_filter(None) == "n/a"
