"""Tests for the scalar metrics snapshot."""

import json
import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from strategies import make_trade, trade_strategy
from tradelog.metrics.summary import (
    PROFIT_FACTOR_INFINITE,
    compute_metrics,
    format_ratio,
    profit_factor,
    round_half_up,
)


class TestScenarios:
    def test_one_win_one_loss_same_day(self):
        trades = [
            make_trade(1, date="2024-01-02", time="09:35", result="win", risk_reward=2, profit_loss=200),
            make_trade(2, date="2024-01-02", time="09:50", result="loss", risk_reward=-1, profit_loss=-100),
        ]
        metrics = compute_metrics(trades)
        assert metrics.wins == 1
        assert metrics.losses == 1
        assert metrics.win_rate == 50.0
        assert metrics.total_win_rr == 2
        assert metrics.total_loss_rr == 1
        assert metrics.profit_factor == 2.0
        assert metrics.avg_rr == 0.5
        assert metrics.net_pnl == 100

    def test_empty_collection(self):
        metrics = compute_metrics([])
        payload = metrics.to_payload()
        assert payload["win_rate_display"] == "0.00"
        assert payload["profit_factor_display"] == "0.00"
        assert payload["avg_rr_display"] == "0.00"
        assert metrics.net_pnl == 0
        assert metrics.total_trades == 0

    def test_all_wins_gives_infinite_sentinel(self):
        metrics = compute_metrics([make_trade(1), make_trade(2, risk_reward=1.5)])
        assert metrics.profit_factor == PROFIT_FACTOR_INFINITE
        assert metrics.profit_factor_is_infinite
        assert format_ratio(metrics.profit_factor) == "∞"

    def test_missing_profit_loss_counts_as_zero(self):
        metrics = compute_metrics([make_trade(1, profit_loss=None), make_trade(2, profit_loss=50)])
        assert metrics.net_pnl == 50

    def test_win_rate_rounds_to_two_places(self):
        trades = [make_trade(1), make_trade(2, result="loss", risk_reward=-1), make_trade(3, result="loss", risk_reward=-1)]
        assert compute_metrics(trades).win_rate == 33.33


class TestProfitFactor:
    def test_both_zero(self):
        assert profit_factor(0.0, 0.0) == 0.0

    def test_negative_win_r_never_yields_negative_factor(self):
        assert profit_factor(-2.0, 1.0) == 0.0
        assert profit_factor(-2.0, 0.0) == 0.0

    def test_rounds_ratio(self):
        assert profit_factor(1.0, 3.0) == 0.33


class TestRounding:
    @pytest.mark.parametrize(
        ("value", "places", "expected"),
        [(0.125, 2, 0.13), (2.5, 0, 3.0), (-0.125, 2, -0.13), (66.66666, 1, 66.7), (1.005, 2, 1.0)],
    )
    def test_half_up_on_exact_binary_value(self, value, places, expected):
        assert round_half_up(value, places) == expected

    def test_infinity_passes_through(self):
        assert math.isinf(round_half_up(math.inf, 2))


class TestMetricsProperties:
    @given(trades=st.lists(trade_strategy(), max_size=60))
    @settings(max_examples=100)
    def test_counts_and_rate_bounds(self, trades):
        metrics = compute_metrics(trades)
        assert metrics.wins + metrics.losses <= metrics.total_trades == len(trades)
        assert 0.0 <= metrics.win_rate <= 100.0

    @given(trades=st.lists(trade_strategy(), max_size=60))
    @settings(max_examples=100)
    def test_profit_factor_is_never_negative_or_nan(self, trades):
        metrics = compute_metrics(trades)
        assert not math.isnan(metrics.profit_factor)
        assert metrics.profit_factor >= 0.0
        if metrics.total_loss_rr == 0:
            assert metrics.profit_factor in (0.0, PROFIT_FACTOR_INFINITE)

    @given(trades=st.lists(trade_strategy(), max_size=30))
    @settings(max_examples=50)
    def test_payload_is_strict_json(self, trades):
        payload = compute_metrics(trades).to_payload()
        json.dumps(payload, allow_nan=False)
