"""Tests for per-trade derived fields.

**Feature: trade-journal**
"""

from datetime import datetime

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics.derived import (
    apply_derived_fields,
    compute_derived_fields,
    profit_loss,
    profit_loss_percent,
    reward_amount,
    risk_amount,
    risk_percent,
    risk_reward_ratio,
)
from tradejournal.models import AssetType, Direction, Trade, TradeDraft, TradeStatus


def make_trade(**overrides) -> Trade:
    data = {
        "id": "trade_1",
        "asset_type": AssetType.STOCKS,
        "symbol": "AAPL",
        "direction": Direction.LONG,
        "status": TradeStatus.CLOSED,
        "position_size": 100,
        "entry_price": 150.25,
        "entry_date": datetime(2024, 1, 15, 9, 30),
        "exit_price": 155.5,
        "exit_date": datetime(2024, 1, 16, 14, 25),
        "commission": 5.0,
        "stop_loss": 148.0,
        "take_profit": 155.0,
    }
    data.update(overrides)
    return Trade(**data)


prices = st.floats(min_value=0.01, max_value=10_000, allow_nan=False, allow_infinity=False)
sizes = st.floats(min_value=0.001, max_value=10_000, allow_nan=False, allow_infinity=False)
fees = st.floats(min_value=0, max_value=100, allow_nan=False, allow_infinity=False)


class TestProfitLoss:
    """Net P&L of closed trades, zero for everything else."""

    def test_long_winner(self):
        trade = make_trade()
        assert profit_loss(trade) == pytest.approx(520.0)
        assert profit_loss_percent(trade) == pytest.approx(520.0 / 15025 * 100)

    def test_short_loser(self):
        trade = make_trade(
            asset_type=AssetType.FOREX,
            symbol="EUR/USD",
            direction=Direction.SHORT,
            position_size=10000,
            entry_price=1.085,
            exit_price=1.089,
            commission=7.0,
            stop_loss=1.087,
            take_profit=1.082,
        )
        assert profit_loss(trade) == pytest.approx(-47.0)

    def test_open_trade_has_no_pnl(self):
        trade = make_trade(status=TradeStatus.OPEN, exit_price=None, exit_date=None)
        assert profit_loss(trade) == 0.0
        assert profit_loss_percent(trade) == 0.0

    def test_cancelled_trade_has_no_pnl(self):
        trade = make_trade(status=TradeStatus.CANCELLED)
        assert profit_loss(trade) == 0.0

    def test_closed_without_exit_price_has_no_pnl(self):
        trade = make_trade(exit_price=None, exit_date=None)
        assert profit_loss(trade) == 0.0

    def test_missing_commission_counts_as_zero(self):
        trade = make_trade(commission=None)
        assert profit_loss(trade) == pytest.approx(525.0)

    def test_draft_status_is_inferred(self):
        """A draft with an exit price but no status is treated as closed."""
        draft = TradeDraft(
            direction="long", position_size=10, entry_price=100, exit_price=110,
        )
        assert profit_loss(draft) == pytest.approx(100.0)

    @given(entry=prices, exit_price=prices, size=sizes, commission=fees)
    @settings(max_examples=100)
    def test_long_and_short_mirror(self, entry, exit_price, size, commission):
        """
        *For any* prices, the long and short P&L of the same move sum to
        minus twice the commission.
        """
        long_trade = make_trade(
            entry_price=entry, exit_price=exit_price, position_size=size,
            commission=commission, stop_loss=None, take_profit=None,
        )
        short_trade = long_trade.model_copy(update={"direction": Direction.SHORT})

        total = profit_loss(long_trade) + profit_loss(short_trade)
        assert total == pytest.approx(-2 * commission, abs=1e-6), \
            f"Long/short P&L do not mirror: {total}"


class TestRiskReward:
    """Risk, reward and their ratio from stop and target levels."""

    def test_long_levels(self):
        trade = make_trade()
        assert risk_amount(trade) == pytest.approx(225.0)
        assert reward_amount(trade) == pytest.approx(475.0)
        assert risk_reward_ratio(trade) == pytest.approx(475 / 225)

    def test_short_levels(self):
        trade = make_trade(
            direction=Direction.SHORT, entry_price=100, stop_loss=105, take_profit=90,
            position_size=10, exit_price=95,
        )
        assert risk_amount(trade) == pytest.approx(50.0)
        assert reward_amount(trade) == pytest.approx(100.0)
        assert risk_reward_ratio(trade) == pytest.approx(2.0)

    def test_open_trade_still_has_risk(self):
        trade = make_trade(status=TradeStatus.OPEN, exit_price=None, exit_date=None)
        assert risk_amount(trade) == pytest.approx(225.0)

    def test_no_stop_means_no_risk(self):
        trade = make_trade(stop_loss=None)
        assert risk_amount(trade) == 0.0
        assert risk_reward_ratio(trade) == 0.0

    def test_no_target_means_no_reward(self):
        trade = make_trade(take_profit=None)
        assert reward_amount(trade) == 0.0
        assert risk_reward_ratio(trade) == 0.0

    def test_risk_percent_uses_trade_account_size(self):
        trade = make_trade(account_size=25000)
        assert risk_percent(trade, 10000) == pytest.approx(0.9)

    def test_risk_percent_falls_back_to_default(self):
        trade = make_trade(account_size=None)
        assert risk_percent(trade, 10000) == pytest.approx(2.25)

    def test_zero_account_size_falls_back_to_default(self):
        draft = TradeDraft(**{**make_trade().source_fields(), "account_size": 0})
        assert risk_percent(draft, 10000) == pytest.approx(2.25)


class TestApplyDerivedFields:
    """Recomputing derived fields on a stored trade."""

    def test_overwrites_stale_values(self):
        stale = make_trade(profit_loss=999.0, risk_reward_ratio=42.0)
        fresh = apply_derived_fields(stale, 10000)

        assert fresh.profit_loss == pytest.approx(520.0)
        assert fresh.risk_reward_ratio == pytest.approx(475 / 225)
        assert fresh.risk_percent == pytest.approx(2.25)
        assert stale.profit_loss == 999.0, "Input trade must not be modified"

    @given(entry=prices, exit_price=prices, size=sizes, commission=fees)
    @settings(max_examples=50)
    def test_idempotent(self, entry, exit_price, size, commission):
        """
        *For any* trade, applying the derived fields twice gives the same
        result as applying them once.
        """
        trade = make_trade(
            entry_price=entry, exit_price=exit_price, position_size=size,
            commission=commission, stop_loss=None, take_profit=None,
        )
        once = apply_derived_fields(trade, 10000)
        twice = apply_derived_fields(once, 10000)
        assert once == twice

    def test_compute_matches_individual_functions(self):
        trade = make_trade()
        derived = compute_derived_fields(trade, 10000)
        assert derived.profit_loss == profit_loss(trade)
        assert derived.risk_amount == risk_amount(trade)
        assert derived.reward_amount == reward_amount(trade)
