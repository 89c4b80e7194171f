"""Property-based tests for streak and drawdown tracking.

**Feature: trade-journal**
"""

import random
from datetime import datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics.streaks import calculate_drawdown, calculate_streaks, closed_by_exit
from tradejournal.models import AssetType, Direction, Trade, TradeStatus

START = datetime(2024, 1, 1, 10, 0)


def trade_with_pl(index: int, pl: float, status: TradeStatus = TradeStatus.CLOSED) -> Trade:
    """A long trade of size 1 whose P&L is ``pl``, exiting ``index`` days after START."""
    entry_date = START + timedelta(days=index)
    return Trade(
        id=f"trade_{index}",
        asset_type=AssetType.STOCKS,
        symbol="TEST",
        direction=Direction.LONG,
        status=status,
        position_size=1,
        entry_price=1000,
        entry_date=entry_date,
        exit_price=1000 + pl,
        exit_date=entry_date + timedelta(hours=2),
    )


def trades_from(pls: list[float]) -> list[Trade]:
    return [trade_with_pl(i, pl) for i, pl in enumerate(pls)]


pl_lists = st.lists(
    st.integers(min_value=-500, max_value=500).map(float),
    min_size=0,
    max_size=30,
)


class TestStreaks:
    """Win/loss runs over closed trades in exit order."""

    def test_mixed_sequence(self):
        streaks = calculate_streaks(trades_from([1, 1, -1, 1]))
        assert streaks.best == 2
        assert streaks.worst == -1
        assert streaks.current == 1

    def test_all_losers(self):
        streaks = calculate_streaks(trades_from([-10, -20, -5]))
        assert streaks.best == 0
        assert streaks.worst == -3
        assert streaks.current == -3

    def test_breakeven_does_not_break_streak(self):
        streaks = calculate_streaks(trades_from([10, 0, 10]))
        assert streaks.best == 2
        assert streaks.current == 2

    def test_empty(self):
        streaks = calculate_streaks([])
        assert (streaks.current, streaks.best, streaks.worst) == (0, 0, 0)

    def test_open_trades_are_ignored(self):
        trades = trades_from([10, 10]) + [trade_with_pl(5, -10, status=TradeStatus.OPEN)]
        assert calculate_streaks(trades).current == 2

    @given(pl_lists)
    @settings(max_examples=100)
    def test_bounds(self, pls: list[float]):
        """
        *For any* sequence, best >= 0 >= worst and the current streak lies
        between them.
        """
        streaks = calculate_streaks(trades_from(pls))
        assert streaks.best >= 0 >= streaks.worst
        assert streaks.worst <= streaks.current <= streaks.best
        assert streaks.best <= sum(1 for p in pls if p > 0)
        assert -streaks.worst <= sum(1 for p in pls if p < 0)

    @given(pl_lists, st.randoms(use_true_random=False))
    @settings(max_examples=50)
    def test_input_order_does_not_matter(self, pls: list[float], rnd: random.Random):
        """
        *For any* sequence, shuffling the input list gives the same streaks
        because trades are scanned by exit date.
        """
        trades = trades_from(pls)
        shuffled = list(trades)
        rnd.shuffle(shuffled)
        assert calculate_streaks(shuffled) == calculate_streaks(trades)


class TestDrawdown:
    """Peak-to-trough decline of cumulative closed P&L."""

    def test_worked_example(self):
        drawdown = calculate_drawdown(trades_from([100, -150, 50]))
        assert drawdown.max_drawdown == pytest.approx(150.0)
        assert drawdown.max_drawdown_percent == pytest.approx(150.0)

    def test_only_winners(self):
        drawdown = calculate_drawdown(trades_from([10, 20, 30]))
        assert drawdown.max_drawdown == 0.0
        assert drawdown.max_drawdown_percent == 0.0

    def test_losses_from_start_have_no_percent(self):
        """Without a positive peak there is no percentage to report."""
        drawdown = calculate_drawdown(trades_from([-40, -60]))
        assert drawdown.max_drawdown == pytest.approx(100.0)
        assert drawdown.max_drawdown_percent == 0.0

    @given(pl_lists)
    @settings(max_examples=100)
    def test_never_exceeds_total_losses(self, pls: list[float]):
        """
        *For any* sequence, the drawdown is non-negative and at most the sum
        of all losses.
        """
        drawdown = calculate_drawdown(trades_from(pls))
        total_losses = -sum(p for p in pls if p < 0)
        assert 0 <= drawdown.max_drawdown <= total_losses + 1e-9

    def test_input_list_is_not_reordered(self):
        trades = list(reversed(trades_from([5, -5, 5])))
        before = [t.id for t in trades]
        calculate_drawdown(trades)
        closed_by_exit(trades)
        assert [t.id for t in trades] == before


class TestExitOrder:
    def test_missing_exit_date_sorts_by_entry(self):
        early = trade_with_pl(0, 10).model_copy(update={"exit_date": None})
        late = trade_with_pl(3, -10)
        assert [t.id for t in closed_by_exit([late, early])] == ["trade_0", "trade_3"]
