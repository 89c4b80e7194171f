"""Tests for aggregate performance metrics.

**Feature: trade-journal**
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytz
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics import (
    average_loss,
    calculate_performance_summary,
    equity_curve,
    expectancy_ratio,
    generate_performance_report,
    monthly_performance,
    performance_by_asset_type,
    performance_by_emotional_state,
    performance_by_strategy,
    position_sizing_analysis,
    profit_factor,
    sharpe_ratio,
    to_local,
    trade_frequency_analysis,
    win_rate,
)
from tradejournal.analytics.derived import apply_derived_fields
from tradejournal.config import Settings
from tradejournal.models import AssetType, Direction, Trade, TradeStatus


def make_trade(trade_id: str, **fields) -> Trade:
    data = {
        "id": trade_id,
        "asset_type": AssetType.STOCKS,
        "symbol": "TEST",
        "direction": Direction.LONG,
        "status": TradeStatus.CLOSED,
        "position_size": 1,
        "entry_price": 100,
        "entry_date": datetime(2024, 1, 1, 10, 0),
    }
    data.update(fields)
    return apply_derived_fields(Trade(**data), 10000)


@pytest.fixture
def sample_trades() -> list[Trade]:
    """A winning stock, a winning crypto and a losing forex trade."""
    return [
        make_trade(
            "aapl", symbol="AAPL", position_size=100, entry_price=150.25,
            entry_date=datetime(2024, 1, 15, 9, 30), exit_price=155.5,
            exit_date=datetime(2024, 1, 16, 14, 25), commission=5.0,
            stop_loss=148.0, take_profit=155.0, strategy="Momentum Breakout",
            emotional_state="calm",
        ),
        make_trade(
            "btc", asset_type=AssetType.CRYPTO, symbol="BTC/USD", position_size=0.5,
            entry_price=42150, entry_date=datetime(2024, 1, 14, 10, 15), exit_price=42800,
            exit_date=datetime(2024, 1, 15, 16, 30), commission=25.0, stop_loss=41000,
            take_profit=43000, strategy="Trend Following", emotional_state="calm",
        ),
        make_trade(
            "eur", asset_type=AssetType.FOREX, symbol="EUR/USD", direction=Direction.SHORT,
            position_size=10000, entry_price=1.085, entry_date=datetime(2024, 1, 13, 8, 0),
            exit_price=1.089, exit_date=datetime(2024, 1, 13, 14, 30), commission=7.0,
            stop_loss=1.087, take_profit=1.082, strategy="Mean Reversion",
            emotional_state="anxious",
        ),
    ]


class TestPerformanceSummary:
    """Headline statistics over the sample trades."""

    def test_worked_example(self, sample_trades):
        summary = calculate_performance_summary(sample_trades)

        assert summary.total_trades == 3
        assert summary.closed_trades == 3
        assert summary.winning_trades == 2
        assert summary.losing_trades == 1
        assert summary.win_rate == pytest.approx(66.6667, abs=1e-3)
        assert summary.total_profit == pytest.approx(820.0)
        assert summary.total_loss == pytest.approx(47.0)
        assert summary.net_profit == pytest.approx(773.0)
        assert round(summary.profit_factor, 2) == 17.45
        assert summary.average_win == pytest.approx(410.0)
        assert summary.average_loss == pytest.approx(-47.0)
        assert summary.largest_win == pytest.approx(520.0)
        assert summary.largest_loss == pytest.approx(-47.0)
        assert summary.expectancy == pytest.approx(773.0 / 3)

    def test_streaks_follow_exit_order(self, sample_trades):
        """EUR/USD exits first (loss), then BTC and AAPL (wins)."""
        summary = calculate_performance_summary(sample_trades)
        assert summary.current_streak == 2
        assert summary.best_streak == 2
        assert summary.worst_streak == -1
        assert summary.max_drawdown == pytest.approx(47.0)

    def test_empty_collection_is_all_zero(self):
        summary = calculate_performance_summary([])
        assert summary.total_trades == 0
        assert summary.win_rate == 0.0
        assert summary.profit_factor == 0.0
        assert summary.sharpe_ratio == 0.0

    def test_open_trades_only_count(self, sample_trades):
        open_trade = make_trade("open", status=TradeStatus.OPEN, stop_loss=90)
        summary = calculate_performance_summary(sample_trades + [open_trade])
        assert summary.total_trades == 4
        assert summary.open_trades == 1
        assert summary.closed_trades == 3
        assert summary.net_profit == pytest.approx(773.0)

    def test_no_losers_means_zero_profit_factor(self):
        trades = [make_trade("w", exit_price=110)]
        assert profit_factor(trades) == 0.0
        assert expectancy_ratio(trades) == 0.0

    def test_breakeven_counts_against_win_rate(self):
        trades = [make_trade("w", exit_price=110), make_trade("b", exit_price=100)]
        assert win_rate(trades) == pytest.approx(50.0)
        assert average_loss(trades) == 0.0

    def test_sharpe_needs_two_trades(self):
        assert sharpe_ratio([make_trade("w", exit_price=110)]) == 0.0

    def test_sharpe_zero_without_variance(self):
        trades = [make_trade("a", exit_price=110), make_trade("b", exit_price=110)]
        assert sharpe_ratio(trades) == 0.0

    def test_input_is_not_reordered(self, sample_trades):
        before = [t.id for t in sample_trades]
        calculate_performance_summary(sample_trades)
        assert [t.id for t in sample_trades] == before

    @given(st.lists(st.integers(min_value=-50, max_value=50), max_size=20))
    @settings(max_examples=100)
    def test_deterministic_and_bounded(self, moves: list[int]):
        """
        *For any* collection, the summary is repeatable and its rates stay
        within range.
        """
        trades = [
            make_trade(f"t{i}", exit_price=100 + move,
                       exit_date=datetime(2024, 1, 1, 12) + timedelta(days=i))
            for i, move in enumerate(moves)
        ]
        first = calculate_performance_summary(trades)
        second = calculate_performance_summary(trades)

        assert first == second
        assert 0 <= first.win_rate <= 100
        assert first.profit_factor >= 0
        assert first.winning_trades + first.losing_trades + first.breakeven_trades == len(moves)


class TestGrouping:
    """Per-category breakdowns."""

    def test_every_asset_type_reported(self, sample_trades):
        groups = performance_by_asset_type(sample_trades)
        assert list(groups) == ["stocks", "forex", "crypto", "options"]
        assert groups["options"].total_trades == 0
        assert groups["options"].win_rate == 0.0
        assert groups["forex"].total_pl == pytest.approx(-47.0)
        assert groups["stocks"].average_rr == pytest.approx(475 / 225)

    def test_strategy_groups_skip_blank(self, sample_trades):
        unlabelled = make_trade("x", exit_price=105, strategy="  ")
        groups = performance_by_strategy(sample_trades + [unlabelled])
        assert set(groups) == {"Momentum Breakout", "Trend Following", "Mean Reversion"}

    def test_emotional_states(self, sample_trades):
        groups = performance_by_emotional_state(sample_trades)
        assert groups["calm"].total_trades == 2
        assert groups["calm"].win_rate == pytest.approx(100.0)
        assert groups["anxious"].losing_trades == 1

    def test_monthly_keys_sorted(self):
        trades = [
            make_trade("mar", exit_price=110, exit_date=datetime(2024, 3, 2)),
            make_trade("jan", exit_price=90, exit_date=datetime(2024, 1, 20)),
            make_trade("jan2", exit_price=120, exit_date=datetime(2024, 1, 25)),
        ]
        months = monthly_performance(trades)
        assert list(months) == ["2024-01", "2024-03"]
        assert months["2024-01"].trade_count == 2
        assert months["2024-01"].total_pl == pytest.approx(10.0)
        assert months["2024-01"].trade_ids == ["jan", "jan2"]
        assert months["2024-01"].profit_factor == pytest.approx(2.0)

    def test_monthly_ignores_open_trades(self):
        assert monthly_performance([make_trade("open", status=TradeStatus.OPEN)]) == {}

    def test_monthly_uses_local_calendar(self):
        new_york = pytz.timezone("America/New_York")
        eastern = timezone(timedelta(hours=-5))
        trade = make_trade("late", exit_price=110,
                           exit_date=datetime(2024, 1, 31, 20, 0, tzinfo=eastern))

        assert trade.exit_date == datetime(2024, 2, 1, 1, 0)
        assert list(monthly_performance([trade])) == ["2024-02"]
        assert list(monthly_performance([trade], new_york)) == ["2024-01"]


class TestEquityCurve:
    def test_cumulative_in_exit_order(self, sample_trades):
        points = equity_curve(sample_trades, 10000)
        assert [p.trade_id for p in points] == ["eur", "btc", "aapl"]
        assert [round(p.equity, 2) for p in points] == [9953.0, 10253.0, 10773.0]
        assert points[0].pl == pytest.approx(-47.0)

    def test_no_closed_trades_gives_starting_point(self):
        now = datetime(2024, 6, 1, 12, 0)
        points = equity_curve([make_trade("open", status=TradeStatus.OPEN)], 5000, now=now)
        assert len(points) == 1
        assert points[0].equity == 5000
        assert points[0].date == now
        assert points[0].trade_id is None


class TestFrequency:
    def test_sample_cadence(self, sample_trades):
        analysis = trade_frequency_analysis(sample_trades)

        # Sat 13th 08:00 to Mon 15th 09:30 rounds up to three days.
        assert analysis.span_days == 3
        assert analysis.average_trades_per_week == pytest.approx(7.0)
        assert analysis.most_active_day == "Sunday"
        assert analysis.least_active_day == "Tuesday"
        assert [d.count for d in analysis.day_of_week_distribution] == [1, 1, 0, 0, 0, 0, 1]

    def test_single_day_has_zero_rates(self):
        analysis = trade_frequency_analysis([make_trade("a", exit_price=105)])
        assert analysis.span_days == 0
        assert analysis.average_trades_per_week == 0.0
        assert analysis.most_active_day == "Monday"

    def test_weekdays_use_local_calendar(self):
        new_york = pytz.timezone("America/New_York")
        # Sunday 14 Jan 10:00 and 21:00 in New York; the second is Monday in UTC.
        trades = [
            make_trade("morning", exit_price=105, entry_date=datetime(2024, 1, 14, 15, 0)),
            make_trade("evening", exit_price=105, entry_date=datetime(2024, 1, 15, 2, 0)),
        ]

        in_utc = trade_frequency_analysis(trades)
        assert [d.count for d in in_utc.day_of_week_distribution][:2] == [1, 1]

        local = trade_frequency_analysis(trades, new_york)
        assert [d.count for d in local.day_of_week_distribution][:2] == [2, 0]
        assert local.most_active_day == "Sunday"
        assert local.span_days == in_utc.span_days

    def test_empty(self):
        analysis = trade_frequency_analysis([])
        assert analysis.most_active_day is None
        assert len(analysis.day_of_week_distribution) == 7


class TestPositionSizing:
    def test_uniform_sizes(self):
        trades = [make_trade(f"t{i}", exit_price=105, position_size=10) for i in range(3)]
        analysis = position_sizing_analysis(trades, 10000, 2.0)
        assert analysis.average_position_size == pytest.approx(10.0)
        assert analysis.position_size_std_dev == 0.0
        assert analysis.consistency_score == pytest.approx(100.0)
        assert analysis.recommended_position_size == pytest.approx(20.0)

    def test_varied_sizes(self):
        trades = [
            make_trade("a", exit_price=105, position_size=10),
            make_trade("b", exit_price=105, position_size=20),
        ]
        analysis = position_sizing_analysis(trades, 10000, 2.0)
        assert analysis.position_size_std_dev == pytest.approx(5.0)
        assert analysis.consistency_score == pytest.approx(100 - 5 / 15 * 100)

    def test_no_closed_trades(self):
        analysis = position_sizing_analysis([make_trade("open", status=TradeStatus.OPEN)], 10000, 2.0)
        assert analysis.position_sizes == []
        assert analysis.recommended_position_size == 0.0


class TestReport:
    def test_report_combines_sections(self, sample_trades):
        now = datetime(2024, 2, 1, 8, 0)
        report = generate_performance_report(sample_trades, Settings(), now=now)

        assert report.generated_at == now
        assert report.summary.total_trades == 3
        assert list(report.monthly_performance) == ["2024-01"]
        assert len(report.equity_curve) == 3
        assert report.position_analysis.position_sizes == [100, 0.5, 10000]

    def test_report_buckets_on_settings_timezone(self):
        trade = make_trade("late", exit_price=110, entry_date=datetime(2024, 1, 31, 14, 0),
                           exit_date=datetime(2024, 2, 1, 1, 0))
        report = generate_performance_report([trade], Settings(timezone="America/New_York"))
        assert list(report.monthly_performance) == ["2024-01"]
        report = generate_performance_report([trade], Settings(timezone="UTC"))
        assert list(report.monthly_performance) == ["2024-02"]


class TestToLocal:
    def test_without_zone_is_unchanged(self):
        moment = datetime(2024, 7, 4, 12, 0)
        assert to_local(moment) == moment

    def test_handles_daylight_saving(self):
        new_york = pytz.timezone("America/New_York")
        assert to_local(datetime(2024, 1, 15, 12, 0), new_york) == datetime(2024, 1, 15, 7, 0)
        assert to_local(datetime(2024, 7, 15, 12, 0), new_york) == datetime(2024, 7, 15, 8, 0)
