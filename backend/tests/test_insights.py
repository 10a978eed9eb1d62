"""Tests for generated insights."""

from stagelog.schemas.stats import (
    ComparisonStats,
    PriceRanges,
    ProductionMix,
    RatingStats,
    ShowStats,
    ShowSummary,
    SpendingStats,
    StatisticsSnapshot,
    VenueStats,
    VenueSummary,
    YearOverYear,
)
from stagelog.services.insights import generate_insights


def _busy_snapshot() -> StatisticsSnapshot:
    fortune = VenueSummary(venue="Fortune Theatre", count=4)
    hamilton = ShowSummary(show="Hamilton", count=3, is_repeat=True)
    return StatisticsSnapshot(
        spending=SpendingStats(ranges=PriceRanges(over100=2), total_with_cost=4),
        ratings=RatingStats(distribution={1: 0, 2: 0, 3: 1, 4: 1, 5: 2}, total_rated=4),
        venues=VenueStats(venues=[fortune], total_venues=1, most_frequent=fortune),
        shows=ShowStats(shows=[hamilton], total_shows=1, repeat_shows=1, most_seen=hamilton),
        comparisons=ComparisonStats(year_over_year=YearOverYear(shows_change="25.0")),
        production_mix=ProductionMix(total=4, live=3, pro_shot=1, upcoming=1),
    )


class TestInsights:
    def test_empty_snapshot_has_nothing_to_say(self):
        assert generate_insights(StatisticsSnapshot()) == []

    def test_order_and_types(self):
        insights = generate_insights(_busy_snapshot())
        assert [insight.type for insight in insights] == [
            "spending",
            "quality",
            "venue",
            "show",
            "trend",
            "mix",
            "upcoming",
        ]

    def test_messages(self):
        messages = {insight.type: insight.message for insight in generate_insights(_busy_snapshot())}
        assert messages["spending"] == "You've splurged on 2 premium shows (over £100) - 50% of your shows!"
        assert "50% of shows get your 5-star rating" in messages["quality"]
        assert messages["venue"] == "Fortune Theatre is your go-to venue with 4 visits!"
        assert messages["show"] == 'You\'ve seen "Hamilton" 3 times - a true favorite!'
        assert messages["trend"] == "Your theatre-going is up 25.0% this year!"
        assert messages["mix"] == "75.0% live performances, 25.0% Pro Shots"
        assert messages["upcoming"] == "1 performance scheduled"

    def test_currency_symbol_follows_caller(self):
        insights = generate_insights(_busy_snapshot(), currency_symbol="$")
        assert "(over $100)" in insights[0].message

    def test_thresholds_are_strict(self):
        three_visits = VenueSummary(venue="Playhouse", count=3)
        snapshot = StatisticsSnapshot(
            ratings=RatingStats(distribution={1: 0, 2: 0, 3: 0, 4: 7, 5: 3}, total_rated=10),
            venues=VenueStats(venues=[three_visits], most_frequent=three_visits),
            comparisons=ComparisonStats(year_over_year=YearOverYear(shows_change="20.0")),
        )
        assert generate_insights(snapshot) == []
