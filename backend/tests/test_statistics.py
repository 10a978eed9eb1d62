"""Tests for the statistics sub-aggregators."""

from datetime import date

import pytest

from stagelog.schemas.show import Show
from stagelog.schemas.stats import NOT_AVAILABLE
from stagelog.services.statistics import StatisticsService, show_title


def _show(show_id, title, genre=None):
    return Show(id=show_id, title=title, genre=genre)


class TestBands:
    @pytest.mark.parametrize(
        "cost, expected",
        [
            (0.01, "under25"),
            (24.99, "under25"),
            (25.00, "under50"),
            (74.99, "under75"),
            (99.99, "under100"),
            (100.00, "over100"),
            (250.00, "over100"),
        ],
    )
    def test_price_range(self, cost, expected):
        assert StatisticsService.price_range(cost) == expected

    @pytest.mark.parametrize(
        "rating, expected",
        [
            (5.0, 5),
            (4.5, 5),
            (4.49, 4),
            (3.5, 4),
            (1.5, 2),
            (1.49, 1),
            (0.5, 1),
            (0.4, None),
        ],
    )
    def test_rating_band(self, rating, expected):
        assert StatisticsService.rating_band(rating) == expected


class TestOverview:
    def test_empty_collection(self, today):
        overview = StatisticsService.overview([], today)
        assert overview.total_shows == 0
        assert overview.first_show is None
        assert overview.shows_per_month == 0.0

    def test_upcoming_does_not_stretch_date_span(self, make_performance, today):
        performances = [
            make_performance(date_seen="2026-09-18"),
            make_performance(date_seen="2026-10-01"),
            make_performance(date_seen="2026-12-01"),
        ]
        overview = StatisticsService.overview(performances, today)
        assert overview.total_shows == 3
        assert overview.first_show == date(2026, 9, 18)
        assert overview.last_show == date(2026, 10, 1)
        assert overview.days_since_first == 30
        assert overview.shows_per_month == 2.0

    def test_spend_counts_live_only(self, make_performance, today):
        performances = [
            make_performance(ticket_price=50),
            make_performance(production_type="Pro Shot", theatre_name="Disney+", ticket_price=10),
        ]
        overview = StatisticsService.overview(performances, today)
        assert overview.total_spent == 50.0
        assert overview.avg_cost == 50.0
        assert overview.unique_venues == 2


class TestSpending:
    def test_bucket_boundaries(self, make_performance):
        performances = [
            make_performance(ticket_price=25.00),
            make_performance(ticket_price=100.00),
            make_performance(ticket_price=24.99),
            make_performance(ticket_price=0),
        ]
        spending = StatisticsService.spending(performances)
        assert spending.total_with_cost == 3
        assert spending.ranges.under25 == 1
        assert spending.ranges.under50 == 1
        assert spending.ranges.over100 == 1
        assert spending.min == 24.99
        assert spending.max == 100.0
        assert spending.median == 25.0

    def test_split_costs_bucket_on_whole_pence(self, make_performance):
        performances = [
            make_performance(ticket_price=19.99, booking_fee=2.20, travel_cost=2.81),
            make_performance(ticket_price=60.01, booking_fee=20.22, travel_cost=19.77),
        ]
        spending = StatisticsService.spending(performances)
        assert spending.ranges.under25 == 0
        assert spending.ranges.under50 == 1
        assert spending.ranges.under100 == 0
        assert spending.ranges.over100 == 1
        assert spending.max == 100.0

    def test_monthly_spending_keys(self, make_performance):
        performances = [
            make_performance(date_seen="2026-03-02", ticket_price=30, booking_fee=2.5),
            make_performance(date_seen="2026-03-20", ticket_price=20),
            make_performance(date_seen="2026-01-05", ticket_price=10),
        ]
        spending = StatisticsService.spending(performances)
        assert spending.monthly_spending == {"2026-01": 10.0, "2026-03": 52.5}
        assert list(spending.monthly_spending) == ["2026-01", "2026-03"]

    def test_nothing_paid(self, make_performance):
        assert StatisticsService.spending([make_performance()]).total_with_cost == 0


class TestRatings:
    def test_distribution_half_open_bands(self, make_performance):
        performances = [
            make_performance(rating={"music_songs": 4.5}),
            make_performance(rating={"music_songs": 4.49}),
            make_performance(),
        ]
        ratings = StatisticsService.ratings(performances)
        assert ratings.distribution == {1: 0, 2: 0, 3: 0, 4: 1, 5: 1}
        assert ratings.total_rated == 2
        assert ratings.percentage_rated == 66.7

    def test_unrated_collection(self, make_performance):
        ratings = StatisticsService.ratings([make_performance()])
        assert ratings.total_rated == 0
        assert ratings.distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


class TestVenuesAndShows:
    def test_venue_without_ratings_reports_not_available(self, make_performance):
        venues = StatisticsService.venues([
            make_performance(theatre_name="Fortune Theatre"),
            make_performance(theatre_name="Fortune Theatre", rating={"music_songs": 4}),
            make_performance(theatre_name="Playhouse"),
        ])
        assert venues.total_venues == 2
        assert venues.most_frequent.venue == "Fortune Theatre"
        assert venues.most_frequent.avg_rating == 4.0
        assert venues.venues[1].avg_rating == NOT_AVAILABLE

    def test_blank_venue_groups_as_unknown(self, make_performance):
        venues = StatisticsService.venues([make_performance(theatre_name="")])
        assert venues.venues[0].venue == "Unknown"

    def test_repeat_percentage(self, make_performance):
        shows = [_show("a", "Hamilton"), _show("b", "Wicked"), _show("c", "Hadestown")]
        performances = [
            make_performance(show_id="a"),
            make_performance(show_id="a"),
            make_performance(show_id="b"),
            make_performance(show_id="b"),
            make_performance(show_id="c"),
        ]
        stats = StatisticsService.shows(performances, shows)
        assert stats.total_shows == 3
        assert stats.repeat_shows == 2
        assert stats.repeat_percentage == 66.7
        assert stats.most_seen.is_repeat

    def test_show_date_range(self, make_performance):
        stats = StatisticsService.shows(
            [
                make_performance(show_id="a", date_seen="2026-01-01"),
                make_performance(show_id="a", date_seen="2026-01-11"),
            ],
            [_show("a", "Hamilton")],
        )
        assert stats.shows[0].show == "Hamilton"
        assert stats.shows[0].date_range == 10

    def test_show_title_fallbacks(self, make_performance):
        assert show_title(make_performance(show_id="abcdef1234567890"), {}) == "Show abcdef12..."
        assert show_title(make_performance(show_id=None), {}) == "Unknown Show"


class TestTrendsAndComparisons:
    def test_peak_ties_go_to_earliest_period(self, make_performance):
        trends = StatisticsService.trends([
            make_performance(date_seen="2026-02-10"),
            make_performance(date_seen="2026-01-10"),
        ])
        assert trends.peak_month == "2026-01"
        assert trends.peak_year == "2026"

    def test_undated_performances_skip_buckets(self, make_performance):
        trends = StatisticsService.trends([make_performance(date_seen="not a date")])
        assert trends.monthly == {}
        assert trends.peak_month is None

    def test_year_over_year(self, make_performance, today):
        performances = [
            make_performance(date_seen="2026-01-10", ticket_price=30),
            make_performance(date_seen="2026-02-10", ticket_price=30),
            make_performance(date_seen="2026-03-10", ticket_price=30),
            make_performance(date_seen="2025-05-10", ticket_price=60),
            make_performance(date_seen="2025-06-10", ticket_price=60),
        ]
        comparisons = StatisticsService.comparisons(performances, today)
        assert comparisons.this_year.count == 3
        assert comparisons.previous_year.count == 2
        assert comparisons.year_over_year.shows_change == "50.0"
        assert comparisons.year_over_year.spending_change == "-25.0"
        assert comparisons.year_over_year.rating_change == "0"

    def test_growth_from_nothing(self, make_performance, today):
        comparisons = StatisticsService.comparisons([make_performance(date_seen="2026-02-01")], today)
        assert comparisons.year_over_year.shows_change == "100"


class TestExpensesAndSummary:
    def test_expense_breakdown(self, make_performance):
        shows = [_show("a", "Hamilton", genre="Musical")]
        cheap = make_performance(show_id="a", ticket_price=20, booking_fee=2, city="Leeds")
        dear = make_performance(show_id="a", ticket_price=150, travel_cost=30, date_seen="2025-04-01")
        free = make_performance()
        expenses = StatisticsService.expenses([cheap, dear, free], shows)
        assert expenses.performances_with_costs == 2
        assert expenses.total_spent == 202.0
        assert expenses.highest_ticket.performance_id == dear.id
        assert expenses.lowest_ticket.performance_id == cheap.id
        assert expenses.spending_by_genre == {"Musical": 202.0}
        assert expenses.spending_by_city == {"Leeds": 22.0, "London": 180.0}
        assert expenses.spending_by_year == {"2025": 180.0, "2026": 22.0}

    def test_monthly_spending_has_twelve_slots(self, make_performance):
        months = StatisticsService.monthly_spending(
            [
                make_performance(date_seen="2026-03-02", ticket_price=30),
                make_performance(date_seen="2025-03-02", ticket_price=99),
            ],
            2026,
        )
        assert len(months) == 12
        assert months[2] == 30.0
        assert sum(months) == 30.0

    def test_summary_rates_past_only(self, make_performance, today):
        performances = [
            make_performance(date_seen="2026-09-01", rating={"music_songs": 4}, city="London"),
            make_performance(date_seen="2026-09-02", rating={"music_songs": 2}, city="Leeds"),
            make_performance(date_seen="2026-11-01", rating={"music_songs": 5}, city="York"),
            make_performance(date_seen=None),
        ]
        summary = StatisticsService.summary(performances, [_show("a", "Hamilton")], today)
        assert summary.total_shows == 1
        assert summary.total_performances == 4
        assert summary.past_performances == 2
        assert summary.upcoming_performances == 1
        assert summary.average_rating == 3.0
        assert summary.cities_visited == 2
        assert summary.production_types == ["West End"]

    def test_production_mix(self, make_performance, today):
        mix = StatisticsService.production_mix(
            [
                make_performance(ticket_price=40, rating={"music_songs": 4}),
                make_performance(production_type="Pro Shot", date_seen="2026-02-01", rating={"music_songs": 5}),
                make_performance(date_seen="2026-12-01"),
            ],
            today,
        )
        assert (mix.total, mix.live, mix.pro_shot, mix.upcoming) == (3, 2, 1, 1)
        assert mix.live_summary.average_ticket_price == 40.0
        assert mix.pro_shot_summary.best_rating == 5.0
        assert mix.pro_shot_summary.this_year_count == 1
