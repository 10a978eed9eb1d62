from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from stagelog.schemas.performance import Performance
from stagelog.schemas.show import Show
from stagelog.schemas.stats import (
    NOT_AVAILABLE,
    ComparisonStats,
    ExpenseStats,
    LiveSummary,
    OverviewStats,
    PriceExtreme,
    PriceRanges,
    ProductionMix,
    ProShotSummary,
    RatingStats,
    RatingValue,
    ShowStats,
    ShowSummary,
    SpendingStats,
    StatisticsSummary,
    TrendBucket,
    TrendStats,
    VenueStats,
    VenueSummary,
    YearOverYear,
    YearStats,
)
from stagelog.services.aggregates import (
    mean,
    median,
    percentage_change,
    round1,
    round2,
    total_cost,
)
from stagelog.services.calendar import DAYS_PER_MONTH, DAYS_PER_YEAR, month_key, year_key

logger = logging.getLogger(__name__)

UNKNOWN_VENUE = "Unknown"
UNKNOWN_SHOW = "Unknown Show"


def build_show_lookup(shows: Iterable[Show]) -> Dict[str, Show]:
    return {show.id: show for show in shows if show.id and show.title}


def show_title(performance: Performance, lookup: Dict[str, Show]) -> str:
    show_id = performance.show_id
    if show_id and show_id in lookup:
        return lookup[show_id].title
    if show_id:
        return f"Show {show_id[:8]}..."
    return UNKNOWN_SHOW


def rated_values(performances: Iterable[Performance]) -> List[float]:
    return [p.weighted_rating for p in performances if p.weighted_rating > 0]


def average_rating_or_na(ratings: Sequence[float]) -> RatingValue:
    return round1(mean(ratings)) if ratings else NOT_AVAILABLE


class StatisticsService:
    """Sub-aggregators that each build one slice of the statistics snapshot."""

    # Half-open [lower, upper) total-cost bands
    PRICE_RANGES = (
        ("under25", 0.0, 25.0),
        ("under50", 25.0, 50.0),
        ("under75", 50.0, 75.0),
        ("under100", 75.0, 100.0),
        ("over100", 100.0, None),
    )
    # Star bands over weighted ratings; 5 stars is closed at 5.0
    RATING_BANDS = (
        (5, 4.5),
        (4, 3.5),
        (3, 2.5),
        (2, 1.5),
        (1, 0.5),
    )

    @staticmethod
    def price_range(cost: float) -> str:
        for name, lower, upper in StatisticsService.PRICE_RANGES:
            if cost >= lower and (upper is None or cost < upper):
                return name
        return StatisticsService.PRICE_RANGES[0][0]

    @staticmethod
    def rating_band(rating: float) -> Optional[int]:
        for stars, lower in StatisticsService.RATING_BANDS:
            if rating >= lower:
                return stars
        return None

    @staticmethod
    def live_performances(performances: Iterable[Performance]) -> List[Performance]:
        return [p for p in performances if not p.is_pro_shot]

    @staticmethod
    def overview(performances: Sequence[Performance], today: date) -> OverviewStats:
        if not performances:
            return OverviewStats()

        live = StatisticsService.live_performances(performances)
        total_spent = sum(total_cost(p) for p in live)
        ratings = rated_values(performances)

        # Upcoming performances must not stretch the observed date span
        past_dates = sorted(p.date_seen for p in performances if p.is_past(today))
        first_show = past_dates[0] if past_dates else None
        last_show = past_dates[-1] if past_dates else None
        days_since_first = (today - first_show).days if first_show else 0

        shows_per_month = 0.0
        shows_per_year = 0.0
        if days_since_first > 0:
            shows_per_month = round1(len(past_dates) / (days_since_first / DAYS_PER_MONTH))
            shows_per_year = round1(len(past_dates) / (days_since_first / DAYS_PER_YEAR))

        return OverviewStats(
            total_shows=len(performances),
            total_spent=round2(total_spent),
            avg_rating=round1(mean(ratings)),
            avg_cost=round2(total_spent / len(live)) if live else 0.0,
            first_show=first_show,
            last_show=last_show,
            days_since_first=days_since_first,
            shows_per_month=shows_per_month,
            shows_per_year=shows_per_year,
            unique_venues=len({p.theatre_name for p in performances}),
            unique_shows=len({p.show_id for p in performances}),
        )

    @staticmethod
    def spending(performances: Sequence[Performance]) -> SpendingStats:
        live = StatisticsService.live_performances(performances)
        costs = [cost for cost in (total_cost(p) for p in live) if cost > 0]
        if not costs:
            return SpendingStats()

        monthly: Dict[str, float] = defaultdict(float)
        for performance in live:
            cost = total_cost(performance)
            if cost > 0 and performance.date_seen:
                monthly[month_key(performance.date_seen)] += cost

        range_counts = {name: 0 for name, _, _ in StatisticsService.PRICE_RANGES}
        for cost in costs:
            range_counts[StatisticsService.price_range(round2(cost))] += 1

        total = sum(costs)
        return SpendingStats(
            total=round2(total),
            average=round2(total / len(costs)),
            median=round2(median(costs)),
            min=round2(min(costs)),
            max=round2(max(costs)),
            monthly_spending={month: round2(monthly[month]) for month in sorted(monthly)},
            ranges=PriceRanges(**range_counts),
            total_with_cost=len(costs),
        )

    @staticmethod
    def ratings(performances: Sequence[Performance]) -> RatingStats:
        ratings = rated_values(performances)
        if not ratings:
            return RatingStats()

        distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
        for rating in ratings:
            band = StatisticsService.rating_band(rating)
            if band is not None:
                distribution[band] += 1

        by_month: Dict[str, List[float]] = defaultdict(list)
        for performance in performances:
            if performance.weighted_rating > 0 and performance.date_seen:
                by_month[month_key(performance.date_seen)].append(performance.weighted_rating)

        return RatingStats(
            average=round1(mean(ratings)),
            median=round1(median(ratings)),
            min=round1(min(ratings)),
            max=round1(max(ratings)),
            distribution=distribution,
            monthly_averages={month: round1(mean(by_month[month])) for month in sorted(by_month)},
            total_rated=len(ratings),
            percentage_rated=round1(len(ratings) / len(performances) * 100),
        )

    @staticmethod
    def venues(performances: Sequence[Performance]) -> VenueStats:
        grouped: Dict[str, List[Performance]] = {}
        for performance in performances:
            grouped.setdefault(performance.theatre_name or UNKNOWN_VENUE, []).append(performance)

        summaries = []
        grand_total = 0.0
        for venue, visits in grouped.items():
            spent = sum(total_cost(p) for p in visits)
            grand_total += spent
            ratings = rated_values(visits)
            summaries.append(
                VenueSummary(
                    venue=venue,
                    count=len(visits),
                    total_spent=round2(spent),
                    avg_spent=round2(spent / len(visits)),
                    avg_rating=average_rating_or_na(ratings),
                    unique_shows=len({p.show_id for p in visits}),
                    ratings=ratings,
                )
            )
        summaries.sort(key=lambda summary: summary.count, reverse=True)

        return VenueStats(
            venues=summaries,
            total_venues=len(summaries),
            most_frequent=summaries[0] if summaries else None,
            total_spent_at_venues=round2(grand_total),
        )

    @staticmethod
    def shows(performances: Sequence[Performance], shows: Sequence[Show]) -> ShowStats:
        lookup = build_show_lookup(shows)
        grouped: Dict[str, List[Performance]] = {}
        for performance in performances:
            grouped.setdefault(show_title(performance, lookup), []).append(performance)

        summaries = []
        for title, visits in grouped.items():
            spent = sum(total_cost(p) for p in visits)
            dates = [p.date_seen for p in visits if p.date_seen]
            summaries.append(
                ShowSummary(
                    show=title,
                    show_id=visits[0].show_id,
                    count=len(visits),
                    venues=len({p.theatre_name for p in visits}),
                    avg_rating=average_rating_or_na(rated_values(visits)),
                    total_spent=round2(spent),
                    avg_spent=round2(spent / len(visits)),
                    date_range=(max(dates) - min(dates)).days if len(dates) > 1 else 0,
                    is_repeat=len(visits) > 1,
                )
            )
        summaries.sort(key=lambda summary: summary.count, reverse=True)

        repeat_shows = sum(1 for summary in summaries if summary.is_repeat)
        unique_shows = len(summaries)
        return ShowStats(
            shows=summaries,
            total_shows=unique_shows,
            repeat_shows=repeat_shows,
            most_seen=summaries[0] if summaries else None,
            repeat_percentage=round1(repeat_shows / unique_shows * 100) if unique_shows else 0.0,
        )

    @staticmethod
    def _bucket(visits: Sequence[Performance]) -> TrendBucket:
        return TrendBucket(
            count=len(visits),
            spent=round2(sum(total_cost(p) for p in visits)),
            avg_rating=average_rating_or_na(rated_values(visits)),
        )

    @staticmethod
    def _peak(buckets: Dict[str, TrendBucket]) -> Optional[str]:
        if not buckets:
            return None
        # Keys are sorted ascending and max() keeps the first maximum: ties go to the earliest period
        return max(buckets, key=lambda key: buckets[key].count)

    @staticmethod
    def trends(performances: Sequence[Performance]) -> TrendStats:
        by_month: Dict[str, List[Performance]] = defaultdict(list)
        by_year: Dict[str, List[Performance]] = defaultdict(list)
        for performance in performances:
            if not performance.date_seen:
                continue
            by_month[month_key(performance.date_seen)].append(performance)
            by_year[year_key(performance.date_seen)].append(performance)

        monthly = {key: StatisticsService._bucket(by_month[key]) for key in sorted(by_month)}
        yearly = {key: StatisticsService._bucket(by_year[key]) for key in sorted(by_year)}
        return TrendStats(
            monthly=monthly,
            yearly=yearly,
            peak_month=StatisticsService._peak(monthly),
            peak_year=StatisticsService._peak(yearly),
        )

    @staticmethod
    def year_stats(performances: Sequence[Performance]) -> YearStats:
        count = len(performances)
        spent = sum(total_cost(p) for p in performances)
        return YearStats(
            count=count,
            total_spent=round2(spent),
            avg_rating=round1(mean(rated_values(performances))),
            avg_spent=round2(spent / count) if count else 0.0,
        )

    @staticmethod
    def comparisons(performances: Sequence[Performance], today: date) -> ComparisonStats:
        current_year = today.year
        this_year = [p for p in performances if p.date_seen and p.date_seen.year == current_year]
        previous_year = [p for p in performances if p.date_seen and p.date_seen.year == current_year - 1]

        this_stats = StatisticsService.year_stats(this_year)
        previous_stats = StatisticsService.year_stats(previous_year)
        return ComparisonStats(
            this_year=this_stats,
            previous_year=previous_stats,
            year_over_year=YearOverYear(
                shows_change=percentage_change(previous_stats.count, this_stats.count),
                spending_change=percentage_change(previous_stats.total_spent, this_stats.total_spent),
                rating_change=percentage_change(previous_stats.avg_rating, this_stats.avg_rating),
            ),
        )

    @staticmethod
    def expenses(performances: Sequence[Performance], shows: Sequence[Show]) -> ExpenseStats:
        """Breakdown of every performance that recorded a cost, Pro Shots included."""
        lookup = build_show_lookup(shows)
        with_costs = [p for p in performances if total_cost(p) > 0]
        if not with_costs:
            return ExpenseStats()

        by_year: Dict[str, float] = defaultdict(float)
        by_city: Dict[str, float] = defaultdict(float)
        by_genre: Dict[str, float] = defaultdict(float)
        highest: Optional[Performance] = None
        lowest: Optional[Performance] = None

        for performance in with_costs:
            cost = total_cost(performance)
            ticket = performance.ticket_price
            if ticket > 0:
                if highest is None or ticket > highest.ticket_price:
                    highest = performance
                if lowest is None or ticket < lowest.ticket_price:
                    lowest = performance

            if performance.date_seen:
                by_year[year_key(performance.date_seen)] += cost
            by_city[performance.city or UNKNOWN_VENUE] += cost
            show = lookup.get(performance.show_id or "")
            if show and show.genre:
                by_genre[show.genre] += cost

        count = len(with_costs)
        total_tickets = sum(p.ticket_price for p in with_costs)
        total_spent = sum(total_cost(p) for p in with_costs)
        return ExpenseStats(
            total_spent=round2(total_spent),
            total_tickets=round2(total_tickets),
            total_booking_fees=round2(sum(p.booking_fee for p in with_costs)),
            total_travel=round2(sum(p.travel_cost for p in with_costs)),
            total_other=round2(sum(p.other_expenses for p in with_costs)),
            average_ticket_price=round2(total_tickets / count),
            average_total_cost=round2(total_spent / count),
            highest_ticket=PriceExtreme(performance_id=highest.id, ticket_price=highest.ticket_price) if highest else None,
            lowest_ticket=PriceExtreme(performance_id=lowest.id, ticket_price=lowest.ticket_price) if lowest else None,
            spending_by_year={key: round2(by_year[key]) for key in sorted(by_year)},
            spending_by_city={key: round2(value) for key, value in by_city.items()},
            spending_by_genre={key: round2(value) for key, value in by_genre.items()},
            performances_with_costs=count,
        )

    @staticmethod
    def monthly_spending(performances: Sequence[Performance], year: int) -> List[float]:
        months = [0.0] * 12
        for performance in performances:
            cost = total_cost(performance)
            if cost > 0 and performance.date_seen and performance.date_seen.year == year:
                months[performance.date_seen.month - 1] += cost
        return [round2(amount) for amount in months]

    @staticmethod
    def production_mix(performances: Sequence[Performance], today: date) -> ProductionMix:
        live = StatisticsService.live_performances(performances)
        pro_shots = [p for p in performances if p.is_pro_shot]

        ticketed = [p.ticket_price for p in live if p.ticket_price > 0]
        pro_shot_ratings = rated_values(pro_shots)
        return ProductionMix(
            total=len(performances),
            live=len(live),
            pro_shot=len(pro_shots),
            upcoming=sum(1 for p in performances if p.is_upcoming(today)),
            live_summary=LiveSummary(
                count=len(live),
                average_rating=round2(mean(rated_values(live))),
                average_ticket_price=round2(mean(ticketed)),
                total_spent=round2(sum(total_cost(p) for p in live)),
            ),
            pro_shot_summary=ProShotSummary(
                count=len(pro_shots),
                average_rating=round2(mean(pro_shot_ratings)),
                best_rating=round2(max(pro_shot_ratings)) if pro_shot_ratings else 0.0,
                this_year_count=sum(
                    1 for p in pro_shots if p.date_seen and p.date_seen.year == today.year
                ),
            ),
        )

    @staticmethod
    def summary(
        performances: Sequence[Performance],
        shows: Sequence[Show],
        today: date,
    ) -> StatisticsSummary:
        past = [p for p in performances if p.is_past(today)]
        upcoming = [p for p in performances if p.is_upcoming(today)]
        production_types = sorted({p.production_type for p in performances if p.production_type})
        logger.debug("Summary over %s performances (%s past, %s upcoming)", len(performances), len(past), len(upcoming))
        return StatisticsSummary(
            total_shows=len(shows),
            total_performances=len(performances),
            past_performances=len(past),
            upcoming_performances=len(upcoming),
            average_rating=round2(mean(rated_values(past))),
            cities_visited=len({p.city for p in past if p.city}),
            production_types=production_types,
            expense_stats=StatisticsService.expenses(performances, shows),
        )
