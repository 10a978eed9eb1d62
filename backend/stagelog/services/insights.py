from __future__ import annotations

from typing import List

from stagelog.coercion import to_float
from stagelog.schemas.stats import Insight, StatisticsSnapshot

PREMIUM_PRICE = 100
FIVE_STAR_SHARE = 0.3
GO_TO_VENUE_VISITS = 3
SHOW_GROWTH_PERCENT = 20.0


def generate_insights(snapshot: StatisticsSnapshot, currency_symbol: str = "£") -> List[Insight]:
    """Natural-language observations over an already aggregated snapshot.

    Heuristics run in a fixed order (spending, quality, venue, show, trend,
    mix, upcoming) and each fires independently.
    """
    insights: List[Insight] = []

    spending = snapshot.spending
    premium = spending.ranges.over100
    if premium > 0 and spending.total_with_cost > 0:
        share = premium / spending.total_with_cost * 100
        insights.append(Insight(
            type="spending",
            message=(
                f"You've splurged on {premium} premium shows (over {currency_symbol}{PREMIUM_PRICE})"
                f" - {share:.0f}% of your shows!"
            ),
            icon="💎",
        ))

    ratings = snapshot.ratings
    fives = ratings.distribution.get(5, 0)
    if fives > 0 and ratings.total_rated > 0 and fives / ratings.total_rated > FIVE_STAR_SHARE:
        insights.append(Insight(
            type="quality",
            message=f"You're generous with the stars! {fives / ratings.total_rated * 100:.0f}% of shows get your 5-star rating.",
            icon="🎯",
        ))

    venue = snapshot.venues.most_frequent
    if venue is not None and venue.count > GO_TO_VENUE_VISITS:
        insights.append(Insight(
            type="venue",
            message=f"{venue.venue} is your go-to venue with {venue.count} visits!",
            icon="🏛️",
        ))

    show = snapshot.shows.most_seen
    if show is not None and show.is_repeat:
        insights.append(Insight(
            type="show",
            message=f'You\'ve seen "{show.show}" {show.count} times - a true favorite!',
            icon="❤️",
        ))

    shows_change = snapshot.comparisons.year_over_year.shows_change
    if to_float(shows_change) > SHOW_GROWTH_PERCENT:
        insights.append(Insight(
            type="trend",
            message=f"Your theatre-going is up {shows_change}% this year!",
            icon="📈",
        ))

    mix = snapshot.production_mix
    if mix.live > 0 and mix.pro_shot > 0:
        live_share = mix.live / (mix.live + mix.pro_shot) * 100
        insights.append(Insight(
            type="mix",
            message=f"{live_share:.1f}% live performances, {100 - live_share:.1f}% Pro Shots",
            icon="🎭",
        ))

    if mix.upcoming > 0:
        noun = "performance" if mix.upcoming == 1 else "performances"
        insights.append(Insight(
            type="upcoming",
            message=f"{mix.upcoming} {noun} scheduled",
            icon="📅",
        ))

    return insights
