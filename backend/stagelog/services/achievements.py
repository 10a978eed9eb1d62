from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Sequence, Tuple

from stagelog.schemas.performance import Performance
from stagelog.schemas.show import Show
from stagelog.schemas.stats import Achievement
from stagelog.services.aggregates import mean, round2, total_cost
from stagelog.services.calendar import same_month, week_window
from stagelog.services.statistics import StatisticsService, build_show_lookup, rated_values, show_title

Condition = Tuple[str, str, float]


@dataclass(frozen=True)
class AchievementRule:
    name: str
    description: str
    icon: str
    category: str
    conditions: Tuple[Condition, ...]

    def badge(self) -> Achievement:
        return Achievement(
            name=self.name,
            description=self.description,
            icon=self.icon,
            category=self.category,
        )


def _rule(name: str, description: str, icon: str, category: str, *conditions: Condition) -> AchievementRule:
    return AchievementRule(name, description, icon, category, tuple(conditions))


# Declaration order is output order
ACHIEVEMENT_RULES: Tuple[AchievementRule, ...] = (
    # Show count milestones
    _rule("Opening Night", "Your first-ever logged show!", "🎉", "count", ("total_shows", ">=", 1)),
    _rule("Lucky Seven", "Seven shows in your journey", "🍀", "count", ("total_shows", ">=", 7)),
    _rule("Unlucky for Wallet", "Thirteen shows and counting", "🖤", "count", ("total_shows", ">=", 13)),
    _rule("Blackjack", "Hit 21 shows like a pro", "🃏", "count", ("total_shows", ">=", 21)),
    _rule("Answer to Everything", "Forty-two shows (Douglas would be proud)", "🤖", "count", ("total_shows", ">=", 42)),
    _rule("Nice.", "You know why.", "😏", "count", ("total_shows", ">=", 69)),
    _rule("Century Club", "One hundred shows witnessed", "💯", "count", ("total_shows", ">=", 100)),
    # Spending milestones
    _rule("Patron of the Arts", "Spent triple digits on theatre", "💷", "spending", ("total_spent", ">=", 100)),
    _rule("Big Night Out", "Half a grand to the stage gods", "💰", "spending", ("total_spent", ">=", 500)),
    _rule("Serious Supporter", "Four figures deep", "🏦", "spending", ("total_spent", ">=", 1000)),
    _rule("Angel Investor", "Now you're producing vibes", "😇", "spending", ("total_spent", ">=", 2000)),
    # Ratings
    _rule("Quality Magnet", "You pick winners (avg > 4.5)", "🏅", "rating", ("avg_rating", ">", 4.5)),
    _rule(
        "Tough Crowd", "Low average but high standards", "😤", "rating",
        ("avg_rating", "<", 2.5), ("rated_count", ">=", 5),
    ),
    _rule("Five Star Fan", "Given 5+ five-star ratings", "⭐", "rating", ("five_star_ratings", ">=", 5)),
    _rule("Five Star Fiend", "Given 10+ five-star ratings", "🌟", "rating", ("five_star_ratings", ">=", 10)),
    _rule("One Star Ogre", "Given 3+ one-star ratings", "👹", "rating", ("one_star_ratings", ">=", 3)),
    _rule("One Star Monster", "Given 5+ one-star ratings", "👺", "rating", ("one_star_ratings", ">=", 5)),
    # Venue diversity
    _rule("Venue Tourist", "A sampler of stages", "🧳", "venue", ("unique_venues", ">=", 3)),
    _rule("Stage Hopper", "Double digits of different venues", "🏛️", "venue", ("unique_venues", ">=", 10)),
    _rule("Theatre Wanderer", "Twenty different venues explored", "🌍", "venue", ("unique_venues", ">=", 20)),
    # Repeat visits
    _rule("Second Helping", "You went back for seconds", "🍰", "repeat", ("max_repeats", ">=", 2)),
    _rule("Superfan", "Five or more repeat visits to one show", "❤️", "repeat", ("max_repeats", ">=", 5)),
    _rule("Resident Cast?", "Ten+ times to the same show", "👑", "repeat", ("max_repeats", ">=", 10)),
    # Time windows
    _rule("Monthly Madness", "Three shows in a single month", "📅", "time", ("this_month", ">=", 3)),
    _rule("Weekly Warrior", "Two shows in a week", "⚔️", "time", ("this_week", ">=", 2)),
    _rule(
        "Hybrid Theatre-Goer", "Both Live and Pro Shot in the same month", "🎪", "time",
        ("this_month_live", ">=", 1), ("this_month_pro_shot", ">=", 1),
    ),
    # Combinations
    _rule(
        "Quality Queen/King", "10+ shows with 4.5+ avg rating", "👸", "combination",
        ("total_shows", ">=", 10), ("avg_rating", ">=", 4.5),
    ),
    _rule(
        "Theatre Tourist", "20+ shows at 10+ venues", "🗺️", "combination",
        ("total_shows", ">=", 20), ("unique_venues", ">=", 10),
    ),
    _rule(
        "Expensive Disappointment", "Spent £1000+ with low ratings", "😭", "combination",
        ("total_spent", ">=", 1000), ("avg_rating", "<=", 3.0), ("rated_count", ">=", 1),
    ),
    _rule(
        "Loyal Customer", "15+ shows with 3+ repeats", "🤝", "combination",
        ("total_shows", ">=", 15), ("max_repeats", ">=", 3),
    ),
    _rule(
        "Balanced Viewer", "Equal Live and Pro Shot counts (within 2)", "⚖️", "combination",
        ("live_count", ">=", 1), ("pro_shot_count", ">=", 1), ("live_pro_shot_gap", "<=", 2),
    ),
    _rule(
        "Live Performance Loyalist", "5x more Live than Pro Shots", "🎭", "combination",
        ("live_count", ">=", 5), ("pro_shot_count", ">=", 1), ("live_to_pro_shot_ratio", ">=", 5),
    ),
    _rule(
        "Streaming Specialist", "5x more Pro Shots than Live", "📺", "combination",
        ("pro_shot_count", ">=", 5), ("live_count", ">=", 1), ("pro_shot_to_live_ratio", ">=", 5),
    ),
    # Novelty
    _rule("Bougie Night", "At least one show over £100", "💎", "novelty", ("expensive_shows", ">=", 1)),
    _rule("Premium Patron", "Five high-roller nights", "💎", "novelty", ("expensive_shows", ">=", 5)),
    _rule("Bargain Hunter", "Snagged a budget ticket", "🪙", "novelty", ("cheap_shows", ">=", 1)),
    _rule("Budget Boss", "Five bargains under £25", "💸", "novelty", ("cheap_shows", ">=", 5)),
    _rule("West End Wanderer", "Seen shows in the West End", "🎭", "novelty", ("venue_west_end", "=", 1)),
    _rule("Broadway Baby", "Seen shows on Broadway", "🗽", "novelty", ("venue_broadway", "=", 1)),
    _rule("Fringe Festival", "Seen fringe shows", "🎪", "novelty", ("venue_fringe", "=", 1)),
    _rule("First Stream", "Your first Pro Shot experience", "📺", "novelty", ("pro_shot_count", ">=", 1)),
    _rule("Couch Critic", "Watched 5+ Pro Shots", "🛋️", "novelty", ("pro_shot_count", ">=", 5)),
    _rule("Home Theatre", "Watched 10+ Pro Shots", "🏠", "novelty", ("pro_shot_count", ">=", 10)),
    _rule("Streaming Enthusiast", "Watched 20+ Pro Shots", "📱", "novelty", ("pro_shot_count", ">=", 20)),
    _rule("Pro Shot Pro", "Watched 50+ Pro Shots", "🎬", "novelty", ("pro_shot_count", ">=", 50)),
    _rule("Quality Viewer", "Average Pro Shot rating > 4.0", "🌟", "novelty", ("pro_shot_avg_rating", ">", 4.0)),
    _rule("Pro Shot Perfectionist", "Average Pro Shot rating > 4.5", "⭐", "novelty", ("pro_shot_avg_rating", ">", 4.5)),
    _rule("Genre Explorer", "Watched Pro Shots from 5+ different shows", "🎪", "novelty", ("pro_shot_distinct_shows", ">=", 5)),
    _rule("Repeat Streamer", "Watched the same Pro Shot 3+ times", "🔄", "novelty", ("pro_shot_max_repeats", ">=", 3)),
    _rule("Musical Marathoner", "Watched 10+ musical Pro Shots", "🎵", "novelty", ("musical_pro_shots", ">=", 10)),
    _rule("Play Purist", "Watched 10+ play Pro Shots", "🎭", "novelty", ("play_pro_shots", ">=", 10)),
)

VENUE_FLAVOURS = {
    "venue_west_end": "west end",
    "venue_broadway": "broadway",
    "venue_fringe": "fringe",
}


class AchievementService:
    COMPARATORS = {
        ">": lambda a, b: a > b,
        ">=": lambda a, b: a >= b,
        "<": lambda a, b: a < b,
        "<=": lambda a, b: a <= b,
        "=": lambda a, b: abs(a - b) < 0.001,
    }

    @staticmethod
    def collect_metrics(
        performances: Sequence[Performance],
        shows: Sequence[Show],
        today: date,
    ) -> Dict[str, float]:
        lookup = build_show_lookup(shows)
        ratings = rated_values(performances)
        live = StatisticsService.live_performances(performances)
        pro_shots = [p for p in performances if p.is_pro_shot]
        # Thresholds compare whole pence
        costs = [round2(total_cost(p)) for p in performances]

        repeats = Counter(show_title(p, lookup) for p in performances)
        pro_shot_repeats = Counter(p.show_id for p in pro_shots)

        bands = Counter(StatisticsService.rating_band(rating) for rating in ratings)

        week_start, week_end = week_window(today)
        dated = [p for p in performances if p.date_seen]
        this_month = [p for p in dated if same_month(p.date_seen, today)]

        venue_names = [(p.theatre_name or "").lower() for p in performances]

        metrics: Dict[str, float] = {
            "total_shows": len(performances),
            "total_spent": round2(sum(costs)),
            "avg_rating": mean(ratings),
            "rated_count": len(ratings),
            "five_star_ratings": bands.get(5, 0),
            "one_star_ratings": bands.get(1, 0),
            "unique_venues": len({p.theatre_name for p in performances}),
            "max_repeats": max(repeats.values()) if repeats else 0,
            "this_month": len(this_month),
            "this_week": sum(1 for p in dated if week_start <= p.date_seen <= week_end),
            "this_month_live": sum(1 for p in this_month if not p.is_pro_shot),
            "this_month_pro_shot": sum(1 for p in this_month if p.is_pro_shot),
            "expensive_shows": sum(1 for cost in costs if cost >= 100),
            "cheap_shows": sum(1 for cost in costs if 0 < cost <= 25),
            "live_count": len(live),
            "pro_shot_count": len(pro_shots),
            "live_pro_shot_gap": abs(len(live) - len(pro_shots)),
            "live_to_pro_shot_ratio": len(live) / len(pro_shots) if pro_shots else 0.0,
            "pro_shot_to_live_ratio": len(pro_shots) / len(live) if live else 0.0,
            "pro_shot_avg_rating": mean(rated_values(pro_shots)),
            "pro_shot_distinct_shows": len(pro_shot_repeats),
            "pro_shot_max_repeats": max(pro_shot_repeats.values()) if pro_shot_repeats else 0,
            "musical_pro_shots": sum(1 for p in pro_shots if p.is_musical),
            "play_pro_shots": sum(1 for p in pro_shots if not p.is_musical),
        }
        for metric, needle in VENUE_FLAVOURS.items():
            metrics[metric] = 1.0 if any(needle in name for name in venue_names) else 0.0
        return metrics

    @staticmethod
    def matches(rule: AchievementRule, metrics: Dict[str, float]) -> bool:
        for metric, comparator, threshold in rule.conditions:
            value = metrics.get(metric)
            compare = AchievementService.COMPARATORS.get(comparator)
            if value is None or compare is None:
                return False
            if not compare(value, threshold):
                return False
        return True

    @staticmethod
    def evaluate(
        performances: Sequence[Performance],
        shows: Sequence[Show],
        today: date,
        rules: Sequence[AchievementRule] = ACHIEVEMENT_RULES,
    ) -> List[Achievement]:
        metrics = AchievementService.collect_metrics(performances, shows, today)
        return [rule.badge() for rule in rules if AchievementService.matches(rule, metrics)]
