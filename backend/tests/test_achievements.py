"""Tests for the achievement rules."""

from datetime import timedelta

from stagelog.services.achievements import ACHIEVEMENT_RULES, AchievementRule, AchievementService


def _names(performances, today, shows=()):
    return [badge.name for badge in AchievementService.evaluate(performances, list(shows), today)]


class TestAchievements:
    def test_nothing_logged(self, today):
        assert _names([], today) == []

    def test_first_show(self, make_performance, today):
        assert _names([make_performance()], today) == ["Opening Night"]

    def test_declaration_order_is_output_order(self, make_performance, today):
        performances = [
            make_performance(show_id="s1", theatre_name="A Theatre", date_seen="2026-05-01", ticket_price=40),
            make_performance(show_id="s1", theatre_name="B Theatre", date_seen="2026-06-01", ticket_price=40),
            make_performance(show_id="s2", theatre_name="C Theatre", date_seen="2026-07-01", ticket_price=30),
        ]
        assert _names(performances, today) == [
            "Opening Night",
            "Patron of the Arts",
            "Venue Tourist",
            "Second Helping",
        ]

    def test_rule_names_are_unique(self):
        names = [rule.name for rule in ACHIEVEMENT_RULES]
        assert len(names) == len(set(names))

    def test_unrated_spend_is_not_a_disappointment(self, make_performance, today):
        performances = [make_performance(ticket_price=500), make_performance(ticket_price=500)]
        names = _names(performances, today)
        assert "Serious Supporter" in names
        assert "Expensive Disappointment" not in names

    def test_rated_spend_can_disappoint(self, make_performance, today):
        performances = [
            make_performance(ticket_price=600, rating={"music_songs": 2}),
            make_performance(ticket_price=600, rating={"music_songs": 3}),
        ]
        assert "Expensive Disappointment" in _names(performances, today)

    def test_tough_crowd_needs_five_ratings(self, make_performance, today):
        four = [make_performance(rating={"music_songs": 1}) for _ in range(4)]
        assert "Tough Crowd" not in _names(four, today)
        five = four + [make_performance(rating={"music_songs": 1})]
        names = _names(five, today)
        assert "Tough Crowd" in names
        assert "One Star Monster" in names

    def test_five_star_band_counts(self, make_performance, today):
        performances = [make_performance(rating={"music_songs": 4.5}) for _ in range(5)]
        names = _names(performances, today)
        assert "Five Star Fan" in names
        assert "Five Star Fiend" not in names
        assert "Quality Magnet" not in names

    def test_weekly_warrior(self, make_performance, today):
        performances = [
            make_performance(date_seen=(today - timedelta(days=1)).isoformat()),
            make_performance(date_seen=(today - timedelta(days=3)).isoformat()),
        ]
        names = _names(performances, today)
        assert "Weekly Warrior" in names
        assert "Monthly Madness" not in names

    def test_week_is_seven_calendar_days(self, make_performance, today):
        eight_days = [
            make_performance(date_seen=(today - timedelta(days=7)).isoformat()),
            make_performance(date_seen=(today - timedelta(days=7)).isoformat()),
        ]
        assert "Weekly Warrior" not in _names(eight_days, today)
        seven_days = [
            make_performance(date_seen=(today - timedelta(days=6)).isoformat()),
            make_performance(date_seen=today.isoformat()),
        ]
        assert "Weekly Warrior" in _names(seven_days, today)

    def test_pro_shot_mix(self, make_performance, today):
        performances = [
            make_performance(date_seen="2026-10-02"),
            make_performance(date_seen="2026-10-03", production_type="Pro Shot", theatre_name="Disney+"),
        ]
        names = _names(performances, today)
        assert "First Stream" in names
        assert "Hybrid Theatre-Goer" in names
        assert "Balanced Viewer" in names
        assert names.index("Hybrid Theatre-Goer") < names.index("Balanced Viewer") < names.index("First Stream")

    def test_venue_flavour(self, make_performance, today):
        names = _names([make_performance(theatre_name="Apollo West End")], today)
        assert "West End Wanderer" in names
        assert "Broadway Baby" not in names

    def test_bargains(self, make_performance, today):
        performances = [make_performance(ticket_price=15) for _ in range(5)]
        names = _names(performances, today)
        assert "Bargain Hunter" in names
        assert "Budget Boss" in names

    def test_split_cost_of_exactly_a_hundred_is_expensive(self, make_performance, today):
        performance = make_performance(ticket_price=60.01, booking_fee=20.22, travel_cost=19.77)
        metrics = AchievementService.collect_metrics([performance], [], today)
        assert metrics["expensive_shows"] == 1
        assert metrics["total_spent"] == 100.0
        assert "Bougie Night" in _names([performance], today)


class TestRuleMatching:
    def test_unknown_metric_never_matches(self):
        rule = AchievementRule("Odd", "", "", "novelty", (("missing_metric", ">=", 0),))
        assert AchievementService.matches(rule, {"total_shows": 3}) is False

    def test_all_conditions_must_hold(self):
        rule = AchievementRule(
            "Both", "", "", "combination", (("total_shows", ">=", 10), ("avg_rating", ">=", 4.5))
        )
        assert AchievementService.matches(rule, {"total_shows": 12, "avg_rating": 4.6})
        assert not AchievementService.matches(rule, {"total_shows": 12, "avg_rating": 4.4})
