"""Tests for the weighted rating calculator and production classification."""

import pytest
from pydantic import ValidationError

from stagelog.schemas.performance import CategoryRatings, ProductionKind, ProductionType
from stagelog.services.rating import compute_weighted_rating, resolve_profile


class TestWeightedRating:
    def test_renormalises_over_rated_categories(self):
        """Unrated categories drop out of both the score and the weight total."""
        ratings = CategoryRatings(
            music_songs=5,
            performance_cast=4,
            stage_visuals=3,
            story_plot=0,
            theatre_experience=0,
            programme=0,
            atmosphere=0,
            rewatch_value=0,
        )
        assert compute_weighted_rating(ratings, "West End", is_musical=True) == pytest.approx(2.65 / 0.65)
        assert round(compute_weighted_rating(ratings, "West End"), 3) == 4.077

    def test_nothing_rated_is_zero(self):
        assert compute_weighted_rating(CategoryRatings(), "West End") == 0.0
        assert compute_weighted_rating(None, "Pro Shot") == 0.0

    def test_rewatch_value_carries_no_weight(self):
        assert compute_weighted_rating({"rewatch_value": 5}, "West End") == 0.0

    def test_pro_shot_ignores_venue_categories(self):
        ratings = {
            "music_songs": 4,
            "performance_cast": 4,
            "stage_visuals": 4,
            "story_plot": 4,
            "theatre_experience": 1,
            "programme": 1,
            "atmosphere": 1,
        }
        assert compute_weighted_rating(ratings, "Pro Shot") == pytest.approx(4.0)
        assert compute_weighted_rating(ratings, "West End") == pytest.approx(3.4)

    def test_non_musical_ignores_music(self):
        assert compute_weighted_rating(
            {"music_songs": 1, "performance_cast": 4}, "West End", is_musical=False
        ) == pytest.approx(4.0)

    def test_non_musical_weights(self):
        rating = compute_weighted_rating(
            {"performance_cast": 5, "story_plot": 3}, "UK Tour", is_musical=False
        )
        assert rating == pytest.approx((5 * 0.25 + 3 * 0.20) / 0.45)

    def test_loose_mapping_input(self):
        assert compute_weighted_rating({"music_songs": "5", "performance_cast": ""}, "West End") == 5.0

    def test_result_stays_within_scale(self):
        top = {category: 5 for category in resolve_profile(True, "West End")}
        assert compute_weighted_rating(top, "West End") == pytest.approx(5.0)


class TestRatingProfile:
    def test_pro_shot_musical_profile(self):
        profile = resolve_profile(True, "Pro Shot")
        assert set(profile) == {"music_songs", "performance_cast", "stage_visuals", "story_plot"}

    def test_in_venue_musical_weights_sum_to_one(self):
        assert sum(resolve_profile(True, "West End").values()) == pytest.approx(1.0)
        assert sum(resolve_profile(False, "Broadway").values()) == pytest.approx(1.0)


class TestProductionType:
    @pytest.mark.parametrize("label", ["Pro Shot", "pro shot", "Pro-Shot", "PROSHOT"])
    def test_pro_shot_spellings(self, label):
        production = ProductionType.parse(label)
        assert production.kind == ProductionKind.PRO_SHOT
        assert production.is_pro_shot

    def test_in_venue_label_is_kept(self):
        production = ProductionType.parse("West End")
        assert production.kind == ProductionKind.IN_VENUE
        assert production.label == "West End"

    @pytest.mark.parametrize("label", ["Disney Special", "", None])
    def test_unknown_labels(self, label):
        assert ProductionType.parse(label).kind == ProductionKind.OTHER


class TestCategoryRatings:
    def test_zero_and_garbage_mean_unrated(self):
        ratings = CategoryRatings(music_songs=0, story_plot="abc", programme=None)
        assert ratings.music_songs is None
        assert ratings.story_plot is None
        assert ratings.rated() == {}

    @pytest.mark.parametrize("value", [5.5, -1, 6])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(ValidationError):
            CategoryRatings(music_songs=value)

    def test_rated_only_lists_given_categories(self):
        assert CategoryRatings(music_songs=4, atmosphere="3.5").rated() == {
            "music_songs": 4.0,
            "atmosphere": 3.5,
        }
