"""Unit tests for SeasonEngine - SR curve, ranks and soft-reset placement."""

from __future__ import annotations

from datetime import date

import pytest

from custom_components.salesquest import const
from custom_components.salesquest.engines.season_engine import SeasonEngine


class TestSeasonIdentity:
    """Tests for season ids, names and windows."""

    def test_season_id(self) -> None:
        """Seasons are calendar months."""
        assert SeasonEngine.season_id(date(2025, 10, 20)) == "2025-10"

    def test_season_window(self) -> None:
        """The window spans the whole month."""
        assert SeasonEngine.season_window("2024-02") == (
            date(2024, 2, 1),
            date(2024, 2, 29),
        )

    def test_season_name(self) -> None:
        """Names carry the season number and month."""
        assert SeasonEngine.season_name(3, "2026-03") == "Season 3 - March 2026"

    def test_days_remaining(self) -> None:
        """Days remaining include today and stop at 0."""
        assert SeasonEngine.days_remaining("2025-10", date(2025, 10, 31)) == 1
        assert SeasonEngine.days_remaining("2025-10", date(2025, 11, 2)) == 0


class TestSkillRating:
    """Tests for the points to SR curve."""

    @pytest.mark.parametrize(
        ("points", "sr"),
        [(0, 0), (50, 750), (100, 1500), (200, 1750), (10000, const.SR_MAX)],
    )
    def test_points_to_sr(self, points, sr) -> None:
        """Known points of the curve."""
        assert SeasonEngine.points_to_sr(points) == sr

    def test_curve_is_monotonic(self) -> None:
        """More points never lower SR."""
        values = [SeasonEngine.points_to_sr(points) for points in range(0, 3000, 25)]
        assert values == sorted(values)

    def test_current_sr_never_below_placement(self) -> None:
        """Placement SR is a floor for the season."""
        assert SeasonEngine.current_sr(1900, 0, 100) == 1900
        assert SeasonEngine.current_sr(0, 100, 0) == 1500


class TestRanks:
    """Tests for rank and division lookup."""

    @pytest.mark.parametrize(
        ("sr", "rank", "division"),
        [
            (0, const.RANK_BRONZE, 5),
            (1900, const.RANK_SILVER, 1),
            (2000, const.RANK_GOLD, 5),
            (const.SR_MAX, const.RANK_GRANDMASTER, 1),
        ],
    )
    def test_rank_from_sr(self, sr, rank, division) -> None:
        """Division 1 is the top of each rank."""
        info = SeasonEngine.rank_from_sr(sr)
        assert info["rank"] == rank
        assert info["division"] == division

    def test_progress_to_next_division(self) -> None:
        """Bottom of a division is 0% progress."""
        progress = SeasonEngine.progress_to_next_division(2000)
        assert progress["progress"] == 0.0
        assert progress["sr_needed"] > 0

    def test_higher_rank(self) -> None:
        """Peak rank keeps the higher tier."""
        assert SeasonEngine.higher_rank(const.RANK_GOLD, const.RANK_SILVER) == (
            const.RANK_GOLD
        )
        assert SeasonEngine.higher_rank(None, const.RANK_SILVER) == const.RANK_SILVER


class TestPlacement:
    """Tests for the soft reset."""

    def test_gold_three_places_silver_one(self) -> None:
        """Gold 3 drops three divisions to Silver 1 with the Gold bonus."""
        placement = SeasonEngine.placement(const.RANK_GOLD, 3)
        assert placement["rank"] == const.RANK_SILVER
        assert placement["division"] == 1
        assert placement["sr"] == 1900
        assert placement["starting_bonus"] == 100

    def test_bronze_floor(self) -> None:
        """Bronze keeps nothing and cannot drop below Bronze 5."""
        placement = SeasonEngine.placement(const.RANK_BRONZE, 1)
        assert placement["rank"] == const.RANK_BRONZE
        assert placement["division"] == 5
        assert placement["starting_bonus"] == 0

    def test_first_season(self) -> None:
        """Members without history start at Bronze 5 with 0 SR."""
        placement = SeasonEngine.placement(None, None)
        assert placement == {
            "rank": const.RANK_BRONZE,
            "division": 5,
            "sr": 0,
            "starting_bonus": 0,
        }
