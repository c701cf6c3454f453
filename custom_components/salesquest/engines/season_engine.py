"""Season Engine - Pure logic for monthly seasons, skill rating and ranks.

This engine provides stateless functions for:
- Season identity ("YYYY-MM"), naming and date window
- Season points → skill rating (SR) curve
- SR → rank and division (division 1 is the top of a rank)
- Progress inside the current division
- Soft-reset placement for the next season from last season's finish

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Season lifecycle persistence belongs in SeasonManager.
"""

from __future__ import annotations

from datetime import date
import math
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils, math_utils

if TYPE_CHECKING:
    from ..type_defs import DivisionProgress, RankInfo


def _rank_by_tier(tier: int) -> str:
    for rank_key, info in const.RANKS.items():
        if info[const.RANK_FIELD_TIER] == tier:
            return rank_key
    return const.RANK_BRONZE


class SeasonEngine:
    """Pure logic engine for seasons and ranks.

    All methods are static - no instance state.
    """

    # ==========================================================================
    # Season Identity
    # ==========================================================================

    @staticmethod
    def season_id(day: date) -> str:
        """Return the season id for a day ("YYYY-MM")."""
        return dt_utils.month_key(day)

    @staticmethod
    def season_window(season_id: str) -> tuple[date, date]:
        """Return (first day, last day) of a season."""
        start = dt_utils.month_from_key(season_id)
        return start, dt_utils.month_end(start)

    @staticmethod
    def season_name(season_number: int, season_id: str) -> str:
        """Return the display name, e.g. "Season 3 - March 2026"."""
        start = dt_utils.month_from_key(season_id)
        return f"Season {season_number} - {const.MONTH_NAMES[start.month - 1]} {start.year}"

    @staticmethod
    def days_remaining(season_id: str, today: date) -> int:
        """Return days left in the season including today (0 once it has ended)."""
        _, end = SeasonEngine.season_window(season_id)
        return max(0, (end - today).days + 1)

    # ==========================================================================
    # Skill Rating
    # ==========================================================================

    @staticmethod
    def points_to_sr(points: float) -> int:
        """Convert season points to SR using the piecewise curve.

        Examples:
            points_to_sr(50) → 750
            points_to_sr(200) → 1750
            points_to_sr(10000) → 5000
        """
        points = max(0.0, float(points))
        for upper, sr_base, points_base, slope in const.SR_CURVE:
            if points < upper:
                return int(math.floor(sr_base + (points - points_base) * slope))
        sr_base, points_base, slope = const.SR_CURVE_TAIL
        return min(const.SR_MAX, int(math.floor(sr_base + (points - points_base) * slope)))

    @staticmethod
    def division_size(rank_key: str) -> float:
        """Return the SR width of one division of a rank."""
        info = const.RANKS[rank_key]
        return (info[const.RANK_FIELD_SR_MAX] - info[const.RANK_FIELD_SR_MIN]) / (
            const.RANK_DIVISIONS
        )

    @staticmethod
    def rank_from_sr(sr: int) -> RankInfo:
        """Return rank and division (1 best .. 5 lowest) for an SR value."""
        sr = math_utils.clamp(int(sr), 0, const.SR_MAX)
        for rank_key, info in const.RANKS.items():
            sr_min = info[const.RANK_FIELD_SR_MIN]
            if sr_min <= sr <= info[const.RANK_FIELD_SR_MAX]:
                steps = math.floor((sr - sr_min) / SeasonEngine.division_size(rank_key))
                return {
                    "rank": rank_key,
                    "name": info[const.RANK_FIELD_NAME],
                    "tier": info[const.RANK_FIELD_TIER],
                    "division": math_utils.clamp(
                        const.RANK_DIVISIONS - steps, 1, const.RANK_DIVISIONS
                    ),
                }
        bronze = const.RANKS[const.RANK_BRONZE]
        return {
            "rank": const.RANK_BRONZE,
            "name": bronze[const.RANK_FIELD_NAME],
            "tier": bronze[const.RANK_FIELD_TIER],
            "division": const.RANK_DIVISIONS,
        }

    @staticmethod
    def progress_to_next_division(sr: int) -> DivisionProgress:
        """Return progress through the current division and SR still needed."""
        rank_key = SeasonEngine.rank_from_sr(sr)["rank"]
        sr_min = const.RANKS[rank_key][const.RANK_FIELD_SR_MIN]
        size = SeasonEngine.division_size(rank_key)
        steps = min(const.RANK_DIVISIONS - 1, math.floor((sr - sr_min) / size))
        division_min = sr_min + steps * size
        progress = min(100.0, max(0.0, (sr - division_min) / size * 100))
        return {
            "progress": round(progress, 1),
            "sr_needed": max(0, math.ceil(division_min + size - sr)),
        }

    @staticmethod
    def division_floor_sr(rank_key: str, division: int) -> int:
        """Return the lowest SR that still places in `rank_key` `division`."""
        sr_min = const.RANKS[rank_key][const.RANK_FIELD_SR_MIN]
        steps = const.RANK_DIVISIONS - division
        return int(math.ceil(sr_min + steps * SeasonEngine.division_size(rank_key)))

    @staticmethod
    def current_sr(placement_sr: int, season_points: int, starting_bonus: int) -> int:
        """Return SR for the season: never below the placement SR."""
        return max(placement_sr, SeasonEngine.points_to_sr(season_points + starting_bonus))

    @staticmethod
    def tier(rank_key: str | None) -> int:
        """Return the tier of a rank (0 for unknown)."""
        if not rank_key or rank_key not in const.RANKS:
            return 0
        return const.RANKS[rank_key][const.RANK_FIELD_TIER]

    @staticmethod
    def higher_rank(first: str | None, second: str) -> str:
        """Return whichever rank has the higher tier."""
        return second if SeasonEngine.tier(second) > SeasonEngine.tier(first) else first or second

    # ==========================================================================
    # Soft Reset
    # ==========================================================================

    @staticmethod
    def placement(last_rank: str | None, last_division: int | None) -> dict[str, Any]:
        """Compute next-season placement from last season's finish.

        Each rank keeps `keep_divisions` of the five divisions it sits on:
        the player drops (5 - keep_divisions) divisions counted across the
        whole ladder, never below Bronze 5. The new season also starts with
        the finishing rank's starting bonus in points.

        Returns:
            dict with rank, division, sr, starting_bonus
        """
        if not last_rank or last_rank not in const.RANKS:
            return {
                "rank": const.RANK_BRONZE,
                "division": const.RANK_DIVISIONS,
                "sr": 0,
                "starting_bonus": 0,
            }

        info = const.RANKS[last_rank]
        division = math_utils.clamp(
            int(last_division or const.RANK_DIVISIONS), 1, const.RANK_DIVISIONS
        )
        total_divisions = (info[const.RANK_FIELD_TIER] - 1) * const.RANK_DIVISIONS + (
            const.RANK_DIVISIONS - division
        )
        dropped = const.RANK_DIVISIONS - info[const.RANK_FIELD_KEEP_DIVISIONS]
        new_total = max(0, total_divisions - dropped)

        new_rank = _rank_by_tier(new_total // const.RANK_DIVISIONS + 1)
        new_division = const.RANK_DIVISIONS - new_total % const.RANK_DIVISIONS
        return {
            "rank": new_rank,
            "division": new_division,
            "sr": SeasonEngine.division_floor_sr(new_rank, new_division),
            "starting_bonus": info[const.RANK_FIELD_STARTING_BONUS],
        }
