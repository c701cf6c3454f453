"""Engine modules for SalesQuest integration.

Contains pure computation engines:
- points_engine: Check-in award state machine and point plans
- streak_engine: Business-day streak walk, achievements, milestones
- team_goal_engine: Goal distribution, analytics and privacy projection
- season_engine: Seasons, skill rating, ranks and soft reset
"""

from .points_engine import CheckInState, PointsEngine
from .season_engine import SeasonEngine
from .streak_engine import StreakEngine
from .team_goal_engine import TeamGoalEngine

__all__ = [
    "CheckInState",
    "PointsEngine",
    "SeasonEngine",
    "StreakEngine",
    "TeamGoalEngine",
]
