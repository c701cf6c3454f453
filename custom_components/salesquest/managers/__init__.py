"""Manager modules for SalesQuest integration.

Managers orchestrate workflows and coordinate between engines and the store.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .checkin_manager import CheckInManager
from .points_manager import PointsManager
from .roster_manager import RosterManager
from .season_manager import SeasonManager
from .streak_manager import StreakManager
from .team_goal_manager import TeamGoalManager

__all__ = [
    "BaseManager",
    "CheckInManager",
    "PointsManager",
    "RosterManager",
    "SeasonManager",
    "StreakManager",
    "TeamGoalManager",
]
