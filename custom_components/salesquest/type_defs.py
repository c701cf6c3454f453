"""Type definitions for SalesQuest data structures.

Documents are stored as plain dicts keyed by const.DATA_* names; the
TypedDicts below describe their static shape for type checking only.
Result types returned by managers use a literal discriminator field
(`status` for streak results, `view` for privacy projections) so callers can
branch on the variant.

IMPORTANT: This file must NOT import from coordinator.py or any manager to
avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY and is not enforced at runtime.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

MemberId = str
TeamId = str
GoalId = str
MemberGoalId = str
SeasonId = str  # "YYYY-MM"
ISODate = str  # "2026-01-18"
ISODatetime = str  # "2026-01-18T12:30:00+00:00"

Document = dict[str, Any]
QueryFilter = tuple[str, str, Any]  # (field, operator, value)
QueryOrder = tuple[str, bool]  # (field, descending)


# =============================================================================
# Store
# =============================================================================


class StoreWrite(TypedDict):
    """One staged write inside a batch."""

    op: Literal["set_merge", "increment"]
    collection: str
    doc_id: str
    data: NotRequired[Document]
    field: NotRequired[str]
    delta: NotRequired[float]


# =============================================================================
# Documents
# =============================================================================


class MemberData(TypedDict):
    """Per-member progress aggregate (collection `members`)."""

    member_id: MemberId
    name: str
    team_id: NotRequired[TeamId | None]
    ha_user_id: NotRequired[str | None]
    today_points: int
    season_points: int
    lifetime_points: int
    xp: int
    level: int
    streak: int
    achievements: list[str]
    last_activity_date: NotRequired[ISODate | None]
    last_streak_update: NotRequired[ISODatetime | None]
    last_season_rank: NotRequired[str | None]
    last_season_division: NotRequired[int | None]
    last_season_points: NotRequired[int | None]
    created_at: NotRequired[ISODatetime]


class TeamData(TypedDict):
    """Team with leadership roles (collection `teams`)."""

    team_id: TeamId
    name: str
    leader_id: MemberId
    co_leaders: list[MemberId]
    members: list[MemberId]
    created_at: NotRequired[ISODatetime]


class CheckInData(TypedDict, total=False):
    """Daily check-in (collection `checkins`, key "{member_id}_{date}")."""

    member_id: MemberId
    date: ISODate
    intentions_completed: bool
    wrap_completed: bool
    victory: str
    focus: str
    stuck: str
    accomplished: str
    tomorrow: str
    sales: int
    quotes: int
    points_awarded: dict[str, bool]
    award_state: str
    total_daily_points: int
    newly_unlocked_achievements: list[str]
    updated_at: ISODatetime


class TeamGoalData(TypedDict):
    """Shared team target (collection `team_goals`)."""

    goal_id: GoalId
    team_id: TeamId
    title: str
    description: str
    goal_type: str
    target_value: float
    current_value: float
    start_date: ISODate
    end_date: NotRequired[ISODate | None]
    distribution_type: Literal["equal", "custom"]
    custom_distribution: dict[MemberId, float]
    included_members: list[MemberId]
    excluded_members: list[MemberId]
    leader_participates: bool
    minimum_per_member: int
    status: Literal["active", "paused", "completed"]
    created_by: MemberId
    created_at: ISODatetime
    updated_at: ISODatetime
    completed_at: NotRequired[ISODatetime | None]


class MemberGoalData(TypedDict):
    """Per-member decomposition of a team goal (collection `member_goals`)."""

    member_goal_id: MemberGoalId
    goal_id: GoalId
    member_id: MemberId
    minimum_target: float
    personal_target: float
    current_value: float
    progress_percentage: int
    contribution_percentage: int
    status: Literal["active", "completed", "excluded"]
    is_included: bool
    completed_at: NotRequired[ISODatetime | None]
    excluded_at: NotRequired[ISODatetime | None]
    updated_at: NotRequired[ISODatetime]


class GoalProgressData(TypedDict):
    """Immutable progress record (collection `goal_progress`)."""

    progress_id: str
    goal_id: GoalId
    member_id: MemberId
    date: ISODate
    daily_value: float
    cumulative_value: float
    percentage_complete: int
    source: str
    recorded_at: ISODatetime


class SeasonData(TypedDict):
    """Monthly season (collection `seasons`)."""

    season_id: SeasonId
    season_number: int
    name: str
    start_date: ISODate
    end_date: ISODate
    status: Literal["active", "ended"]
    ended_at: NotRequired[ISODatetime | None]


class UserSeasonData(TypedDict):
    """A member's standing in one season (collection `user_seasons`)."""

    member_id: MemberId
    season_id: SeasonId
    season_points: int
    starting_bonus: int
    placement_rank: str
    placement_division: int
    placement_sr: int
    current_sr: int
    current_rank: str
    current_division: int
    peak_rank: str
    intentions_completed: int
    wraps_completed: int


# =============================================================================
# Engine Results
# =============================================================================


class AwardPlan(TypedDict):
    """What a single activity award will change on the check-in."""

    activity: str
    points: int
    bonus: int
    previous_state: str
    next_state: str
    awarded: bool


class RankInfo(TypedDict):
    """Rank placement for a skill rating."""

    rank: str
    name: str
    tier: int
    division: int


class DivisionProgress(TypedDict):
    """Progress inside the current division."""

    progress: float
    sr_needed: int


class MilestoneProgress(TypedDict):
    """Progress toward the next streak milestone."""

    next_milestone: int | None
    previous_milestone: int
    progress: int
    days_remaining: int


# =============================================================================
# Manager Results
# =============================================================================


class AwardResult(TypedDict):
    """Outcome of award_daily_activity_points (never raised, always returned)."""

    success: bool
    member_id: MemberId
    activity: str
    awarded: bool
    points_awarded: int
    bonus_awarded: bool
    state: NotRequired[str]
    error: NotRequired[str]


class StreakOk(TypedDict):
    """Streak computed (possibly zero)."""

    status: Literal["ok"]
    member_id: MemberId
    streak: int
    previous_streak: int
    new_streak: bool
    new_achievements: list[str]
    all_achievements: list[str]
    business_day: bool


class StreakNotFound(TypedDict):
    """Member does not exist."""

    status: Literal["not_found"]
    member_id: MemberId


class StreakFailed(TypedDict):
    """Calculation could not complete; the stored streak is unchanged."""

    status: Literal["failed"]
    member_id: MemberId
    reason: str


StreakResult = StreakOk | StreakNotFound | StreakFailed


# =============================================================================
# Privacy Projections
# =============================================================================


class MemberGoalFullView(TypedDict):
    """Member goal with raw numbers (leader, co-leader or owner)."""

    view: Literal["full"]
    member_goal_id: MemberGoalId
    member_id: MemberId
    minimum_target: float
    personal_target: float
    current_value: float
    progress_percentage: int
    contribution_percentage: int
    performance_rating: str
    status: str


class MemberGoalSummaryView(TypedDict):
    """Member goal reduced to derived values (everyone else)."""

    view: Literal["summary"]
    member_id: MemberId
    progress_percentage: int
    performance_rating: str
    status: str


MemberGoalView = MemberGoalFullView | MemberGoalSummaryView


class TeamGoalFullView(TypedDict):
    """Team goal with raw numbers."""

    view: Literal["full"]
    goal_id: GoalId
    team_id: TeamId
    title: str
    description: str
    goal_type: str
    status: str
    target_value: float
    current_value: float
    minimum_per_member: int
    included_members: list[MemberId]
    leader_participates: bool
    distribution_type: str
    start_date: ISODate
    end_date: ISODate | None
    progress_percentage: int
    achievable: bool


class TeamGoalSummaryView(TypedDict):
    """Team goal reduced to derived values."""

    view: Literal["summary"]
    goal_id: GoalId
    team_id: TeamId
    title: str
    description: str
    goal_type: str
    status: str
    start_date: ISODate
    end_date: ISODate | None
    progress_percentage: int


TeamGoalView = TeamGoalFullView | TeamGoalSummaryView


class GoalProgressView(TypedDict):
    """Result of get_goal_progress."""

    team_goal: TeamGoalView
    member_progress: list[MemberGoalView]
    team_progress: int
