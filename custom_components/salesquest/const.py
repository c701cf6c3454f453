# File: const.py
"""Constants for the SalesQuest integration.

This file centralizes configuration keys, defaults, storage collection and
field names, point values, achievement thresholds, rank tables, event signals,
service names and error messages for consistency across the integration.
"""

import logging

import homeassistant.util.dt as dt_util
from homeassistant.const import Platform

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
SALESQUEST_TITLE = "SalesQuest"

# Integration Domain
DOMAIN = "salesquest"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Storage and Versioning
STORAGE_KEY = "salesquest_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# Update Interval (minutes)
DEFAULT_UPDATE_INTERVAL = 5

# Daily rollover time (local)
DEFAULT_DAILY_ROLLOVER_TIME = {"hour": 0, "minute": 0, "second": 1}

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_OBSERVE_FEDERAL_HOLIDAYS = "observe_federal_holidays"
CONF_EXTRA_HOLIDAYS = "extra_holidays"
CONF_UPDATE_INTERVAL = "update_interval"
CONF_RETRY_ATTEMPTS = "retry_attempts"

DEFAULT_OBSERVE_FEDERAL_HOLIDAYS = True
DEFAULT_EXTRA_HOLIDAYS = ""
DEFAULT_RETRY_ATTEMPTS = 3
MIN_RETRY_ATTEMPTS = 1
MAX_RETRY_ATTEMPTS = 10

# Retry backoff (seconds)
DEFAULT_RETRY_INITIAL_DELAY = 1.0
DEFAULT_RETRY_BACKOFF = 2.0

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

CFOP_ABORT_SINGLE_INSTANCE = "single_instance_allowed"
CFOP_ERROR_INVALID_HOLIDAYS = "invalid_holidays"

MIN_UPDATE_INTERVAL = 1
MAX_UPDATE_INTERVAL = 60

# ------------------------------------------------------------------------------------------------
# Storage Collections
# ------------------------------------------------------------------------------------------------
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schema_version"
DATA_META_CREATED_AT = "created_at"

DATA_MEMBERS = "members"
DATA_TEAMS = "teams"
DATA_CHECKINS = "checkins"
DATA_TEAM_GOALS = "team_goals"
DATA_MEMBER_GOALS = "member_goals"
DATA_GOAL_PROGRESS = "goal_progress"
DATA_SEASONS = "seasons"
DATA_USER_SEASONS = "user_seasons"

COLLECTIONS = (
    DATA_MEMBERS,
    DATA_TEAMS,
    DATA_CHECKINS,
    DATA_TEAM_GOALS,
    DATA_MEMBER_GOALS,
    DATA_GOAL_PROGRESS,
    DATA_SEASONS,
    DATA_USER_SEASONS,
)

# Store write operations
STORE_OP_SET_MERGE = "set_merge"
STORE_OP_INCREMENT = "increment"

# Store query operators
QUERY_OP_EQ = "=="
QUERY_OP_NE = "!="
QUERY_OP_LT = "<"
QUERY_OP_LTE = "<="
QUERY_OP_GT = ">"
QUERY_OP_GTE = ">="
QUERY_OP_IN = "in"
QUERY_OP_ARRAY_CONTAINS = "array_contains"

# ------------------------------------------------------------------------------------------------
# Member (UserProgress) Fields
# ------------------------------------------------------------------------------------------------
DATA_MEMBER_ID = "member_id"
DATA_MEMBER_NAME = "name"
DATA_MEMBER_TEAM_ID = "team_id"
DATA_MEMBER_HA_USER_ID = "ha_user_id"
DATA_MEMBER_TODAY_POINTS = "today_points"
DATA_MEMBER_SEASON_POINTS = "season_points"
DATA_MEMBER_LIFETIME_POINTS = "lifetime_points"
DATA_MEMBER_XP = "xp"
DATA_MEMBER_LEVEL = "level"
DATA_MEMBER_STREAK = "streak"
DATA_MEMBER_ACHIEVEMENTS = "achievements"
DATA_MEMBER_LAST_ACTIVITY_DATE = "last_activity_date"
DATA_MEMBER_LAST_STREAK_UPDATE = "last_streak_update"
DATA_MEMBER_LAST_SEASON_RANK = "last_season_rank"
DATA_MEMBER_LAST_SEASON_DIVISION = "last_season_division"
DATA_MEMBER_LAST_SEASON_POINTS = "last_season_points"
DATA_MEMBER_CREATED_AT = "created_at"

# Counters touched by every point award
MEMBER_POINT_COUNTERS = (
    DATA_MEMBER_TODAY_POINTS,
    DATA_MEMBER_SEASON_POINTS,
    DATA_MEMBER_LIFETIME_POINTS,
    DATA_MEMBER_XP,
)

# ------------------------------------------------------------------------------------------------
# Team Fields
# ------------------------------------------------------------------------------------------------
DATA_TEAM_ID = "team_id"
DATA_TEAM_NAME = "name"
DATA_TEAM_LEADER_ID = "leader_id"
DATA_TEAM_CO_LEADERS = "co_leaders"
DATA_TEAM_MEMBERS = "members"
DATA_TEAM_CREATED_AT = "created_at"

ROLE_LEADER = "leader"
ROLE_CO_LEADER = "co_leader"
ROLE_MEMBER = "member"
ROLE_NONE = "none"

# ------------------------------------------------------------------------------------------------
# Check-in Fields
# ------------------------------------------------------------------------------------------------
DATA_CHECKIN_MEMBER_ID = "member_id"
DATA_CHECKIN_DATE = "date"
DATA_CHECKIN_INTENTIONS_COMPLETED = "intentions_completed"
DATA_CHECKIN_WRAP_COMPLETED = "wrap_completed"
DATA_CHECKIN_VICTORY = "victory"
DATA_CHECKIN_FOCUS = "focus"
DATA_CHECKIN_STUCK = "stuck"
DATA_CHECKIN_ACCOMPLISHED = "accomplished"
DATA_CHECKIN_TOMORROW = "tomorrow"
DATA_CHECKIN_SALES = "sales"
DATA_CHECKIN_QUOTES = "quotes"
DATA_CHECKIN_POINTS_AWARDED = "points_awarded"
DATA_CHECKIN_AWARD_STATE = "award_state"
DATA_CHECKIN_TOTAL_DAILY_POINTS = "total_daily_points"
DATA_CHECKIN_NEW_ACHIEVEMENTS = "newly_unlocked_achievements"
DATA_CHECKIN_UPDATED_AT = "updated_at"

# Activities
ACTIVITY_MORNING_INTENTIONS = "morning_intentions"
ACTIVITY_EVENING_WRAP = "evening_wrap"
ACTIVITY_DAILY_BONUS = "daily_bonus"
ACTIVITY_TYPES = (ACTIVITY_MORNING_INTENTIONS, ACTIVITY_EVENING_WRAP)

# Daily activity point values
POINTS_MORNING_INTENTIONS = 5
POINTS_EVENING_WRAP = 5
POINTS_DAILY_BONUS = 10

ACTIVITY_POINTS = {
    ACTIVITY_MORNING_INTENTIONS: POINTS_MORNING_INTENTIONS,
    ACTIVITY_EVENING_WRAP: POINTS_EVENING_WRAP,
}

XP_PER_LEVEL = 1000

# ------------------------------------------------------------------------------------------------
# Streaks and Achievements
# ------------------------------------------------------------------------------------------------
# Longest streak the backward walk will report
MAX_STREAK_DAYS = 365

# Sales-day window used for sales achievements
SALES_DAYS_QUERY_LIMIT = 30

ACHIEVEMENT_HOT_STREAK = "hot_streak"
ACHIEVEMENT_WEEK_WARRIOR = "week_warrior"
ACHIEVEMENT_STREAK_HERO = "streak_hero"
ACHIEVEMENT_STREAK_LEGEND = "streak_legend"
ACHIEVEMENT_CLOSER = "closer"
ACHIEVEMENT_SALES_CHAMPION = "sales_champion"
ACHIEVEMENT_CONSISTENCY_CHAMP = "consistency_champ"

ACHIEVEMENT_KIND_STREAK = "streak"
ACHIEVEMENT_KIND_SALES_DAYS = "sales_days"
ACHIEVEMENT_KIND_CHECKINS = "checkins"

ACHIEVEMENT_FIELD_NAME = "name"
ACHIEVEMENT_FIELD_DESCRIPTION = "description"
ACHIEVEMENT_FIELD_KIND = "kind"
ACHIEVEMENT_FIELD_THRESHOLD = "threshold"
ACHIEVEMENT_FIELD_POINTS = "points"

ACHIEVEMENTS: dict[str, dict] = {
    ACHIEVEMENT_HOT_STREAK: {
        ACHIEVEMENT_FIELD_NAME: "Hot Streak",
        ACHIEVEMENT_FIELD_DESCRIPTION: "3-day check-in streak",
        ACHIEVEMENT_FIELD_KIND: ACHIEVEMENT_KIND_STREAK,
        ACHIEVEMENT_FIELD_THRESHOLD: 3,
        ACHIEVEMENT_FIELD_POINTS: 50,
    },
    ACHIEVEMENT_WEEK_WARRIOR: {
        ACHIEVEMENT_FIELD_NAME: "Week Warrior",
        ACHIEVEMENT_FIELD_DESCRIPTION: "7-day check-in streak",
        ACHIEVEMENT_FIELD_KIND: ACHIEVEMENT_KIND_STREAK,
        ACHIEVEMENT_FIELD_THRESHOLD: 7,
        ACHIEVEMENT_FIELD_POINTS: 100,
    },
    ACHIEVEMENT_STREAK_HERO: {
        ACHIEVEMENT_FIELD_NAME: "Streak Hero",
        ACHIEVEMENT_FIELD_DESCRIPTION: "10-day check-in streak",
        ACHIEVEMENT_FIELD_KIND: ACHIEVEMENT_KIND_STREAK,
        ACHIEVEMENT_FIELD_THRESHOLD: 10,
        ACHIEVEMENT_FIELD_POINTS: 200,
    },
    ACHIEVEMENT_STREAK_LEGEND: {
        ACHIEVEMENT_FIELD_NAME: "Streak Legend",
        ACHIEVEMENT_FIELD_DESCRIPTION: "30-day check-in streak",
        ACHIEVEMENT_FIELD_KIND: ACHIEVEMENT_KIND_STREAK,
        ACHIEVEMENT_FIELD_THRESHOLD: 30,
        ACHIEVEMENT_FIELD_POINTS: 500,
    },
    ACHIEVEMENT_CLOSER: {
        ACHIEVEMENT_FIELD_NAME: "Closer",
        ACHIEVEMENT_FIELD_DESCRIPTION: "Logged sales on 5 days",
        ACHIEVEMENT_FIELD_KIND: ACHIEVEMENT_KIND_SALES_DAYS,
        ACHIEVEMENT_FIELD_THRESHOLD: 5,
        ACHIEVEMENT_FIELD_POINTS: 150,
    },
    ACHIEVEMENT_SALES_CHAMPION: {
        ACHIEVEMENT_FIELD_NAME: "Sales Champion",
        ACHIEVEMENT_FIELD_DESCRIPTION: "Logged sales on 10 days",
        ACHIEVEMENT_FIELD_KIND: ACHIEVEMENT_KIND_SALES_DAYS,
        ACHIEVEMENT_FIELD_THRESHOLD: 10,
        ACHIEVEMENT_FIELD_POINTS: 300,
    },
    ACHIEVEMENT_CONSISTENCY_CHAMP: {
        ACHIEVEMENT_FIELD_NAME: "Consistency Champion",
        ACHIEVEMENT_FIELD_DESCRIPTION: "Completed 30 daily check-ins",
        ACHIEVEMENT_FIELD_KIND: ACHIEVEMENT_KIND_CHECKINS,
        ACHIEVEMENT_FIELD_THRESHOLD: 30,
        ACHIEVEMENT_FIELD_POINTS: 250,
    },
}

# Streak milestones: days -> xp value (informational, shown on the streak sensor)
STREAK_MILESTONES = {
    3: 100,
    7: 250,
    14: 500,
    21: 750,
    30: 1000,
    60: 2000,
    90: 3000,
    180: 5000,
    365: 10000,
}

# ------------------------------------------------------------------------------------------------
# Team Goals
# ------------------------------------------------------------------------------------------------
DATA_GOAL_ID = "goal_id"
DATA_GOAL_TEAM_ID = "team_id"
DATA_GOAL_TITLE = "title"
DATA_GOAL_DESCRIPTION = "description"
DATA_GOAL_TYPE = "goal_type"
DATA_GOAL_TARGET_VALUE = "target_value"
DATA_GOAL_CURRENT_VALUE = "current_value"
DATA_GOAL_START_DATE = "start_date"
DATA_GOAL_END_DATE = "end_date"
DATA_GOAL_DISTRIBUTION_TYPE = "distribution_type"
DATA_GOAL_CUSTOM_DISTRIBUTION = "custom_distribution"
DATA_GOAL_INCLUDED_MEMBERS = "included_members"
DATA_GOAL_EXCLUDED_MEMBERS = "excluded_members"
DATA_GOAL_LEADER_PARTICIPATES = "leader_participates"
DATA_GOAL_MINIMUM_PER_MEMBER = "minimum_per_member"
DATA_GOAL_STATUS = "status"
DATA_GOAL_CREATED_BY = "created_by"
DATA_GOAL_CREATED_AT = "created_at"
DATA_GOAL_UPDATED_AT = "updated_at"
DATA_GOAL_COMPLETED_AT = "completed_at"

GOAL_TYPE_SALES = "sales"
GOAL_TYPE_QUOTES = "quotes"
GOAL_TYPE_REVENUE = "revenue"
GOAL_TYPE_CUSTOM = "custom"
GOAL_TYPES = (GOAL_TYPE_SALES, GOAL_TYPE_QUOTES, GOAL_TYPE_REVENUE, GOAL_TYPE_CUSTOM)

DISTRIBUTION_EQUAL = "equal"
DISTRIBUTION_CUSTOM = "custom"
DISTRIBUTION_TYPES = (DISTRIBUTION_EQUAL, DISTRIBUTION_CUSTOM)

GOAL_STATUS_ACTIVE = "active"
GOAL_STATUS_PAUSED = "paused"
GOAL_STATUS_COMPLETED = "completed"
GOAL_STATUSES = (GOAL_STATUS_ACTIVE, GOAL_STATUS_PAUSED, GOAL_STATUS_COMPLETED)
GOAL_STATUSES_VISIBLE = [GOAL_STATUS_ACTIVE, GOAL_STATUS_PAUSED]

DATA_MEMBER_GOAL_ID = "member_goal_id"
DATA_MEMBER_GOAL_GOAL_ID = "goal_id"
DATA_MEMBER_GOAL_MEMBER_ID = "member_id"
DATA_MEMBER_GOAL_MINIMUM_TARGET = "minimum_target"
DATA_MEMBER_GOAL_PERSONAL_TARGET = "personal_target"
DATA_MEMBER_GOAL_CURRENT_VALUE = "current_value"
DATA_MEMBER_GOAL_PROGRESS_PERCENTAGE = "progress_percentage"
DATA_MEMBER_GOAL_CONTRIBUTION_PERCENTAGE = "contribution_percentage"
DATA_MEMBER_GOAL_STATUS = "status"
DATA_MEMBER_GOAL_IS_INCLUDED = "is_included"
DATA_MEMBER_GOAL_COMPLETED_AT = "completed_at"
DATA_MEMBER_GOAL_EXCLUDED_AT = "excluded_at"
DATA_MEMBER_GOAL_UPDATED_AT = "updated_at"

MEMBER_GOAL_STATUS_ACTIVE = "active"
MEMBER_GOAL_STATUS_COMPLETED = "completed"
MEMBER_GOAL_STATUS_EXCLUDED = "excluded"

DATA_PROGRESS_ID = "progress_id"
DATA_PROGRESS_GOAL_ID = "goal_id"
DATA_PROGRESS_MEMBER_ID = "member_id"
DATA_PROGRESS_DATE = "date"
DATA_PROGRESS_DAILY_VALUE = "daily_value"
DATA_PROGRESS_CUMULATIVE_VALUE = "cumulative_value"
DATA_PROGRESS_PERCENTAGE_COMPLETE = "percentage_complete"
DATA_PROGRESS_SOURCE = "source"
DATA_PROGRESS_RECORDED_AT = "recorded_at"

PROGRESS_SOURCE_MANUAL = "manual"

# Performance ratings (progress minus expected progress, in percentage points)
RATING_EXCEEDING = "exceeding"
RATING_ON_TRACK = "on_track"
RATING_BEHIND = "behind"
RATING_AT_RISK = "at_risk"
RATING_THRESHOLD_EXCEEDING = 10
RATING_THRESHOLD_ON_TRACK = -5
RATING_THRESHOLD_BEHIND = -15

# Projected total must reach this share of the target to count as achievable
GOAL_ACHIEVABLE_RATIO = 0.9

# Projection views
VIEW_FULL = "full"
VIEW_SUMMARY = "summary"

# ------------------------------------------------------------------------------------------------
# Seasons and Ranks
# ------------------------------------------------------------------------------------------------
DATA_SEASON_ID = "season_id"
DATA_SEASON_NUMBER = "season_number"
DATA_SEASON_NAME = "name"
DATA_SEASON_START_DATE = "start_date"
DATA_SEASON_END_DATE = "end_date"
DATA_SEASON_STATUS = "status"
DATA_SEASON_ENDED_AT = "ended_at"

SEASON_STATUS_ACTIVE = "active"
SEASON_STATUS_ENDED = "ended"

DATA_USER_SEASON_MEMBER_ID = "member_id"
DATA_USER_SEASON_SEASON_ID = "season_id"
DATA_USER_SEASON_POINTS = "season_points"
DATA_USER_SEASON_STARTING_BONUS = "starting_bonus"
DATA_USER_SEASON_PLACEMENT_RANK = "placement_rank"
DATA_USER_SEASON_PLACEMENT_DIVISION = "placement_division"
DATA_USER_SEASON_PLACEMENT_SR = "placement_sr"
DATA_USER_SEASON_CURRENT_SR = "current_sr"
DATA_USER_SEASON_CURRENT_RANK = "current_rank"
DATA_USER_SEASON_CURRENT_DIVISION = "current_division"
DATA_USER_SEASON_PEAK_RANK = "peak_rank"
DATA_USER_SEASON_INTENTIONS_COMPLETED = "intentions_completed"
DATA_USER_SEASON_WRAPS_COMPLETED = "wraps_completed"

RANK_BRONZE = "bronze"
RANK_SILVER = "silver"
RANK_GOLD = "gold"
RANK_PLATINUM = "platinum"
RANK_DIAMOND = "diamond"
RANK_MASTER = "master"
RANK_GRANDMASTER = "grandmaster"

RANK_FIELD_NAME = "name"
RANK_FIELD_TIER = "tier"
RANK_FIELD_SR_MIN = "sr_min"
RANK_FIELD_SR_MAX = "sr_max"
RANK_FIELD_STARTING_BONUS = "starting_bonus"
RANK_FIELD_KEEP_DIVISIONS = "keep_divisions"

RANK_DIVISIONS = 5
SR_MAX = 5000

# Ordered lowest to highest tier
RANKS: dict[str, dict] = {
    RANK_BRONZE: {
        RANK_FIELD_NAME: "Bronze",
        RANK_FIELD_TIER: 1,
        RANK_FIELD_SR_MIN: 0,
        RANK_FIELD_SR_MAX: 1499,
        RANK_FIELD_STARTING_BONUS: 0,
        RANK_FIELD_KEEP_DIVISIONS: 0,
    },
    RANK_SILVER: {
        RANK_FIELD_NAME: "Silver",
        RANK_FIELD_TIER: 2,
        RANK_FIELD_SR_MIN: 1500,
        RANK_FIELD_SR_MAX: 1999,
        RANK_FIELD_STARTING_BONUS: 50,
        RANK_FIELD_KEEP_DIVISIONS: 2,
    },
    RANK_GOLD: {
        RANK_FIELD_NAME: "Gold",
        RANK_FIELD_TIER: 3,
        RANK_FIELD_SR_MIN: 2000,
        RANK_FIELD_SR_MAX: 2499,
        RANK_FIELD_STARTING_BONUS: 100,
        RANK_FIELD_KEEP_DIVISIONS: 2,
    },
    RANK_PLATINUM: {
        RANK_FIELD_NAME: "Platinum",
        RANK_FIELD_TIER: 4,
        RANK_FIELD_SR_MIN: 2500,
        RANK_FIELD_SR_MAX: 2999,
        RANK_FIELD_STARTING_BONUS: 200,
        RANK_FIELD_KEEP_DIVISIONS: 2,
    },
    RANK_DIAMOND: {
        RANK_FIELD_NAME: "Diamond",
        RANK_FIELD_TIER: 5,
        RANK_FIELD_SR_MIN: 3000,
        RANK_FIELD_SR_MAX: 3499,
        RANK_FIELD_STARTING_BONUS: 300,
        RANK_FIELD_KEEP_DIVISIONS: 1,
    },
    RANK_MASTER: {
        RANK_FIELD_NAME: "Master",
        RANK_FIELD_TIER: 6,
        RANK_FIELD_SR_MIN: 3500,
        RANK_FIELD_SR_MAX: 3999,
        RANK_FIELD_STARTING_BONUS: 500,
        RANK_FIELD_KEEP_DIVISIONS: 1,
    },
    RANK_GRANDMASTER: {
        RANK_FIELD_NAME: "Grandmaster",
        RANK_FIELD_TIER: 7,
        RANK_FIELD_SR_MIN: 4000,
        RANK_FIELD_SR_MAX: 5000,
        RANK_FIELD_STARTING_BONUS: 750,
        RANK_FIELD_KEEP_DIVISIONS: 0,
    },
}

# Season points -> SR curve: (points upper bound, sr base, points base, slope)
SR_CURVE = (
    (100, 0, 0, 15.0),
    (300, 1500, 100, 2.5),
    (600, 2000, 300, 1.67),
    (1000, 2500, 600, 1.25),
    (1500, 3000, 1000, 1.0),
    (2500, 3500, 1500, 0.5),
)
SR_CURVE_TAIL = (4000, 2500, 0.4)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# ------------------------------------------------------------------------------------------------
# Event Signals (instance-scoped dispatcher suffixes)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_POINTS_AWARDED = "points_awarded"
SIGNAL_SUFFIX_STREAK_UPDATED = "streak_updated"
SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
SIGNAL_SUFFIX_CHECKIN_SAVED = "checkin_saved"
SIGNAL_SUFFIX_MEMBER_REGISTERED = "member_registered"
SIGNAL_SUFFIX_TEAM_GOAL_UPDATED = "team_goal_updated"
SIGNAL_SUFFIX_MEMBER_GOAL_COMPLETED = "member_goal_completed"
SIGNAL_SUFFIX_SEASON_STARTED = "season_started"
SIGNAL_SUFFIX_SEASON_UPDATED = "season_updated"

# Bus events for automations
EVENT_ACHIEVEMENT_UNLOCKED = f"{DOMAIN}_achievement_unlocked"
EVENT_MEMBER_GOAL_COMPLETED = f"{DOMAIN}_member_goal_completed"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_REGISTER_MEMBER = "register_member"
SERVICE_CREATE_TEAM = "create_team"
SERVICE_SAVE_MORNING_INTENTIONS = "save_morning_intentions"
SERVICE_SAVE_EVENING_WRAP = "save_evening_wrap"
SERVICE_AWARD_DAILY_ACTIVITY_POINTS = "award_daily_activity_points"
SERVICE_CALCULATE_STREAK = "calculate_streak"
SERVICE_CREATE_TEAM_GOAL = "create_team_goal"
SERVICE_UPDATE_MEMBER_INCLUSION = "update_member_inclusion"
SERVICE_UPDATE_PERSONAL_TARGET = "update_personal_target"
SERVICE_RECORD_PROGRESS = "record_progress"
SERVICE_UPDATE_TEAM_GOAL = "update_team_goal"
SERVICE_GET_TEAM_GOALS = "get_team_goals"
SERVICE_GET_GOAL_PROGRESS = "get_goal_progress"
SERVICE_GET_MEMBER_GOALS = "get_member_goals"
SERVICE_GET_SEASON_LEADERBOARD = "get_season_leaderboard"
SERVICE_END_SEASON = "end_season"

# Service fields
FIELD_MEMBER_ID = "member_id"
FIELD_USER_ID = "user_id"
FIELD_NAME = "name"
FIELD_TEAM_ID = "team_id"
FIELD_HA_USER_ID = "ha_user_id"
FIELD_LEADER_ID = "leader_id"
FIELD_CO_LEADERS = "co_leaders"
FIELD_MEMBERS = "members"
FIELD_ACTIVITY = "activity"
FIELD_VICTORY = "victory"
FIELD_FOCUS = "focus"
FIELD_STUCK = "stuck"
FIELD_ACCOMPLISHED = "accomplished"
FIELD_TOMORROW = "tomorrow"
FIELD_SALES = "sales"
FIELD_QUOTES = "quotes"
FIELD_GOAL_ID = "goal_id"
FIELD_MEMBER_GOAL_ID = "member_goal_id"
FIELD_TITLE = "title"
FIELD_DESCRIPTION = "description"
FIELD_GOAL_TYPE = "goal_type"
FIELD_TARGET_VALUE = "target_value"
FIELD_START_DATE = "start_date"
FIELD_END_DATE = "end_date"
FIELD_DISTRIBUTION_TYPE = "distribution_type"
FIELD_CUSTOM_DISTRIBUTION = "custom_distribution"
FIELD_INCLUDED_MEMBERS = "included_members"
FIELD_LEADER_PARTICIPATES = "leader_participates"
FIELD_PERSONAL_TARGET = "personal_target"
FIELD_VALUE = "value"
FIELD_DATE = "date"
FIELD_STATUS = "status"
FIELD_SEASON_ID = "season_id"
FIELD_LIMIT = "limit"

DEFAULT_LEADERBOARD_LIMIT = 10

# ------------------------------------------------------------------------------------------------
# Sensor Attributes
# ------------------------------------------------------------------------------------------------
ATTR_MEMBER_ID = "member_id"
ATTR_MEMBER_NAME = "member_name"
ATTR_TODAY_POINTS = "today_points"
ATTR_LIFETIME_POINTS = "lifetime_points"
ATTR_XP = "xp"
ATTR_LEVEL = "level"
ATTR_ACHIEVEMENTS = "achievements"
ATTR_NEXT_MILESTONE = "next_milestone"
ATTR_MILESTONE_PROGRESS = "milestone_progress"
ATTR_LAST_ACTIVITY_DATE = "last_activity_date"
ATTR_SR = "skill_rating"
ATTR_RANK = "rank"
ATTR_DIVISION = "division"
ATTR_DIVISION_PROGRESS = "division_progress"
ATTR_SR_TO_NEXT_DIVISION = "sr_to_next_division"
ATTR_SEASON_ID = "season_id"

SENSOR_KEY_POINTS = "points"
SENSOR_KEY_STREAK = "streak"
SENSOR_KEY_RANK = "rank"

TRANS_KEY_SENSOR_MEMBER_POINTS = "member_points"
TRANS_KEY_SENSOR_MEMBER_STREAK = "member_streak"
TRANS_KEY_SENSOR_MEMBER_RANK = "member_rank"
TRANS_KEY_ATTR_MEMBER_NAME = "member_name"

# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
MSG_NO_ENTRY_FOUND = "No SalesQuest entry found"

ERROR_MEMBER_NOT_FOUND_FMT = "Member '{}' not found"
ERROR_TEAM_NOT_FOUND_FMT = "Team '{}' not found"
ERROR_GOAL_NOT_FOUND_FMT = "Team goal '{}' not found"
ERROR_MEMBER_GOAL_NOT_FOUND_FMT = "Member goal '{}' not found"
ERROR_SEASON_NOT_FOUND_FMT = "Season '{}' not found"
ERROR_MEMBER_EXISTS_FMT = "Member '{}' already exists"
ERROR_INVALID_ACTIVITY_FMT = "Invalid activity type '{}'"
ERROR_NOT_TEAM_LEADER = "Only the team leader or a co-leader can manage team goals"
ERROR_NOT_GOAL_OWNER = "Members can only change their own personal target"
ERROR_NOT_AUTHORIZED_FOR_MEMBER = "Not authorized to act for member '{}'"
ERROR_NO_LINKED_MEMBER = "No member is linked to the calling user"
ERROR_TARGET_BELOW_MINIMUM_FMT = "Personal target {} is below the minimum of {}"
ERROR_TARGET_NOT_POSITIVE = "Target value must be greater than zero"
ERROR_PROGRESS_NOT_POSITIVE = "Progress value must be greater than zero"
ERROR_NEGATIVE_COUNT_FMT = "'{}' cannot be negative"
ERROR_NO_PARTICIPANTS = "A team goal needs at least one participant"
ERROR_NOT_TEAM_MEMBER_FMT = "Member '{}' is not on team '{}'"
ERROR_NOT_PARTICIPANT_FMT = "Member '{}' is not participating in goal '{}'"
ERROR_GOAL_EXCLUDED = "This member goal is excluded"
ERROR_GOAL_NOT_ACTIVE_FMT = "Team goal '{}' is not active"
ERROR_INVALID_DATE_RANGE = "End date must not be before start date"
ERROR_INVALID_STATUS_TRANSITION_FMT = "Cannot change goal status from '{}' to '{}'"
ERROR_CUSTOM_DISTRIBUTION_MISSING_FMT = "Custom distribution is missing member '{}'"
ERROR_STORE_WRITE_FAILED = "Failed to persist SalesQuest data"
ERROR_NON_NUMERIC_FIELD_FMT = "Field '{}' on {}/{} is not numeric"
ERROR_UNKNOWN_COLLECTION_FMT = "Unknown collection '{}'"
ERROR_UNKNOWN_QUERY_OP_FMT = "Unknown query operator '{}'"
