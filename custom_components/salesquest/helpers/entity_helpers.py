# File: helpers/entity_helpers.py
"""Identifier and signal helpers for SalesQuest.

Builds the document keys, unique IDs and dispatcher signal names shared by
managers, sensors and services.
"""

from __future__ import annotations

import uuid

from .. import const


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'salesquest_{entry_id}_{suffix}'

    Example:
        get_event_signal("abc123", "points_awarded") → "salesquest_abc123_points_awarded"
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


def checkin_doc_id(member_id: str, iso_date: str) -> str:
    """Return the check-in key for a member and day ("{member_id}_{YYYY-MM-DD}")."""
    return f"{member_id}_{iso_date}"


def member_goal_doc_id(goal_id: str, member_id: str) -> str:
    """Return the member goal key for a team goal and member."""
    return f"{goal_id}_{member_id}"


def user_season_doc_id(member_id: str, season_id: str) -> str:
    """Return the user-season key for a member and season."""
    return f"{member_id}_{season_id}"


def new_internal_id() -> str:
    """Return a new random internal identifier."""
    return str(uuid.uuid4())


def build_unique_id(entry_id: str, member_id: str, sensor_key: str) -> str:
    """Return the entity unique_id for a member sensor."""
    return f"{entry_id}_{member_id}_{sensor_key}"
