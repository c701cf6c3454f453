# File: sensor.py
"""Sensors for the SalesQuest integration.

Sensors Defined in This File (3 per member):
01. MemberPointsSensor - season points; today/lifetime/xp/level attributes
02. MemberStreakSensor - business-day streak; achievements and milestone attributes
03. MemberRankSensor - season rank and division; SR attributes

Members registered after setup get their sensors through the
member_registered signal without a reload.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import SalesQuestCoordinator
from .engines.season_engine import SeasonEngine
from .engines.streak_engine import StreakEngine
from .entity import SalesQuestMemberEntity
from .helpers.entity_helpers import get_event_signal


def _member_sensors(
    coordinator: SalesQuestCoordinator,
    entry: ConfigEntry,
    member_id: str,
    member_name: str,
) -> list[SensorEntity]:
    return [
        MemberPointsSensor(coordinator, entry, member_id, member_name),
        MemberStreakSensor(coordinator, entry, member_id, member_name),
        MemberRankSensor(coordinator, entry, member_id, member_name),
    ]


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for SalesQuest integration."""
    coordinator: SalesQuestCoordinator = entry.runtime_data

    entities: list[SensorEntity] = []
    for member_id, member_info in coordinator.members_data.items():
        member_name = member_info.get(const.DATA_MEMBER_NAME)
        if not member_name:
            const.LOGGER.error(
                "ERROR: Member %s has no name, skipping sensors", member_id
            )
            continue
        entities.extend(_member_sensors(coordinator, entry, member_id, member_name))

    async_add_entities(entities)

    @callback
    def _async_member_registered(payload: dict[str, Any]) -> None:
        const.LOGGER.debug(
            "DEBUG: Adding sensors for new member %s", payload["member_id"]
        )
        async_add_entities(
            _member_sensors(coordinator, entry, payload["member_id"], payload["name"])
        )

    entry.async_on_unload(
        async_dispatcher_connect(
            hass,
            get_event_signal(entry.entry_id, const.SIGNAL_SUFFIX_MEMBER_REGISTERED),
            _async_member_registered,
        )
    )


class MemberPointsSensor(SalesQuestMemberEntity, SensorEntity):
    """Sensor for a member's season points.

    Uses MEASUREMENT state class for graphing; today's points, lifetime points,
    XP and level are exposed as attributes.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_MEMBER_POINTS
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = "mdi:star-circle"

    def __init__(
        self,
        coordinator: SalesQuestCoordinator,
        entry: ConfigEntry,
        member_id: str,
        member_name: str,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(
            coordinator, entry, member_id, member_name, const.SENSOR_KEY_POINTS
        )

    @property
    def native_value(self) -> int:
        """Return the member's season points."""
        return self.member_info.get(const.DATA_MEMBER_SEASON_POINTS, 0)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose point counters and level."""
        info = self.member_info
        return {
            const.ATTR_MEMBER_ID: self._member_id,
            const.ATTR_MEMBER_NAME: self._member_name,
            const.ATTR_TODAY_POINTS: info.get(const.DATA_MEMBER_TODAY_POINTS, 0),
            const.ATTR_LIFETIME_POINTS: info.get(const.DATA_MEMBER_LIFETIME_POINTS, 0),
            const.ATTR_XP: info.get(const.DATA_MEMBER_XP, 0),
            const.ATTR_LEVEL: info.get(const.DATA_MEMBER_LEVEL, 1),
        }


class MemberStreakSensor(SalesQuestMemberEntity, SensorEntity):
    """Sensor for a member's business-day check-in streak."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_MEMBER_STREAK
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = "days"

    def __init__(
        self,
        coordinator: SalesQuestCoordinator,
        entry: ConfigEntry,
        member_id: str,
        member_name: str,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(
            coordinator, entry, member_id, member_name, const.SENSOR_KEY_STREAK
        )

    @property
    def native_value(self) -> int:
        """Return the current streak."""
        return self.member_info.get(const.DATA_MEMBER_STREAK, 0)

    @property
    def icon(self) -> str:
        """Fire once a streak is going."""
        return "mdi:fire" if self.native_value > 0 else "mdi:fire-off"

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose achievements and milestone progress."""
        milestone = StreakEngine.milestone_progress(self.native_value)
        return {
            const.ATTR_MEMBER_ID: self._member_id,
            const.ATTR_ACHIEVEMENTS: list(
                self.member_info.get(const.DATA_MEMBER_ACHIEVEMENTS, [])
            ),
            const.ATTR_NEXT_MILESTONE: milestone["next_milestone"],
            const.ATTR_MILESTONE_PROGRESS: milestone["progress"],
            const.ATTR_LAST_ACTIVITY_DATE: self.member_info.get(
                const.DATA_MEMBER_LAST_ACTIVITY_DATE
            ),
        }


class MemberRankSensor(SalesQuestMemberEntity, SensorEntity):
    """Sensor for a member's rank in the current season.

    State is "<Rank> <division>", e.g. "Gold 3". Members without a standing
    yet show their placement from last season's finish.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_MEMBER_RANK
    _attr_icon = "mdi:trophy"

    def __init__(
        self,
        coordinator: SalesQuestCoordinator,
        entry: ConfigEntry,
        member_id: str,
        member_name: str,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(
            coordinator, entry, member_id, member_name, const.SENSOR_KEY_RANK
        )

    def _standing(self) -> tuple[str | None, int, str, int]:
        """Return (season_id, sr, rank key, division)."""
        standing = self.coordinator.season_manager.get_member_standing(self._member_id)
        if standing is not None:
            return (
                standing[const.DATA_USER_SEASON_SEASON_ID],
                standing[const.DATA_USER_SEASON_CURRENT_SR],
                standing[const.DATA_USER_SEASON_CURRENT_RANK],
                standing[const.DATA_USER_SEASON_CURRENT_DIVISION],
            )
        placement = SeasonEngine.placement(
            self.member_info.get(const.DATA_MEMBER_LAST_SEASON_RANK),
            self.member_info.get(const.DATA_MEMBER_LAST_SEASON_DIVISION),
        )
        return None, placement["sr"], placement["rank"], placement["division"]

    @property
    def native_value(self) -> str:
        """Return rank name and division."""
        _, _, rank_key, division = self._standing()
        return f"{const.RANKS[rank_key][const.RANK_FIELD_NAME]} {division}"

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose SR and progress through the division."""
        season_id, sr, rank_key, division = self._standing()
        progress = SeasonEngine.progress_to_next_division(sr)
        return {
            const.ATTR_MEMBER_ID: self._member_id,
            const.ATTR_SEASON_ID: season_id,
            const.ATTR_SR: sr,
            const.ATTR_RANK: rank_key,
            const.ATTR_DIVISION: division,
            const.ATTR_DIVISION_PROGRESS: progress["progress"],
            const.ATTR_SR_TO_NEXT_DIVISION: progress["sr_needed"],
        }
