# File: coordinator.py
"""Coordinator for the SalesQuest integration.

Owns the document store, the business-day calendar and the managers, and
runs the local-midnight rollover (clear today's points, turn over the
monthly season). Entities read member documents through this coordinator.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_change
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .exceptions import SalesQuestError
from .managers import (
    CheckInManager,
    PointsManager,
    RosterManager,
    SeasonManager,
    StreakManager,
    TeamGoalManager,
)
from .store import SalesQuestStore
from .utils import BusinessCalendar, dt_utils


class SalesQuestCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for SalesQuest integration."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: SalesQuestStore,
    ) -> None:
        """Initialize the SalesQuestCoordinator."""
        options = config_entry.options
        update_interval_minutes = options.get(
            const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
        )

        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}_coordinator",
            update_interval=timedelta(minutes=update_interval_minutes),
        )
        self.store = store
        self.calendar = BusinessCalendar(
            observe_federal_holidays=options.get(
                const.CONF_OBSERVE_FEDERAL_HOLIDAYS,
                const.DEFAULT_OBSERVE_FEDERAL_HOLIDAYS,
            ),
            extra_holidays=dt_utils.parse_date_list(
                options.get(const.CONF_EXTRA_HOLIDAYS, const.DEFAULT_EXTRA_HOLIDAYS)
            ),
        )
        self.retry_attempts: int = options.get(
            const.CONF_RETRY_ATTEMPTS, const.DEFAULT_RETRY_ATTEMPTS
        )
        self.retry_initial_delay: float = const.DEFAULT_RETRY_INITIAL_DELAY

        # Managers (roster first: the others look members up through it)
        self.roster_manager = RosterManager(hass, self)
        self.points_manager = PointsManager(hass, self)
        self.streak_manager = StreakManager(hass, self)
        self.checkin_manager = CheckInManager(hass, self)
        self.team_goal_manager = TeamGoalManager(hass, self)
        self.season_manager = SeasonManager(hass, self)

    @property
    def managers(self) -> tuple:
        """All managers in setup order."""
        return (
            self.roster_manager,
            self.points_manager,
            self.streak_manager,
            self.checkin_manager,
            self.team_goal_manager,
            self.season_manager,
        )

    @property
    def members_data(self) -> dict[str, Any]:
        """Member documents keyed by member id (read-only)."""
        return self.store.data.get(const.DATA_MEMBERS, {})

    # -------------------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update."""
        try:
            await self.season_manager.async_ensure_current_season()
        except SalesQuestError as err:
            raise UpdateFailed(f"Error updating SalesQuest data: {err}") from err
        return self.store.data

    async def async_config_entry_first_refresh(self) -> None:
        """Set up managers, schedule the rollover, then do the first refresh."""
        for manager in self.managers:
            await manager.async_setup()

        self.config_entry.async_on_unload(
            async_track_time_change(
                self.hass, self._async_daily_rollover, **const.DEFAULT_DAILY_ROLLOVER_TIME
            )
        )
        for suffix in (
            const.SIGNAL_SUFFIX_POINTS_AWARDED,
            const.SIGNAL_SUFFIX_STREAK_UPDATED,
            const.SIGNAL_SUFFIX_TEAM_GOAL_UPDATED,
            const.SIGNAL_SUFFIX_SEASON_STARTED,
            const.SIGNAL_SUFFIX_SEASON_UPDATED,
        ):
            self.roster_manager.listen(suffix, self._on_data_changed)

        await super().async_config_entry_first_refresh()

    @callback
    def _on_data_changed(self, _payload: dict[str, Any]) -> None:
        """Push the current document tree to entities."""
        self.async_set_updated_data(self.store.data)

    # -------------------------------------------------------------------------------------
    # Daily Rollover
    # -------------------------------------------------------------------------------------

    async def _async_daily_rollover(self, now: datetime) -> None:
        """Clear today's points and turn over the season on the first of the month."""
        today = dt_utils.dt_today_local()
        const.LOGGER.debug("DEBUG: SalesQuest daily rollover at %s (today=%s)", now, today)
        try:
            await self.points_manager.async_reset_today_points()
            await self.season_manager.async_ensure_current_season(today)
        except SalesQuestError as err:
            const.LOGGER.error("ERROR: SalesQuest daily rollover failed: %s", err)
            return
        self.async_set_updated_data(self.store.data)
