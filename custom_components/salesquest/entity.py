"""Base entity classes for SalesQuest integration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import SalesQuestCoordinator
from .helpers.device_helpers import create_member_device_info
from .helpers.entity_helpers import build_unique_id

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


class SalesQuestCoordinatorEntity(CoordinatorEntity[SalesQuestCoordinator]):
    """Base entity class for SalesQuest sensors with typed coordinator access."""

    @property
    def coordinator(self) -> SalesQuestCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: SalesQuestCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)


class SalesQuestMemberEntity(SalesQuestCoordinatorEntity):
    """Entity bound to one member, grouped under that member's device."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: SalesQuestCoordinator,
        entry: ConfigEntry,
        member_id: str,
        member_name: str,
        sensor_key: str,
    ) -> None:
        """Initialize the member entity.

        Args:
            coordinator: SalesQuestCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            member_id: Internal id of the member.
            member_name: Display name of the member.
            sensor_key: const.SENSOR_KEY_* used in the unique id.
        """
        super().__init__(coordinator)
        self._member_id = member_id
        self._member_name = member_name
        self._attr_unique_id = build_unique_id(entry.entry_id, member_id, sensor_key)
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_MEMBER_NAME: member_name,
        }
        self._attr_device_info = create_member_device_info(
            member_id, member_name, entry
        )

    @property
    def member_info(self) -> dict[str, Any]:
        """Return the member document from the coordinator."""
        return self.coordinator.members_data.get(self._member_id, {})

    @property
    def available(self) -> bool:
        """Available while the member exists."""
        return super().available and self._member_id in self.coordinator.members_data
