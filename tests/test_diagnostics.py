"""Tests for SalesQuest diagnostics module.

Config entry diagnostics return the raw document tree; device diagnostics
return one member's slice of it.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names

from datetime import date
from unittest.mock import MagicMock

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.device_registry import DeviceEntry

from custom_components.salesquest import const
from custom_components.salesquest.diagnostics import (
    async_get_config_entry_diagnostics,
    async_get_device_diagnostics,
)
from tests.helpers import SetupResult, complete_day, setup_from_yaml

MON = date(2025, 10, 20)


@pytest.fixture
async def scenario(hass: HomeAssistant, mock_hass_users) -> SetupResult:
    """Sales team with one completed day for Marco."""
    result = await setup_from_yaml(
        hass, mock_hass_users, "tests/scenarios/scenario_sales_team.yaml"
    )
    await complete_day(result.coordinator, result.member_ids["Marco"], MON, sales=2)
    await hass.async_block_till_done()
    return result


async def test_config_entry_diagnostics_returns_raw_storage(
    hass: HomeAssistant, scenario: SetupResult
) -> None:
    """Entry diagnostics are the stored document tree."""
    result = await async_get_config_entry_diagnostics(hass, scenario.config_entry)

    assert result is scenario.coordinator.store.data
    for collection in const.COLLECTIONS:
        assert collection in result
    assert len(result[const.DATA_MEMBERS]) == 5


async def test_device_diagnostics_returns_member_slice(
    hass: HomeAssistant, scenario: SetupResult
) -> None:
    """Device diagnostics carry the member's own documents only."""
    marco = scenario.member_ids["Marco"]
    device = dr.async_get(hass).async_get_device(identifiers={(const.DOMAIN, marco)})
    assert device is not None

    result = await async_get_device_diagnostics(hass, scenario.config_entry, device)

    assert result["member_id"] == marco
    assert result["member_data"][const.DATA_MEMBER_NAME] == "Marco"
    assert [c[const.DATA_CHECKIN_DATE] for c in result["checkins"]] == ["2025-10-20"]
    assert result["checkins"][0][const.DATA_CHECKIN_SALES] == 2
    assert len(result["user_seasons"]) == 1
    assert result["member_goals"] == []


async def test_device_diagnostics_missing_member_id(
    hass: HomeAssistant, scenario: SetupResult
) -> None:
    """A device without our identifier reports an error."""
    device = MagicMock(spec=DeviceEntry)
    device.identifiers = set()

    result = await async_get_device_diagnostics(hass, scenario.config_entry, device)

    assert "Could not determine member_id" in result["error"]


async def test_device_diagnostics_member_not_found(
    hass: HomeAssistant, scenario: SetupResult
) -> None:
    """A stale device reports an error."""
    device = MagicMock(spec=DeviceEntry)
    device.identifiers = {(const.DOMAIN, "nonexistent_member")}

    result = await async_get_device_diagnostics(hass, scenario.config_entry, device)

    assert "Member data not found" in result["error"]
