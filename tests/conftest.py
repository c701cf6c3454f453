"""Shared fixtures for SalesQuest tests."""

from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.salesquest.const import (
    CONF_EXTRA_HOLIDAYS,
    CONF_OBSERVE_FEDERAL_HOLIDAYS,
    CONF_RETRY_ATTEMPTS,
    CONF_UPDATE_INTERVAL,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_UPDATE_INTERVAL,
    DOMAIN,
    SALESQUEST_TITLE,
)
from custom_components.salesquest.coordinator import SalesQuestCoordinator

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
async def mock_hass_users(hass: HomeAssistant) -> dict[str, Any]:
    """Create mock Home Assistant users for testing."""
    admin_user = await hass.auth.async_create_user(
        "Admin User",
        group_ids=["system-admin"],
    )
    leader_user = await hass.auth.async_create_user(
        "Team Leader",
        group_ids=["system-users"],
    )
    member1_user = await hass.auth.async_create_user(
        "Member One",
        group_ids=["system-users"],
    )
    member2_user = await hass.auth.async_create_user(
        "Member Two",
        group_ids=["system-users"],
    )
    member3_user = await hass.auth.async_create_user(
        "Member Three",
        group_ids=["system-users"],
    )
    member4_user = await hass.auth.async_create_user(
        "Member Four",
        group_ids=["system-users"],
    )

    return {
        "admin": admin_user,
        "leader": leader_user,
        "member1": member1_user,
        "member2": member2_user,
        "member3": member3_user,
        "member4": member4_user,
    }


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=SALESQUEST_TITLE,
        data={},
        options={
            CONF_OBSERVE_FEDERAL_HOLIDAYS: True,
            CONF_EXTRA_HOLIDAYS: "",
            CONF_UPDATE_INTERVAL: DEFAULT_UPDATE_INTERVAL,
            CONF_RETRY_ATTEMPTS: DEFAULT_RETRY_ATTEMPTS,
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the integration with an empty store."""
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()
    return mock_config_entry


@pytest.fixture
def coordinator(
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> SalesQuestCoordinator:
    """Return the coordinator of the set-up entry (no retry delay)."""
    coord: SalesQuestCoordinator = init_integration.runtime_data
    coord.retry_initial_delay = 0
    return coord
