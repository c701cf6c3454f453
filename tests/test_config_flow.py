"""Tests for SalesQuest config flow."""

from datetime import date
from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.salesquest.const import (
    CFOP_ABORT_SINGLE_INSTANCE,
    CFOP_ERROR_INVALID_HOLIDAYS,
    CONF_EXTRA_HOLIDAYS,
    CONF_OBSERVE_FEDERAL_HOLIDAYS,
    CONF_RETRY_ATTEMPTS,
    CONF_UPDATE_INTERVAL,
    DOMAIN,
    SALESQUEST_TITLE,
)


async def test_form_user_flow_success(hass: HomeAssistant) -> None:
    """Test successful user config flow."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "user"

    with patch(
        "custom_components.salesquest.async_setup_entry",
        return_value=True,
    ) as mock_setup_entry:
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={
                CONF_OBSERVE_FEDERAL_HOLIDAYS: True,
                CONF_EXTRA_HOLIDAYS: "2025-12-26, 12/24/2025",
                CONF_UPDATE_INTERVAL: 10.0,
                CONF_RETRY_ATTEMPTS: 4.0,
            },
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("title") == SALESQUEST_TITLE
    assert result.get("data") == {}
    # Holidays normalized to sorted ISO dates; number selectors cast to int
    assert result.get("options") == {
        CONF_OBSERVE_FEDERAL_HOLIDAYS: True,
        CONF_EXTRA_HOLIDAYS: "2025-12-24, 2025-12-26",
        CONF_UPDATE_INTERVAL: 10,
        CONF_RETRY_ATTEMPTS: 4,
    }
    assert len(mock_setup_entry.mock_calls) == 1


async def test_form_invalid_holidays(hass: HomeAssistant) -> None:
    """Unparseable holiday dates keep the form open with an error."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    result = await hass.config_entries.flow.async_configure(
        result.get("flow_id"),
        user_input={
            CONF_OBSERVE_FEDERAL_HOLIDAYS: False,
            CONF_EXTRA_HOLIDAYS: "2025-12-26, someday",
            CONF_UPDATE_INTERVAL: 5,
            CONF_RETRY_ATTEMPTS: 3,
        },
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {CONF_EXTRA_HOLIDAYS: CFOP_ERROR_INVALID_HOLIDAYS}


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """A second entry is refused."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == CFOP_ABORT_SINGLE_INSTANCE


async def test_entry_setup_applies_calendar(hass: HomeAssistant) -> None:
    """Options from the flow reach the coordinator's business calendar."""
    entry = MockConfigEntry(
        domain=DOMAIN,
        title=SALESQUEST_TITLE,
        data={},
        options={
            CONF_OBSERVE_FEDERAL_HOLIDAYS: False,
            CONF_EXTRA_HOLIDAYS: "2025-10-17",
            CONF_UPDATE_INTERVAL: 5,
            CONF_RETRY_ATTEMPTS: 2,
        },
    )
    entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()

    coordinator = entry.runtime_data
    assert coordinator.retry_attempts == 2
    # Columbus Day is a business day without federal holidays
    assert coordinator.calendar.is_business_day(date(2025, 10, 13))
    assert not coordinator.calendar.is_business_day(date(2025, 10, 17))
