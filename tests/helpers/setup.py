"""Setup helpers for SalesQuest test configuration.

Creates the config entry through the real config flow, then builds the
roster (members and teams) through the roster manager, so tests can focus on
behavior rather than setup boilerplate.

Example:
    result = await setup_scenario(hass, mock_hass_users, {
        "members": [
            {"name": "Lena", "ha_user": "leader"},
            {"name": "Marco", "ha_user": "member1"},
        ],
        "teams": [{"name": "North", "leader": "Lena", "members": ["Marco"]}],
    })
    # Access: result.config_entry, result.coordinator, result.member_ids["Marco"]

YAML-based setup:
    result = await setup_from_yaml(
        hass,
        mock_hass_users,
        "tests/scenarios/scenario_sales_team.yaml",
    )
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from homeassistant import config_entries
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
import yaml

from custom_components.salesquest import const
from custom_components.salesquest.coordinator import SalesQuestCoordinator

# =============================================================================
# DATACLASSES
# =============================================================================


@dataclass
class SetupResult:
    """Result from setup_scenario.

    Attributes:
        config_entry: The created ConfigEntry
        coordinator: The SalesQuestCoordinator instance
        member_ids: Map of member names to their internal ids
        team_ids: Map of team names to their internal ids
    """

    config_entry: ConfigEntry
    coordinator: SalesQuestCoordinator
    member_ids: dict[str, str] = field(default_factory=dict)
    team_ids: dict[str, str] = field(default_factory=dict)


# =============================================================================
# SETUP
# =============================================================================


async def setup_scenario(
    hass: HomeAssistant,
    mock_hass_users: dict[str, Any],
    scenario: dict[str, Any],
) -> SetupResult:
    """Set up a complete SalesQuest scenario.

    Args:
        hass: Home Assistant instance
        mock_hass_users: Mock users dictionary from fixture
        scenario: Configuration dict with optional keys:
            - system: config flow options (observe_federal_holidays, extra_holidays)
            - members: [{"name": str, "ha_user": str | None}]
            - teams: [{"name": str, "leader": str, "co_leaders": [...], "members": [...]}]

    Returns:
        SetupResult with config_entry, coordinator, and ID mappings
    """
    system = scenario.get("system", {})

    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] == FlowResultType.FORM
    result = await hass.config_entries.flow.async_configure(
        result["flow_id"],
        user_input={
            const.CONF_OBSERVE_FEDERAL_HOLIDAYS: system.get(
                const.CONF_OBSERVE_FEDERAL_HOLIDAYS, True
            ),
            const.CONF_EXTRA_HOLIDAYS: system.get(const.CONF_EXTRA_HOLIDAYS, ""),
            const.CONF_UPDATE_INTERVAL: const.DEFAULT_UPDATE_INTERVAL,
            const.CONF_RETRY_ATTEMPTS: const.DEFAULT_RETRY_ATTEMPTS,
        },
    )
    assert result["type"] == FlowResultType.CREATE_ENTRY
    await hass.async_block_till_done()

    config_entry = result["result"]
    coordinator: SalesQuestCoordinator = config_entry.runtime_data
    coordinator.retry_initial_delay = 0
    roster = coordinator.roster_manager

    member_ids: dict[str, str] = {}
    for member in scenario.get("members", []):
        ha_user_key = member.get("ha_user")
        ha_user_id = mock_hass_users[ha_user_key].id if ha_user_key else None
        member_ids[member["name"]] = await roster.async_register_member(
            member["name"], ha_user_id=ha_user_id
        )

    team_ids: dict[str, str] = {}
    for team in scenario.get("teams", []):
        team_ids[team["name"]] = await roster.async_create_team(
            team["name"],
            member_ids[team["leader"]],
            co_leaders=[member_ids[name] for name in team.get("co_leaders", [])],
            members=[member_ids[name] for name in team.get("members", [])],
        )

    await hass.async_block_till_done()

    return SetupResult(
        config_entry=config_entry,
        coordinator=coordinator,
        member_ids=member_ids,
        team_ids=team_ids,
    )


async def setup_from_yaml(
    hass: HomeAssistant,
    mock_hass_users: dict[str, Any],
    yaml_path: str | Path,
) -> SetupResult:
    """Set up a SalesQuest scenario from a YAML file.

    YAML File Format:
        system:
          observe_federal_holidays: true
          extra_holidays: "2025-12-24"
        members:
          - name: "Lena"
            ha_user: "leader"  # Key in mock_hass_users fixture
        teams:
          - name: "North Region"
            leader: "Lena"
            co_leaders: []
            members: ["Marco", "Priya"]
    """
    path = Path(yaml_path)
    if not path.is_absolute():
        # Relative paths are resolved from the repository root
        path = Path(__file__).parent.parent.parent / path

    if not path.exists():
        raise FileNotFoundError(f"Scenario YAML not found: {path}")

    with open(path, encoding="utf-8") as f:
        scenario = yaml.safe_load(f)

    return await setup_scenario(hass, mock_hass_users, scenario)
