# File: flow_helpers.py
"""Schema builders and validators shared by the config and options flows."""

from typing import Any, Optional

import voluptuous as vol
from homeassistant.helpers import selector

from . import const
from .utils import dt_utils


def build_general_options_schema(default: Optional[dict] = None) -> vol.Schema:
    """Build schema for the calendar, refresh and retry options."""
    default = default or {}

    return vol.Schema(
        {
            vol.Required(
                const.CONF_OBSERVE_FEDERAL_HOLIDAYS,
                default=default.get(
                    const.CONF_OBSERVE_FEDERAL_HOLIDAYS,
                    const.DEFAULT_OBSERVE_FEDERAL_HOLIDAYS,
                ),
            ): selector.BooleanSelector(),
            vol.Optional(
                const.CONF_EXTRA_HOLIDAYS,
                default=default.get(
                    const.CONF_EXTRA_HOLIDAYS, const.DEFAULT_EXTRA_HOLIDAYS
                ),
            ): selector.TextSelector(selector.TextSelectorConfig(multiline=False)),
            vol.Required(
                const.CONF_UPDATE_INTERVAL,
                default=default.get(
                    const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
                ),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=const.MIN_UPDATE_INTERVAL,
                    max=const.MAX_UPDATE_INTERVAL,
                    step=1,
                )
            ),
            vol.Required(
                const.CONF_RETRY_ATTEMPTS,
                default=default.get(
                    const.CONF_RETRY_ATTEMPTS, const.DEFAULT_RETRY_ATTEMPTS
                ),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=const.MIN_RETRY_ATTEMPTS,
                    max=const.MAX_RETRY_ATTEMPTS,
                    step=1,
                )
            ),
        }
    )


def validate_general_options(user_input: dict[str, Any]) -> dict[str, str]:
    """Return form errors; every comma-separated holiday must parse as a date."""
    errors: dict[str, str] = {}
    raw = user_input.get(const.CONF_EXTRA_HOLIDAYS) or ""
    for item in raw.split(","):
        if item.strip() and dt_utils.dt_parse_date(item) is None:
            errors[const.CONF_EXTRA_HOLIDAYS] = const.CFOP_ERROR_INVALID_HOLIDAYS
            break
    return errors


def build_general_options_data(user_input: dict[str, Any]) -> dict[str, Any]:
    """Normalize form input into stored options (number selectors yield floats)."""
    holidays = sorted(
        day.isoformat()
        for day in dt_utils.parse_date_list(
            user_input.get(const.CONF_EXTRA_HOLIDAYS) or ""
        )
    )
    return {
        const.CONF_OBSERVE_FEDERAL_HOLIDAYS: bool(
            user_input.get(
                const.CONF_OBSERVE_FEDERAL_HOLIDAYS,
                const.DEFAULT_OBSERVE_FEDERAL_HOLIDAYS,
            )
        ),
        const.CONF_EXTRA_HOLIDAYS: ", ".join(holidays),
        const.CONF_UPDATE_INTERVAL: int(
            user_input.get(const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL)
        ),
        const.CONF_RETRY_ATTEMPTS: int(
            user_input.get(const.CONF_RETRY_ATTEMPTS, const.DEFAULT_RETRY_ATTEMPTS)
        ),
    }
