# File: config_flow.py
"""Config flow for the SalesQuest integration.

A single instance holds the whole sales organization; members, teams and
goals are created through services rather than flow steps.
"""

from typing import Any, Optional

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import SalesQuestOptionsFlowHandler


class SalesQuestConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for SalesQuest."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Collect the business calendar and create the entry."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.CFOP_ABORT_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_general_options(user_input)
            if not errors:
                const.LOGGER.debug("DEBUG: Creating SalesQuest entry")
                return self.async_create_entry(
                    title=const.SALESQUEST_TITLE,
                    data={},
                    options=fh.build_general_options_data(user_input),
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=fh.build_general_options_schema(user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return SalesQuestOptionsFlowHandler()
