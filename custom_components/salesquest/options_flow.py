# File: options_flow.py
"""Options Flow for the SalesQuest integration.

Edits the business calendar, refresh interval and write retry count.
Saving reloads the entry through the update listener.
"""

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class SalesQuestOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for SalesQuest."""

    async def async_step_init(self, user_input=None):
        """Show and store the general options."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = fh.validate_general_options(user_input)
            if not errors:
                const.LOGGER.debug("DEBUG: Updating SalesQuest options: %s", user_input)
                return self.async_create_entry(
                    title="", data=fh.build_general_options_data(user_input)
                )

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=fh.build_general_options_schema(
                user_input or dict(self.config_entry.options)
            ),
            errors=errors,
        )
