"""Test helpers for SalesQuest integration tests.

    from tests.helpers import (
        # Setup
        setup_scenario, setup_from_yaml, SetupResult,

        # Workflows
        complete_day, seed_checkins, member_doc,
    )

See individual modules for full documentation:
- setup.py: Config flow plus roster setup from dicts or YAML
- workflows.py: Check-in workflows and direct store seeding
"""

from tests.helpers.setup import SetupResult, setup_from_yaml, setup_scenario
from tests.helpers.workflows import complete_day, member_doc, seed_checkins

__all__ = [
    "SetupResult",
    "complete_day",
    "member_doc",
    "seed_checkins",
    "setup_from_yaml",
    "setup_scenario",
]
