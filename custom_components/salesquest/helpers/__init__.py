# File: helpers/__init__.py
"""Home Assistant-bound helper functions for SalesQuest.

Submodules:
    - auth_helpers: Service actor resolution and authorization
    - device_helpers: DeviceInfo construction
    - entity_helpers: Document keys, unique IDs, dispatcher signals
    - retry_helpers: Exponential-backoff retry for store writes
"""

from . import auth_helpers, device_helpers, entity_helpers, retry_helpers

__all__ = [
    "auth_helpers",
    "device_helpers",
    "entity_helpers",
    "retry_helpers",
]
