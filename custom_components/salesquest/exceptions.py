# File: exceptions.py
"""Error taxonomy for the SalesQuest integration.

All errors derive from HomeAssistantError so they surface to service callers
with their message intact. Only TransientStoreError is retryable.
"""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError


class SalesQuestError(HomeAssistantError):
    """Base class for SalesQuest errors."""


class AuthorizationError(SalesQuestError):
    """Caller lacks the role or ownership required for the operation."""


class NotFoundError(SalesQuestError):
    """Referenced member, team, goal or season does not exist.

    Attributes:
        collection: Store collection that was searched
        doc_id: Identifier that was not found
    """

    def __init__(self, message: str, collection: str = "", doc_id: str = "") -> None:
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(message)


class ValidationError(SalesQuestError):
    """Input is malformed or violates a business rule."""


class TransientStoreError(SalesQuestError):
    """Persisting to storage failed; the operation may be retried."""
