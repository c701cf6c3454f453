# File: store.py
"""Document store for the SalesQuest integration.

Uses Home Assistant's Storage helper to persist a tree of collections
(`{collection: {doc_id: document}}`) across restarts and exposes a small
document API on top of it:

- get / query: read copies of documents
- async_set_merge: deep-merge a partial document
- async_increment: atomic numeric field increment
- async_batch: all-or-nothing group of the two write kinds

Writes are staged on copies of the touched documents and only swapped into
memory after the new tree has been saved, so a failed save leaves both memory
and disk on the previous version. A lock serialises writers.
"""

from __future__ import annotations

import asyncio
import copy
import operator
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const
from .exceptions import TransientStoreError, ValidationError
from .utils import dt_utils

if TYPE_CHECKING:
    from collections.abc import Iterable

    from homeassistant.core import HomeAssistant

    from .type_defs import Document, QueryFilter, QueryOrder, StoreWrite


_COMPARATORS = {
    const.QUERY_OP_EQ: operator.eq,
    const.QUERY_OP_NE: operator.ne,
    const.QUERY_OP_LT: operator.lt,
    const.QUERY_OP_LTE: operator.le,
    const.QUERY_OP_GT: operator.gt,
    const.QUERY_OP_GTE: operator.ge,
}


# ==============================================================================
# Write Builders
# ==============================================================================


def set_merge_write(collection: str, doc_id: str, data: Document) -> StoreWrite:
    """Build a set-with-merge write for async_batch."""
    return {
        "op": const.STORE_OP_SET_MERGE,
        "collection": collection,
        "doc_id": doc_id,
        "data": data,
    }


def increment_write(
    collection: str, doc_id: str, field: str, delta: float
) -> StoreWrite:
    """Build a numeric increment write for async_batch."""
    return {
        "op": const.STORE_OP_INCREMENT,
        "collection": collection,
        "doc_id": doc_id,
        "field": field,
        "delta": delta,
    }


# ==============================================================================
# Pure Helpers
# ==============================================================================


def deep_merge(target: dict[str, Any], partial: dict[str, Any]) -> dict[str, Any]:
    """Merge `partial` into `target` in place; nested dicts merge, other values replace."""
    for key, value in partial.items():
        existing = target.get(key)
        if isinstance(value, dict) and isinstance(existing, dict):
            deep_merge(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _matches(document: Document, filters: Iterable[QueryFilter]) -> bool:
    """Return True when a document satisfies every (field, op, value) filter."""
    for field, op, expected in filters:
        actual = document.get(field)
        if op == const.QUERY_OP_IN:
            if actual not in expected:
                return False
        elif op == const.QUERY_OP_ARRAY_CONTAINS:
            if not isinstance(actual, list) or expected not in actual:
                return False
        elif op in (const.QUERY_OP_EQ, const.QUERY_OP_NE):
            if not _COMPARATORS[op](actual, expected):
                return False
        elif op in _COMPARATORS:
            # Ordering comparisons never match missing fields
            if actual is None or not _COMPARATORS[op](actual, expected):
                return False
        else:
            raise ValidationError(const.ERROR_UNKNOWN_QUERY_OP_FMT.format(op))
    return True


# ==============================================================================
# Store
# ==============================================================================


class SalesQuestStore:
    """Manages loading, saving, and accessing documents in Home Assistant's storage."""

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    def _get_default_structure(self) -> dict[str, Any]:
        """Get the default empty data structure."""
        structure: dict[str, Any] = {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
                const.DATA_META_CREATED_AT: dt_utils.dt_now_iso(),
            },
        }
        for collection in const.COLLECTIONS:
            structure[collection] = {}
        return structure

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. Collections
        missing from older files are added.
        """
        const.LOGGER.debug("DEBUG: SalesQuestStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = self._get_default_structure()
            return

        self._data = existing_data
        for collection in const.COLLECTIONS:
            self._data.setdefault(collection, {})
        self._data.setdefault(
            const.DATA_META, {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION}
        )
        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                collection: len(self._data.get(collection, {}))
                for collection in const.COLLECTIONS
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory document tree (read-only by convention)."""
        return self._data

    def get_storage_path(self) -> str:
        """Get the storage file path."""
        return self._store.path

    # --------------------------------------------------------------------------
    # Reads
    # --------------------------------------------------------------------------

    def _collection(self, collection: str) -> dict[str, Document]:
        if collection not in const.COLLECTIONS:
            raise ValidationError(const.ERROR_UNKNOWN_COLLECTION_FMT.format(collection))
        return self._data.get(collection, {})

    def get(self, collection: str, doc_id: str) -> Document | None:
        """Return a copy of a document, or None when it does not exist."""
        document = self._collection(collection).get(doc_id)
        if document is None:
            return None
        return copy.deepcopy(document)

    def exists(self, collection: str, doc_id: str) -> bool:
        """Return True when the document exists."""
        return doc_id in self._collection(collection)

    def query(
        self,
        collection: str,
        filters: Iterable[QueryFilter] | None = None,
        order_by: QueryOrder | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        """Return copies of matching documents.

        Args:
            collection: Collection name (const.DATA_*)
            filters: (field, operator, value) tuples, all of which must match
            order_by: (field, descending); documents missing the field sort last
            limit: Maximum number of documents returned

        Raises:
            ValidationError: Unknown collection or operator.
        """
        filter_list = list(filters or ())
        matched = [
            document
            for document in self._collection(collection).values()
            if _matches(document, filter_list)
        ]

        if order_by is not None:
            field, descending = order_by
            present = [doc for doc in matched if doc.get(field) is not None]
            missing = [doc for doc in matched if doc.get(field) is None]
            present.sort(key=lambda doc: doc[field], reverse=descending)
            matched = present + missing

        if limit is not None:
            matched = matched[: max(0, limit)]

        return [copy.deepcopy(document) for document in matched]

    # --------------------------------------------------------------------------
    # Writes
    # --------------------------------------------------------------------------

    async def async_set_merge(
        self, collection: str, doc_id: str, partial: Document
    ) -> None:
        """Create or deep-merge a document."""
        await self.async_batch([set_merge_write(collection, doc_id, partial)])

    async def async_increment(
        self, collection: str, doc_id: str, field: str, delta: float
    ) -> None:
        """Atomically add `delta` to a numeric field (missing fields start at 0)."""
        await self.async_batch([increment_write(collection, doc_id, field, delta)])

    async def async_batch(self, writes: list[StoreWrite]) -> None:
        """Apply a group of writes all-or-nothing.

        Raises:
            ValidationError: A write is malformed (nothing is applied).
            TransientStoreError: Saving failed (nothing is applied).
        """
        if not writes:
            return

        async with self._lock:
            staged_collections: dict[str, dict[str, Document]] = {}
            copied: set[tuple[str, str]] = set()

            for write in writes:
                collection = write["collection"]
                doc_id = write["doc_id"]
                if collection not in staged_collections:
                    staged_collections[collection] = dict(self._collection(collection))
                documents = staged_collections[collection]

                if (collection, doc_id) not in copied:
                    documents[doc_id] = copy.deepcopy(documents.get(doc_id, {}))
                    copied.add((collection, doc_id))
                document = documents[doc_id]

                if write["op"] == const.STORE_OP_SET_MERGE:
                    deep_merge(document, write.get("data", {}))
                elif write["op"] == const.STORE_OP_INCREMENT:
                    field = write["field"]
                    delta = write.get("delta", 0)
                    current = document.get(field, 0)
                    if not _is_number(current) or not _is_number(delta):
                        raise ValidationError(
                            const.ERROR_NON_NUMERIC_FIELD_FMT.format(
                                field, collection, doc_id
                            )
                        )
                    document[field] = current + delta
                else:
                    raise ValidationError(f"Unknown write operation '{write['op']}'")

            new_data = {**self._data, **staged_collections}
            await self.async_save(new_data)
            self._data = new_data

        const.LOGGER.debug(
            "DEBUG: SalesQuestStore: Committed batch of %s write(s) to %s",
            len(writes),
            sorted(staged_collections),
        )

    async def async_save(self, data: dict[str, Any] | None = None) -> None:
        """Save a document tree (default: the current one) to storage.

        Raises:
            TransientStoreError: File system or serialization failure.
        """
        payload = self._data if data is None else data
        try:
            await self._store.async_save(payload)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
            raise TransientStoreError(const.ERROR_STORE_WRITE_FAILED) from err
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data: %s", err
            )
            raise TransientStoreError(const.ERROR_STORE_WRITE_FAILED) from err

    async def async_clear_data(self) -> None:
        """Clear all stored data and reset to default structure."""
        const.LOGGER.warning("WARNING: Clearing all SalesQuest data and resetting storage")
        async with self._lock:
            self._data = self._get_default_structure()
            await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        await self.async_clear_data()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s", self._store.path
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
