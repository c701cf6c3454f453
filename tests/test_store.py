"""Direct unit tests for SalesQuestStore.

Covers the document API (get/query/set-merge/increment), all-or-nothing
batches and save failure handling.
"""

# pylint: disable=protected-access  # Accessing _store and _data for testing
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.core import HomeAssistant

from custom_components.salesquest import const
from custom_components.salesquest.exceptions import (
    TransientStoreError,
    ValidationError,
)
from custom_components.salesquest.store import (
    SalesQuestStore,
    deep_merge,
    increment_write,
    set_merge_write,
)


@pytest.fixture
async def store(hass: HomeAssistant) -> SalesQuestStore:
    """Return an initialized, empty store."""
    store = SalesQuestStore(hass, "salesquest_test_store")
    with patch.object(store._store, "async_load", return_value=None):
        await store.async_initialize()
    return store


async def test_initialize_creates_all_collections(store: SalesQuestStore) -> None:
    """A fresh store has every collection and schema metadata."""
    for collection in const.COLLECTIONS:
        assert store.data[collection] == {}
    assert (
        store.data[const.DATA_META][const.DATA_META_SCHEMA_VERSION]
        == const.SCHEMA_VERSION
    )


async def test_initialize_adds_missing_collections(hass: HomeAssistant) -> None:
    """Older files gain collections added later."""
    store = SalesQuestStore(hass, "salesquest_test_store")
    existing = {const.DATA_MEMBERS: {"m1": {const.DATA_MEMBER_NAME: "Lena"}}}
    with patch.object(store._store, "async_load", return_value=existing):
        await store.async_initialize()

    assert store.get(const.DATA_MEMBERS, "m1") == {const.DATA_MEMBER_NAME: "Lena"}
    assert store.data[const.DATA_SEASONS] == {}


async def test_get_returns_copy(store: SalesQuestStore) -> None:
    """Mutating a returned document does not touch the store."""
    await store.async_set_merge(const.DATA_MEMBERS, "m1", {"tags": ["a"]})

    document = store.get(const.DATA_MEMBERS, "m1")
    document["tags"].append("b")

    assert store.get(const.DATA_MEMBERS, "m1") == {"tags": ["a"]}
    assert store.get(const.DATA_MEMBERS, "missing") is None


async def test_unknown_collection_rejected(store: SalesQuestStore) -> None:
    """Only known collections can be read."""
    with pytest.raises(ValidationError):
        store.get("invoices", "x")


async def test_set_merge_merges_nested_maps(store: SalesQuestStore) -> None:
    """Nested dicts merge key by key; other values replace."""
    await store.async_set_merge(
        const.DATA_CHECKINS, "c1", {"points_awarded": {"morning": True}, "n": 1}
    )
    await store.async_set_merge(
        const.DATA_CHECKINS, "c1", {"points_awarded": {"evening": True}, "n": 2}
    )

    assert store.get(const.DATA_CHECKINS, "c1") == {
        "points_awarded": {"morning": True, "evening": True},
        "n": 2,
    }


async def test_increment_starts_missing_fields_at_zero(store: SalesQuestStore) -> None:
    """Increments create the field and the document if needed."""
    await store.async_increment(const.DATA_MEMBERS, "m1", "xp", 5)
    await store.async_increment(const.DATA_MEMBERS, "m1", "xp", 10)

    assert store.get(const.DATA_MEMBERS, "m1") == {"xp": 15}


async def test_batch_is_all_or_nothing(store: SalesQuestStore) -> None:
    """A bad write aborts the whole batch."""
    await store.async_set_merge(const.DATA_MEMBERS, "m1", {"name": "Lena", "xp": 0})

    with pytest.raises(ValidationError):
        await store.async_batch(
            [
                increment_write(const.DATA_MEMBERS, "m1", "xp", 5),
                set_merge_write(const.DATA_TEAMS, "t1", {"name": "North"}),
                increment_write(const.DATA_MEMBERS, "m1", "name", 1),
            ]
        )

    assert store.get(const.DATA_MEMBERS, "m1") == {"name": "Lena", "xp": 0}
    assert store.get(const.DATA_TEAMS, "t1") is None


async def test_batch_applies_writes_in_order(store: SalesQuestStore) -> None:
    """Writes on the same document see earlier writes in the batch."""
    await store.async_batch(
        [
            set_merge_write(const.DATA_MEMBERS, "m1", {"xp": 10}),
            increment_write(const.DATA_MEMBERS, "m1", "xp", 5),
        ]
    )

    assert store.get(const.DATA_MEMBERS, "m1") == {"xp": 15}


async def test_empty_batch_does_not_save(store: SalesQuestStore) -> None:
    """An empty batch is a no-op."""
    with patch.object(store._store, "async_save", new=AsyncMock()) as mock_save:
        await store.async_batch([])
    mock_save.assert_not_called()


async def test_save_failure_leaves_memory_unchanged(store: SalesQuestStore) -> None:
    """A failed save raises TransientStoreError and keeps the old data."""
    await store.async_set_merge(const.DATA_MEMBERS, "m1", {"xp": 10})

    with (
        patch.object(
            store._store, "async_save", new=AsyncMock(side_effect=OSError("disk full"))
        ),
        pytest.raises(TransientStoreError),
    ):
        await store.async_increment(const.DATA_MEMBERS, "m1", "xp", 5)

    assert store.get(const.DATA_MEMBERS, "m1") == {"xp": 10}


async def test_save_serialization_failure(store: SalesQuestStore) -> None:
    """Invalid data surfaces as TransientStoreError too."""
    with (
        patch.object(
            store._store, "async_save", new=AsyncMock(side_effect=TypeError("bad"))
        ),
        pytest.raises(TransientStoreError),
    ):
        await store.async_save()


async def test_query_filters_order_and_limit(store: SalesQuestStore) -> None:
    """Filters combine, ordering puts missing fields last, limit truncates."""
    await store.async_batch(
        [
            set_merge_write(
                const.DATA_CHECKINS, "a", {"member": "m1", "date": "2025-10-17", "sales": 2}
            ),
            set_merge_write(
                const.DATA_CHECKINS, "b", {"member": "m1", "date": "2025-10-20", "sales": 0}
            ),
            set_merge_write(
                const.DATA_CHECKINS, "c", {"member": "m2", "date": "2025-10-20", "sales": 4}
            ),
            set_merge_write(const.DATA_CHECKINS, "d", {"member": "m1"}),
        ]
    )

    results = store.query(
        const.DATA_CHECKINS,
        [("member", const.QUERY_OP_EQ, "m1")],
        order_by=("date", True),
    )
    assert [doc.get("date") for doc in results] == ["2025-10-20", "2025-10-17", None]

    results = store.query(
        const.DATA_CHECKINS,
        [("sales", const.QUERY_OP_GT, 0), ("member", const.QUERY_OP_IN, ["m1", "m2"])],
        order_by=("sales", False),
        limit=1,
    )
    assert [doc["sales"] for doc in results] == [2]


async def test_query_array_contains(store: SalesQuestStore) -> None:
    """array_contains matches list members."""
    await store.async_set_merge(const.DATA_TEAMS, "t1", {"members": ["m1", "m2"]})
    await store.async_set_merge(const.DATA_TEAMS, "t2", {"members": ["m3"]})

    results = store.query(
        const.DATA_TEAMS, [("members", const.QUERY_OP_ARRAY_CONTAINS, "m2")]
    )
    assert results == [{"members": ["m1", "m2"]}]


async def test_query_unknown_operator(store: SalesQuestStore) -> None:
    """Unknown operators are rejected."""
    await store.async_set_merge(const.DATA_TEAMS, "t1", {"name": "North"})
    with pytest.raises(ValidationError):
        store.query(const.DATA_TEAMS, [("name", "like", "No%")])


async def test_clear_data_resets_structure(store: SalesQuestStore) -> None:
    """Clearing drops every document."""
    await store.async_set_merge(const.DATA_MEMBERS, "m1", {"xp": 1})
    await store.async_clear_data()
    assert store.data[const.DATA_MEMBERS] == {}


def test_deep_merge_copies_values() -> None:
    """Merged values are copies of the partial's values."""
    partial = {"list": [1]}
    target = deep_merge({}, partial)
    partial["list"].append(2)
    assert target == {"list": [1]}
