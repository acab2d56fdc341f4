"""
Tests for the in-memory record store contract.
"""

import pytest

from pawtriage.core.exceptions import RecordStoreError
from pawtriage.services.record_store import InMemoryRecordStore


@pytest.fixture
def store():
    return InMemoryRecordStore(seed={"incidents": {
        "a": {"status": "Reported", "priority": 3, "tags": ["x"]},
        "b": {"status": "Resolved", "priority": 9},
        "c": {"status": "Under Review"},
    }})


class TestQuery:
    @pytest.mark.asyncio
    async def test_in_filter(self, store):
        results = await store.query("incidents", [("status", "in", ["Reported", "Under Review"])])
        assert [r["id"] for r in results] == ["a", "c"]

    @pytest.mark.asyncio
    async def test_missing_field_never_matches(self, store):
        results = await store.query("incidents", [("priority", "<", 10)])
        assert [r["id"] for r in results] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_unsupported_operator(self, store):
        with pytest.raises(RecordStoreError):
            await store.query("incidents", [("priority", "array-contains", 3)])

    @pytest.mark.asyncio
    async def test_pagination(self, store):
        first = await store.query("incidents", limit=2)
        rest = await store.query("incidents", limit=2, start_after=first[-1]["id"])
        assert [r["id"] for r in first + rest] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_iterate_walks_all_pages(self, store):
        ids = [record["id"] async for record in store.iterate("incidents", page_size=1)]
        assert ids == ["a", "b", "c"]


class TestWrites:
    @pytest.mark.asyncio
    async def test_update_merges_and_appends(self, store):
        await store.update("incidents", "a", {"priority": 7}, appends={"tags": ["y"], "notes": ["first"]})
        record = await store.get("incidents", "a")
        assert record["priority"] == 7
        assert record["status"] == "Reported"
        assert record["tags"] == ["x", "y"]
        assert record["notes"] == ["first"]

    @pytest.mark.asyncio
    async def test_append(self, store):
        await store.append("incidents", "b", "tags", ["z"])
        assert (await store.get("incidents", "b"))["tags"] == ["z"]

    @pytest.mark.asyncio
    async def test_update_missing_document_fails(self, store):
        with pytest.raises(RecordStoreError):
            await store.update("incidents", "nope", {"priority": 1})

    @pytest.mark.asyncio
    async def test_reads_are_copies(self, store):
        record = await store.get("incidents", "a")
        record["tags"].append("mutated")
        assert (await store.get("incidents", "a"))["tags"] == ["x"]

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await store.get("incidents", "nope") is None
