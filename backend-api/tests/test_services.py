"""Tests for the service layer: grouping, degradation, upsert and cascades."""

from __future__ import annotations

import logging

import pytest

from charmemo.core.errors import NotFoundError, TransportError, ValidationError, VersionConflictError
from charmemo.schemas.category import CategoryCreate
from charmemo.schemas.memo_item import MemoItemCreate
from charmemo.schemas.character import CharacterResponse
from charmemo.schemas.user_character_setting import UserCharacterSettingResponse, UserCharacterSettingUpdate
from charmemo.services import category_service, character_service, memo_content_service, memo_item_service
from charmemo.services.character_service import UNCATEGORIZED, group_characters_by_category

from fakes import FakeDataClient, FakeStore


def ids(characters):
    return [c.id for c in characters]


class TestCharacterGrouping:
    @pytest.mark.asyncio
    async def test_without_settings_everyone_is_uncategorized(self):
        store = FakeStore()
        store.seed_character("mario", "マリオ", 1)
        store.seed_character("luigi", "ルイージ", 2)
        client = FakeDataClient(store, owner="alice")

        grouped = await character_service.fetch_characters_by_category(client)

        assert {key: ids(value) for key, value in grouped.items()} == {"uncategorized": ["mario", "luigi"]}

    @pytest.mark.asyncio
    async def test_buckets_follow_category_order_with_uncategorized_last(self, client: FakeDataClient):
        heavy = await category_service.create_category(client, CategoryCreate(name="Heavy", order=2))
        light = await category_service.create_category(client, CategoryCreate(name="Light", order=1))
        await character_service.assign_category(client, "peach", light.id)
        await character_service.assign_category(client, "mario", heavy.id)

        grouped = await character_service.fetch_characters_by_category(client)

        assert list(grouped) == [light.id, heavy.id, UNCATEGORIZED]
        assert ids(grouped[UNCATEGORIZED]) == ["luigi"]

    @pytest.mark.asyncio
    async def test_custom_order_reorders_within_a_bucket(self, client: FakeDataClient):
        await character_service.set_custom_order(client, "peach", 0)
        grouped = await character_service.fetch_characters_by_category(client)
        assert ids(grouped[UNCATEGORIZED]) == ["peach", "mario", "luigi"]

    @pytest.mark.asyncio
    async def test_grouping_is_idempotent(self, client: FakeDataClient):
        category = await category_service.create_category(client, CategoryCreate(name="Mains"))
        await character_service.assign_category(client, "luigi", category.id)

        first = await character_service.fetch_characters_by_category(client)
        second = await character_service.fetch_characters_by_category(client)

        assert first == second

    def test_unknown_category_falls_back_to_uncategorized(self, store: FakeStore):
        characters = [CharacterResponse.model_validate(r) for r in store.tables["Character"].values()]
        settings = [UserCharacterSettingResponse(id="s1", character_id="mario", category_id="gone")]

        grouped = group_characters_by_category(characters, [], settings)

        assert ids(grouped[UNCATEGORIZED]) == ["mario", "luigi", "peach"]
        assert "gone" not in grouped

    @pytest.mark.asyncio
    async def test_categories_with_characters_include_empty_ones(self, client: FakeDataClient):
        empty = await category_service.create_category(client, CategoryCreate(name="Empty", color="#ff0000"))
        groups = await character_service.fetch_categories_with_characters(client)

        assert [g.category_id for g in groups] == [empty.id, UNCATEGORIZED]
        assert groups[0].name == "Empty"
        assert groups[0].characters == []

    @pytest.mark.asyncio
    async def test_groupings_are_per_owner(self, client, other_client):
        category = await category_service.create_category(client, CategoryCreate(name="Mine"))
        await character_service.assign_category(client, "mario", category.id)

        theirs = await character_service.fetch_characters_by_category(other_client)

        assert list(theirs) == [UNCATEGORIZED]
        assert ids(theirs[UNCATEGORIZED]) == ["mario", "luigi", "peach"]


class TestCharacterSettings:
    @pytest.mark.asyncio
    async def test_created_then_updated(self, client: FakeDataClient):
        category = await category_service.create_category(client, CategoryCreate(name="Mains"))
        created = await character_service.assign_category(client, "mario", category.id)
        updated = await character_service.set_custom_order(client, "mario", 7)

        assert created.id == updated.id
        assert (updated.category_id, updated.custom_order) == (category.id, 7)
        assert updated.version == created.version + 1

    @pytest.mark.asyncio
    async def test_explicit_none_clears_category(self, client: FakeDataClient):
        category = await category_service.create_category(client, CategoryCreate(name="Mains"))
        await character_service.assign_category(client, "mario", category.id)
        cleared = await character_service.update_character_setting(
            client, "mario", UserCharacterSettingUpdate(category_id=None)
        )
        assert cleared.category_id is None

    @pytest.mark.asyncio
    async def test_unknown_character(self, client: FakeDataClient):
        with pytest.raises(NotFoundError):
            await character_service.assign_category(client, "waluigi", None)

    @pytest.mark.asyncio
    async def test_unknown_category(self, client: FakeDataClient):
        with pytest.raises(NotFoundError):
            await character_service.assign_category(client, "mario", "no-such-category")

    @pytest.mark.asyncio
    async def test_other_owners_category_is_unknown(self, client, other_client):
        category = await category_service.create_category(other_client, CategoryCreate(name="Theirs"))
        with pytest.raises(NotFoundError):
            await character_service.assign_category(client, "mario", category.id)


class TestDegradation:
    @pytest.mark.asyncio
    async def test_failed_load_degrades_to_empty_with_a_warning(self, store, client, caplog):
        store.fail_on("Character", "list")
        with caplog.at_level(logging.WARNING, logger="charmemo.services.degrade"):
            characters = await character_service.fetch_characters(client)

        assert characters == []
        assert any("[degraded] character list" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_successful_load_logs_nothing(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="charmemo.services.degrade"):
            characters = await character_service.fetch_characters(client)
        assert ids(characters) == ["mario", "luigi", "peach"]
        assert not caplog.records

    @pytest.mark.asyncio
    async def test_missing_character_is_not_a_degradation(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="charmemo.services.degrade"):
            assert await character_service.fetch_character(client, "waluigi") is None
        assert not caplog.records

    @pytest.mark.asyncio
    async def test_sorted_fetch_propagates(self, store, client):
        store.fail_on("Character", "list")
        with pytest.raises(TransportError):
            await character_service.fetch_sorted_characters(client)

    @pytest.mark.asyncio
    async def test_next_order_degrades_to_zero(self, store, client):
        await memo_item_service.create_memo_item(client, MemoItemCreate(name="Neutral", order=4))
        store.fail_on("MemoItem", "list_by_index:memoItemsByOwner")
        assert await memo_item_service.get_next_order(client) == 0


class TestMemoItems:
    @pytest.mark.asyncio
    async def test_orders_append(self, client: FakeDataClient):
        assert await memo_item_service.get_next_order(client) == 0
        first = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Neutral"))
        second = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Ledge"))
        assert (first.order, second.order) == (0, 1)
        assert await memo_item_service.get_next_order(client) == 2

    @pytest.mark.asyncio
    async def test_visible_only(self, client: FakeDataClient):
        await memo_item_service.create_memo_item(client, MemoItemCreate(name="Shown", order=1))
        await memo_item_service.create_memo_item(client, MemoItemCreate(name="Hidden", order=2, visible=False))
        items = await memo_item_service.get_memo_items(client, visible_only=True)
        assert [i.name for i in items] == ["Shown"]

    @pytest.mark.asyncio
    async def test_reorder_writes_only_moved_items(self, store, client):
        for name, order in (("a", 1), ("b", 2), ("c", 3)):
            await memo_item_service.create_memo_item(client, MemoItemCreate(name=name, order=order))
        items = await memo_item_service.get_memo_items(client)
        store.calls.clear()

        reordered = await memo_item_service.reorder_memo_items(client, memo_item_service.move_item(items, 2, 0))

        assert [(i.name, i.order) for i in reordered] == [("c", 1), ("a", 2), ("b", 3)]
        assert [call[1] for call in store.calls] == ["update", "update", "update"]

        unchanged = await memo_item_service.reorder_memo_items(client, reordered)
        assert unchanged == reordered
        assert len(store.calls) == 3

    @pytest.mark.asyncio
    async def test_bulk_order_stops_at_first_conflict(self, client: FakeDataClient):
        a = await memo_item_service.create_memo_item(client, MemoItemCreate(name="a", order=1))
        b = await memo_item_service.create_memo_item(client, MemoItemCreate(name="b", order=2))
        c = await memo_item_service.create_memo_item(client, MemoItemCreate(name="c", order=3))
        entries = memo_item_service.renumber([c, b, a])
        entries[1] = entries[1].model_copy(update={"version": 9})

        with pytest.raises(VersionConflictError):
            await memo_item_service.bulk_update_memo_item_order(client, entries)

        stored = {i.name: i.order for i in await memo_item_service.get_memo_items(client)}
        assert stored == {"c": 1, "b": 2, "a": 1}

    @pytest.mark.asyncio
    async def test_cascade_delete(self, client: FakeDataClient):
        item = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Neutral", order=1))
        keep = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Ledge", order=2))
        await memo_content_service.upsert_memo_content(client, "mario", item.id, "jab")
        await memo_content_service.upsert_memo_content(client, "luigi", item.id, "dash")
        await memo_content_service.upsert_memo_content(client, "mario", keep.id, "edge")

        result = await memo_item_service.delete_memo_item_cascade(client, item.id, item.version)

        assert result.deleted_contents == 2
        assert await memo_item_service.get_memo_item(client, item.id) is None
        remaining = await memo_content_service.get_memo_contents_by_character(client, "mario")
        assert [c.memo_item_id for c in remaining] == [keep.id]

    @pytest.mark.asyncio
    async def test_cascade_with_stale_version_touches_nothing(self, client: FakeDataClient):
        item = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Neutral", order=1))
        await memo_content_service.upsert_memo_content(client, "mario", item.id, "jab")

        with pytest.raises(VersionConflictError):
            await memo_item_service.delete_memo_item_cascade(client, item.id, item.version + 1)

        assert await memo_content_service.get_memo_content(client, "mario", item.id) is not None

    @pytest.mark.asyncio
    async def test_plain_delete_leaves_contents(self, client: FakeDataClient):
        item = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Neutral", order=1))
        await memo_content_service.upsert_memo_content(client, "mario", item.id, "jab")

        await memo_item_service.delete_memo_item(client, item.id, item.version)

        assert await memo_item_service.get_memo_item(client, item.id) is None
        orphans = await memo_content_service.get_memo_contents_by_item_id(client, item.id)
        assert [c.content for c in orphans] == ["jab"]

    @pytest.mark.asyncio
    async def test_cascade_of_missing_item(self, client: FakeDataClient):
        with pytest.raises(NotFoundError):
            await memo_item_service.delete_memo_item_cascade(client, "nope", 1)


class TestMemoContents:
    @pytest.mark.asyncio
    async def test_upsert_creates_then_updates(self, client: FakeDataClient):
        created = await memo_content_service.upsert_memo_content(client, "mario", "m1", "first")
        updated = await memo_content_service.upsert_memo_content(client, "mario", "m1", "second")

        assert created.id == updated.id
        assert updated.content == "second"
        assert updated.version == 2

    @pytest.mark.asyncio
    async def test_upsert_with_stale_version(self, client: FakeDataClient):
        await memo_content_service.upsert_memo_content(client, "mario", "m1", "first")
        await memo_content_service.upsert_memo_content(client, "mario", "m1", "second")

        with pytest.raises(VersionConflictError):
            await memo_content_service.upsert_memo_content(client, "mario", "m1", "stale", expected_version=1)

        stored = await memo_content_service.get_memo_content(client, "mario", "m1")
        assert stored.content == "second"

    @pytest.mark.asyncio
    async def test_upsert_with_version_of_a_deleted_record(self, client: FakeDataClient):
        created = await memo_content_service.upsert_memo_content(client, "mario", "m1", "first")
        await memo_content_service.delete_memo_content(client, created.id, created.version)

        with pytest.raises(NotFoundError):
            await memo_content_service.upsert_memo_content(client, "mario", "m1", "stale", expected_version=1)

        assert await memo_content_service.get_memo_content(client, "mario", "m1") is None

    @pytest.mark.asyncio
    async def test_upsert_cannot_reach_another_pair(self, client: FakeDataClient):
        with pytest.raises(ValidationError):
            await memo_content_service.upsert_memo_content(client, "a", "b#c", "mine")

    @pytest.mark.asyncio
    async def test_upsert_without_content_keeps_none(self, client: FakeDataClient):
        created = await memo_content_service.upsert_memo_content(client, "mario", "m1", None)
        assert created.content is None

    @pytest.mark.asyncio
    async def test_character_contents_keyed_by_memo_item(self, client: FakeDataClient):
        await memo_content_service.upsert_memo_content(client, "mario", "m1", "a")
        await memo_content_service.upsert_memo_content(client, "mario", "m2", "")

        result = await memo_content_service.get_character_memo_contents(client, "mario")

        assert result.character_id == "mario"
        assert {k: v.content for k, v in result.contents.items()} == {"m1": "a", "m2": ""}

    @pytest.mark.asyncio
    async def test_entries_pair_visible_items_with_contents(self, client: FakeDataClient):
        shown = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Shown", order=1))
        empty = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Empty", order=2))
        hidden = await memo_item_service.create_memo_item(client, MemoItemCreate(name="Hidden", order=3, visible=False))
        await memo_content_service.upsert_memo_content(client, "mario", shown.id, "note")
        await memo_content_service.upsert_memo_content(client, "mario", hidden.id, "secret")

        entries = await memo_content_service.get_memo_entries(client, "mario")

        assert [(e.item.id, e.content.content if e.content else None) for e in entries] == [
            (shown.id, "note"),
            (empty.id, None),
        ]


class TestCategories:
    @pytest.mark.asyncio
    async def test_order_defaults_to_next_slot(self, client: FakeDataClient):
        first = await category_service.create_category(client, CategoryCreate(name="A"))
        second = await category_service.create_category(client, CategoryCreate(name="B"))
        assert (first.order, second.order) == (0, 1)

    @pytest.mark.asyncio
    async def test_delete_releases_assigned_characters(self, client: FakeDataClient):
        category = await category_service.create_category(client, CategoryCreate(name="Mains"))
        await character_service.assign_category(client, "mario", category.id)
        await character_service.assign_category(client, "luigi", category.id)

        await category_service.delete_category(client, category.id, category.version)

        grouped = await character_service.fetch_characters_by_category(client)
        assert list(grouped) == [UNCATEGORIZED]
        settings = await character_service.update_character_setting(client, "mario", UserCharacterSettingUpdate())
        assert settings.category_id is None
