"""HTTP surface over the in-memory data client."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from charmemo.core.config import Settings
from charmemo.core.security import create_access_token
from charmemo.main import create_app

from fakes import FakeDataClient, FakeStore


@pytest.fixture
def settings() -> Settings:
    return Settings(ENVIRONMENT="test", JWT_SECRET_KEY="test-secret")


@pytest.fixture
def api(settings: Settings, store: FakeStore):
    with TestClient(create_app(settings, data_client=FakeDataClient(store))) as test_client:
        yield test_client


def auth(settings: Settings, owner: str = "alice") -> dict:
    return {"Authorization": f"Bearer {create_access_token(owner, settings)}"}


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestCharacters:
    def test_catalog_needs_no_token(self, api):
        response = api.get("/characters")
        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body] == ["mario", "luigi", "peach"]
        assert body[0]["nameEn"] == "Mario"

    def test_sorted_by_localized_name(self, api):
        response = api.get("/characters", params={"sort": "name", "locale": "en"})
        assert [c["id"] for c in response.json()] == ["luigi", "mario", "peach"]

    def test_invalid_sort(self, api):
        assert api.get("/characters", params={"sort": "color"}).status_code == 422

    def test_single_character(self, api):
        assert api.get("/characters/peach").json()["name"] == "ピーチ"
        assert api.get("/characters/waluigi").status_code == 404

    def test_empty_catalog_is_unavailable(self, settings):
        with TestClient(create_app(settings, data_client=FakeDataClient(FakeStore()))) as empty_api:
            response = empty_api.get("/characters")
        assert response.status_code == 503
        assert response.json()["kind"] == "transport"

    def test_grouping_needs_a_token(self, api):
        assert api.get("/characters/grouped").status_code == 401

    def test_grouping_and_setting(self, api, settings):
        category = api.post("/categories", json={"name": "Mains"}, headers=auth(settings)).json()

        response = api.put("/characters/luigi/setting", json={"categoryId": category["id"]}, headers=auth(settings))
        assert response.status_code == 200
        assert response.json()["categoryId"] == category["id"]

        grouped = api.get("/characters/grouped", headers=auth(settings)).json()
        assert {k: [c["id"] for c in v] for k, v in grouped.items()} == {
            category["id"]: ["luigi"],
            "uncategorized": ["mario", "peach"],
        }

        groups = api.get("/characters/groups", headers=auth(settings, "bob")).json()
        assert [g["categoryId"] for g in groups] == ["uncategorized"]

    def test_setting_for_unknown_category(self, api, settings):
        response = api.put("/characters/mario/setting", json={"categoryId": "nope"}, headers=auth(settings))
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"


class TestAuth:
    def test_expired_token(self, api, settings):
        token = create_access_token("alice", settings, expires_delta=timedelta(minutes=-1))
        response = api.get("/memo-items", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_signed_with_another_key(self, api):
        other = Settings(ENVIRONMENT="test", JWT_SECRET_KEY="someone-else")
        assert api.get("/memo-items", headers=auth(other)).status_code == 401


class TestMemoItems:
    def test_create_list_and_filter(self, api, settings):
        headers = auth(settings)
        first = api.post("/memo-items", json={"name": "Neutral"}, headers=headers)
        api.post("/memo-items", json={"name": "Ledge", "visible": False}, headers=headers)

        assert first.status_code == 201
        assert first.json()["order"] == 0

        all_items = api.get("/memo-items", headers=headers).json()
        visible = api.get("/memo-items", params={"visible_only": True}, headers=headers).json()
        named = api.get("/memo-items", params={"name_contains": "edg"}, headers=headers).json()
        ranged = api.get("/memo-items", params={"order_min": 1, "order_max": 5}, headers=headers).json()

        assert [i["name"] for i in all_items] == ["Neutral", "Ledge"]
        assert [i["name"] for i in visible] == ["Neutral"]
        assert [i["name"] for i in named] == ["Ledge"]
        assert [i["name"] for i in ranged] == ["Ledge"]

    def test_filters_are_exclusive(self, api, settings):
        response = api.get("/memo-items", params={"visible_only": True, "name_contains": "x"}, headers=auth(settings))
        assert response.status_code == 422

    def test_empty_order_range(self, api, settings):
        response = api.get("/memo-items", params={"order_min": 5, "order_max": 1}, headers=auth(settings))
        assert response.status_code == 422
        assert response.json()["kind"] == "validation"

    def test_stale_update_is_a_conflict(self, api, settings):
        headers = auth(settings)
        item = api.post("/memo-items", json={"name": "Neutral"}, headers=headers).json()
        api.patch(f"/memo-items/{item['id']}", params={"expected_version": 1}, json={"name": "Jab"}, headers=headers)

        response = api.patch(
            f"/memo-items/{item['id']}", params={"expected_version": 1}, json={"name": "Stale"}, headers=headers
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "version_conflict"
        assert api.get(f"/memo-items/{item['id']}", headers=headers).json()["name"] == "Jab"

    def test_bulk_order(self, api, settings):
        headers = auth(settings)
        a = api.post("/memo-items", json={"name": "a"}, headers=headers).json()
        b = api.post("/memo-items", json={"name": "b"}, headers=headers).json()

        response = api.put(
            "/memo-items/order",
            json={"items": [{"id": b["id"], "order": 0, "version": 1}, {"id": a["id"], "order": 1, "version": 1}]},
            headers=headers,
        )

        assert response.status_code == 200
        assert [i["name"] for i in api.get("/memo-items", headers=headers).json()] == ["b", "a"]

    def test_delete_cascades(self, api, settings):
        headers = auth(settings)
        item = api.post("/memo-items", json={"name": "Neutral"}, headers=headers).json()
        api.put("/memo-contents", json={"characterId": "mario", "memoItemId": item["id"], "content": "x"}, headers=headers)

        response = api.delete(f"/memo-items/{item['id']}", params={"expected_version": 1}, headers=headers)

        assert response.json() == {"id": item["id"], "deletedContents": 1}
        assert api.get(f"/memo-items/{item['id']}", headers=headers).status_code == 404
        assert api.get("/memo-contents/character/mario", headers=headers).json()["contents"] == {}

    def test_other_owners_item_is_not_found(self, api, settings):
        item = api.post("/memo-items", json={"name": "Neutral"}, headers=auth(settings)).json()
        response = api.get(f"/memo-items/{item['id']}", headers=auth(settings, "bob"))
        assert response.status_code == 404


class TestMemoContents:
    def test_upsert_and_read(self, api, settings):
        headers = auth(settings)
        item = api.post("/memo-items", json={"name": "Neutral"}, headers=headers).json()
        body = {"characterId": "mario", "memoItemId": item["id"], "content": "jab combo"}

        created = api.put("/memo-contents", json=body, headers=headers).json()
        updated = api.put("/memo-contents", json={**body, "content": "dash attack"}, headers=headers).json()

        assert created["id"] == updated["id"]
        assert updated["version"] == 2
        contents = api.get("/memo-contents/character/mario", headers=headers).json()
        assert contents["characterId"] == "mario"
        assert contents["contents"][item["id"]]["content"] == "dash attack"

        entries = api.get("/memo-contents/character/luigi/entries", headers=headers).json()
        assert [(e["item"]["id"], e["content"]) for e in entries] == [(item["id"], None)]

    def test_upsert_with_stale_version(self, api, settings):
        headers = auth(settings)
        body = {"characterId": "mario", "memoItemId": "m1", "content": "a"}
        api.put("/memo-contents", json=body, headers=headers)
        api.put("/memo-contents", json=body, headers=headers)

        response = api.put("/memo-contents", json={**body, "expectedVersion": 1}, headers=headers)

        assert response.status_code == 409

    def test_patch_and_delete(self, api, settings):
        headers = auth(settings)
        created = api.put(
            "/memo-contents", json={"characterId": "mario", "memoItemId": "m1", "content": "a"}, headers=headers
        ).json()

        patched = api.patch(
            f"/memo-contents/{created['id']}", params={"expected_version": 1}, json={"content": ""}, headers=headers
        )
        assert patched.json()["content"] == ""

        assert api.delete(f"/memo-contents/{created['id']}", params={"expected_version": 1}, headers=headers).status_code == 409
        assert api.delete(f"/memo-contents/{created['id']}", params={"expected_version": 2}, headers=headers).status_code == 200

    def test_upsert_without_content(self, api, settings):
        response = api.put("/memo-contents", json={"characterId": "mario", "memoItemId": "m1"}, headers=auth(settings))
        assert response.status_code == 200
        assert response.json()["content"] is None

    def test_upsert_after_delete_is_not_found(self, api, settings):
        headers = auth(settings)
        body = {"characterId": "mario", "memoItemId": "m1", "content": "a"}
        created = api.put("/memo-contents", json=body, headers=headers).json()
        api.delete(f"/memo-contents/{created['id']}", params={"expected_version": 1}, headers=headers)

        response = api.put("/memo-contents", json={**body, "expectedVersion": 1}, headers=headers)

        assert response.status_code == 404

    def test_oversized_content(self, api, settings):
        body = {"characterId": "mario", "memoItemId": "m1", "content": "x" * 10001}
        response = api.put("/memo-contents", json=body, headers=auth(settings))
        assert response.status_code == 422


class TestCategories:
    def test_crud(self, api, settings):
        headers = auth(settings)
        created = api.post("/categories", json={"name": "Mains", "color": "#3366ff"}, headers=headers)
        assert created.status_code == 201
        category = created.json()

        renamed = api.patch(
            f"/categories/{category['id']}", params={"expected_version": 1}, json={"name": "Pocket"}, headers=headers
        ).json()
        assert (renamed["name"], renamed["version"]) == ("Pocket", 2)

        api.put("/characters/mario/setting", json={"categoryId": category["id"]}, headers=headers)
        deleted = api.delete(f"/categories/{category['id']}", params={"expected_version": 2}, headers=headers)

        assert deleted.status_code == 200
        assert api.get("/categories", headers=headers).json() == []
        grouped = api.get("/characters/grouped", headers=headers).json()
        assert list(grouped) == ["uncategorized"]
