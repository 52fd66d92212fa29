# tests/services/test_media_tags_api.py
from __future__ import annotations

import pytest


@pytest.fixture()
def tag_ids(api_client):
    ids = {}
    for name in ("Beach", "Family", "Sunset"):
        r = api_client.post("/api/tags", json={"name": name})
        assert r.status_code == 201, r.text
        ids[name] = r.json()["id"]
    return ids


def _names(resp):
    return [t["name"] for t in resp.json()]


def test_attach_list_detach(api_client, tag_ids):
    r = api_client.post("/api/media-tags/media/m1/tags", json={"tag_id": tag_ids["Beach"], "assigned_by": "tester"})
    assert r.status_code == 201, r.text
    assert r.json()["assigned_by"] == "tester" and r.json()["assigned_at"]

    # same pair again
    r = api_client.post("/api/media-tags/media/m1/tags", json={"tag_id": tag_ids["Beach"]})
    assert r.status_code == 409

    r = api_client.post("/api/media-tags/media/m1/tags", json={"tag_id": 999})
    assert r.status_code == 404

    assert _names(api_client.get("/api/media-tags/media/m1/tags")) == ["Beach"]

    assert api_client.delete(f"/api/media-tags/media/m1/tags/{tag_ids['Beach']}").status_code == 204
    assert api_client.get("/api/media-tags/media/m1/tags").json() == []
    # idempotent
    assert api_client.delete(f"/api/media-tags/media/m1/tags/{tag_ids['Beach']}").status_code == 204


def test_media_ids_with_slashes(api_client, tag_ids):
    media = "DCIM/Camera/IMG_0001.jpg"
    r = api_client.post(f"/api/media-tags/media/{media}/tags", json={"tag_id": tag_ids["Sunset"]})
    assert r.status_code == 201, r.text
    assert r.json()["media_id"] == media
    assert _names(api_client.get(f"/api/media-tags/media/{media}/tags")) == ["Sunset"]


def test_batch_and_batch_remove(api_client, tag_ids):
    payload = {"tag_ids": [tag_ids["Beach"], tag_ids["Family"], 999]}
    r = api_client.post("/api/media-tags/media/m1/tags/batch", json=payload)
    assert r.status_code == 200
    assert r.json() == {"requested": 3, "succeeded": 2}

    r = api_client.post("/api/media-tags/media/m1/tags/batch-remove", json={"tag_ids": [tag_ids["Beach"], 999]})
    assert r.json() == {"requested": 2, "succeeded": 1}
    assert _names(api_client.get("/api/media-tags/media/m1/tags")) == ["Family"]


def test_toggle(api_client, tag_ids):
    url = f"/api/media-tags/media/m1/tags/{tag_ids['Beach']}/toggle"
    assert api_client.post(url).json()["result"] == "assigned"
    assert api_client.post(url).json()["result"] == "unassigned"
    assert api_client.post("/api/media-tags/media/m1/tags/999/toggle").json()["result"] == "error"


def test_detach_all(api_client, tag_ids):
    api_client.post("/api/media-tags/media/m1/tags/batch", json={"tag_ids": list(tag_ids.values())})
    assert api_client.delete("/api/media-tags/media/m1/tags").status_code == 204
    assert api_client.get("/api/media-tags/media/m1/tags").json() == []


def test_filter_any_and_all(api_client, tag_ids):
    beach, family, sunset = tag_ids["Beach"], tag_ids["Family"], tag_ids["Sunset"]
    api_client.post("/api/media-tags/media/m1/tags/batch", json={"tag_ids": [beach, family]})
    api_client.post("/api/media-tags/media/m2/tags/batch", json={"tag_ids": [beach]})
    api_client.post("/api/media-tags/media/m3/tags/batch", json={"tag_ids": [family, sunset]})

    r = api_client.get("/api/media-tags/filter", params={"tag_ids": [beach, family], "mode": "all"})
    assert r.status_code == 200, r.text
    assert r.json()["media_ids"] == ["m1"]

    r = api_client.get("/api/media-tags/filter", params={"tag_ids": [beach, sunset]})
    body = r.json()
    assert body["mode"] == "any"
    assert sorted(body["media_ids"]) == ["m1", "m2", "m3"]

    r = api_client.get("/api/media-tags/filter", params={"mode": "sideways"})
    assert r.status_code == 422
