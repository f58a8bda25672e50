"""
Tests for the event endpoints: multipart creation, listing, lookup.
"""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _image(name: str = "poster.png"):
    return {"image": (name, PNG, "image/png")}


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient, asset_store, event_form):
    """A well-formed form is uploaded, normalized and stored."""
    response = await client.post("/api/events", data=event_form, files=_image())

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Event Created Successfully"

    event = body["event"]
    assert event["slug"] == "pycon-berlin-2026"
    assert event["date"] == "2026-03-05"
    assert event["time"] == "09:30"
    assert event["tags"] == ["python", "conference"]
    assert event["agenda"] == ["Keynote", "Talks", "Sprints"]

    assert len(asset_store.uploads) == 1
    upload = asset_store.uploads[0]
    assert upload["data"] == PNG
    assert upload["namespace"] == "DevEvent"
    assert upload["content_type"] == "image/png"
    assert event["image"] == "https://assets.test/DevEvent/1-poster.png"


@pytest.mark.asyncio
async def test_create_event_missing_image(client: AsyncClient, asset_store, event_form):
    """No image part: 400, nothing uploaded, nothing stored."""
    response = await client.post("/api/events", data=event_form)

    assert response.status_code == 400
    assert response.json() == {"message": "Image file is required"}
    assert asset_store.uploads == []

    listing = await client.get("/api/events")
    assert listing.json()["events"] == []


@pytest.mark.asyncio
async def test_create_event_image_as_text_field(client: AsyncClient, asset_store, event_form):
    response = await client.post(
        "/api/events", data={**event_form, "image": "https://example.com/x.png"}
    )
    assert response.status_code == 400
    assert asset_store.uploads == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field, value",
    [
        ("tags", "python, conference"),
        ("agenda", '{"morning": "Keynote"}'),
        ("tags", "[1, 2]"),
        ("agenda", "[\"unterminated\""),
    ],
)
async def test_create_event_malformed_lists(client: AsyncClient, asset_store, event_form, field, value):
    response = await client.post("/api/events", data={**event_form, field: value}, files=_image())

    assert response.status_code == 400
    assert field in response.json()["message"]
    assert asset_store.uploads == []


@pytest.mark.asyncio
async def test_create_event_missing_tags(client: AsyncClient, event_form):
    form = {k: v for k, v in event_form.items() if k != "tags"}
    response = await client.post("/api/events", data=form, files=_image())
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_event_upload_failure(client: AsyncClient, asset_store, event_form):
    """A failed upload stops the pipeline before anything is persisted."""
    asset_store.fail = True

    response = await client.post("/api/events", data=event_form, files=_image())

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Event Creation Failed"
    assert "upload" in body["error"].lower()

    listing = await client.get("/api/events")
    assert listing.json()["events"] == []


@pytest.mark.asyncio
async def test_create_event_invalid_fields_after_upload(client: AsyncClient, asset_store, event_form):
    """Entity validation runs after the upload; failure is a 500 and leaves the asset behind."""
    response = await client.post(
        "/api/events", data={**event_form, "mode": "virtual"}, files=_image()
    )

    assert response.status_code == 500
    assert response.json()["message"] == "Event Creation Failed"
    assert len(asset_store.uploads) == 1


@pytest.mark.asyncio
async def test_create_event_invalid_time(client: AsyncClient, event_form):
    response = await client.post(
        "/api/events", data={**event_form, "time": "13:00 PM"}, files=_image()
    )
    assert response.status_code == 500
    assert response.json()["error"] == "Invalid time values"


@pytest.mark.asyncio
async def test_create_event_duplicate_slug(client: AsyncClient, event_form):
    first = await client.post("/api/events", data=event_form, files=_image())
    assert first.status_code == 201

    second = await client.post(
        "/api/events", data={**event_form, "title": "pycon   berlin 2026!"}, files=_image()
    )
    assert second.status_code == 500
    assert "pycon-berlin-2026" in second.json()["error"]


@pytest.mark.asyncio
async def test_create_event_invalidates_listing_cache(client: AsyncClient, event_form, monkeypatch):
    invalidate = AsyncMock()
    monkeypatch.setattr("devevent.api.routes.events.invalidate_event_cache", invalidate)

    response = await client.post("/api/events", data=event_form, files=_image())

    assert response.status_code == 201
    invalidate.assert_awaited_once()


@pytest.mark.asyncio
async def test_failed_create_keeps_listing_cache(client: AsyncClient, event_form, monkeypatch):
    invalidate = AsyncMock()
    monkeypatch.setattr("devevent.api.routes.events.invalidate_event_cache", invalidate)

    response = await client.post("/api/events", data=event_form)

    assert response.status_code == 400
    invalidate.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_events_newest_first(client: AsyncClient, event_form):
    for title in ("Alpha Meetup", "Beta Meetup", "Gamma Meetup"):
        response = await client.post(
            "/api/events", data={**event_form, "title": title}, files=_image()
        )
        assert response.status_code == 201

    response = await client.get("/api/events")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Event fetched successfully"
    assert [e["slug"] for e in body["events"]] == ["gamma-meetup", "beta-meetup", "alpha-meetup"]


@pytest.mark.asyncio
async def test_list_events_filtered(client: AsyncClient, event_form):
    await client.post("/api/events", data={**event_form, "title": "Online One", "mode": "online"}, files=_image())
    await client.post("/api/events", data={**event_form, "title": "Offline One", "mode": "offline"}, files=_image())

    by_mode = await client.get("/api/events", params={"mode": "online"})
    assert [e["slug"] for e in by_mode.json()["events"]] == ["online-one"]

    by_day = await client.get("/api/events", params={"date": "March 5, 2026", "mode": "offline"})
    assert [e["slug"] for e in by_day.json()["events"]] == ["offline-one"]

    other_day = await client.get("/api/events", params={"date": "2026-03-06"})
    assert other_day.json()["events"] == []


@pytest.mark.asyncio
async def test_list_events_bad_date_filter(client: AsyncClient):
    response = await client.get("/api/events", params={"date": "someday"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_event_by_slug(client: AsyncClient, test_event):
    response = await client.get("/api/events/pycon-berlin-2026")

    assert response.status_code == 200
    assert response.json()["event"]["id"] == test_event.id


@pytest.mark.asyncio
async def test_get_event_not_found(client: AsyncClient):
    response = await client.get("/api/events/does-not-exist")
    assert response.status_code == 404
