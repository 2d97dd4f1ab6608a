from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

import anyio
import httpx
import pytest
from inline_snapshot import snapshot
from time_machine import travel

from cachedemo import STRATEGIES, ServerState
from cachedemo.app import create_app

NO_VALIDATOR_STRATEGIES = [s for s in STRATEGIES if not s.policy]


def make_client(app: Any, raise_app_exceptions: bool = True) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
        base_url="http://testserver",
    )


@pytest.mark.anyio
@pytest.mark.parametrize("strategy", NO_VALIDATOR_STRATEGIES, ids=lambda s: s.name)
async def test_strategies_without_validators_always_200(strategy) -> None:
    async with make_client(create_app()) as client:
        for headers in ({}, {"If-None-Match": "anything"}, {"If-Modified-Since": "Mon, 01 Jan 2024 00:00:00 GMT"}):
            response = await client.get(strategy.path, headers=headers)

            assert response.status_code == 200
            assert response.headers["cache-control"] == strategy.cache_control
            assert response.headers["content-type"] == "application/json"
            assert response.json()["cacheStrategy"] == strategy.label


@pytest.mark.anyio
async def test_repeated_calls_differ_only_in_timestamp() -> None:
    with travel(datetime(2024, 1, 1, 0, 0, 0, tzinfo=ZoneInfo("UTC")), tick=False) as traveller:
        async with make_client(create_app()) as client:
            first = (await client.get("/max-age")).json()
            traveller.shift(timedelta(seconds=5))
            second = (await client.get("/max-age")).json()

    assert first["timestamp"] == "2024-01-01T00:00:00.000Z"
    assert second["timestamp"] == "2024-01-01T00:00:05.000Z"
    assert {**first, "timestamp": None} == {**second, "timestamp": None}


@pytest.mark.anyio
async def test_etag_round_trip() -> None:
    async with make_client(create_app()) as client:
        response = await client.get("/etag-demo")
        etag = response.headers["etag"]

        assert response.status_code == 200
        assert response.json()["etag"] == etag

        conditional = await client.get("/etag-demo", headers={"If-None-Match": etag})

    assert conditional.status_code == 304
    assert conditional.content == b""
    assert "content-type" not in conditional.headers
    assert conditional.headers["etag"] == etag
    assert conditional.headers["cache-control"] == "public, max-age=0, must-revalidate"


@pytest.mark.anyio
async def test_etag_is_stale_after_update() -> None:
    async with make_client(create_app()) as client:
        old_etag = (await client.get("/etag-demo")).headers["etag"]

        await client.get("/update-data")
        response = await client.get("/etag-demo", headers={"If-None-Match": old_etag})

    assert response.status_code == 200
    assert response.headers["etag"] != old_etag
    assert response.json()["counter"] == 1
    assert response.json()["version"] == 2


@pytest.mark.anyio
async def test_last_modified_round_trip() -> None:
    with travel(datetime(2024, 1, 1, 0, 0, 0, tzinfo=ZoneInfo("UTC")), tick=False) as traveller:
        async with make_client(create_app()) as client:
            response = await client.get("/last-modified-demo")
            last_modified = response.headers["last-modified"]

            assert last_modified == "Mon, 01 Jan 2024 00:00:00 GMT"
            assert response.json()["lastModified"] == last_modified

            conditional = await client.get("/last-modified-demo", headers={"If-Modified-Since": last_modified})

            assert conditional.status_code == 304
            assert conditional.content == b""
            assert "content-type" not in conditional.headers

            traveller.shift(timedelta(seconds=10))
            await client.get("/update-data")
            response = await client.get("/last-modified-demo", headers={"If-Modified-Since": last_modified})

    assert response.status_code == 200
    assert response.headers["last-modified"] == "Mon, 01 Jan 2024 00:00:10 GMT"


@pytest.mark.anyio
async def test_combined_strategy_inclusive_or() -> None:
    with travel(datetime(2024, 1, 1, 0, 0, 0, tzinfo=ZoneInfo("UTC")), tick=False):
        async with make_client(create_app()) as client:
            response = await client.get("/combined-strategy")
            etag = response.headers["etag"]
            last_modified = response.headers["last-modified"]

            only_etag = await client.get(
                "/combined-strategy",
                headers={"If-None-Match": etag, "If-Modified-Since": "Thu, 01 Jan 1970 00:00:00 GMT"},
            )
            only_date = await client.get(
                "/combined-strategy",
                headers={"If-None-Match": "stale", "If-Modified-Since": last_modified},
            )
            neither = await client.get(
                "/combined-strategy",
                headers={"If-None-Match": "stale", "If-Modified-Since": "Thu, 01 Jan 1970 00:00:00 GMT"},
            )

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=20, stale-while-revalidate=40, must-revalidate"
    assert only_etag.status_code == 304
    assert only_date.status_code == 304
    assert neither.status_code == 200


@pytest.mark.anyio
@travel(datetime(2024, 1, 1, 0, 0, 0, tzinfo=ZoneInfo("UTC")), tick=False)
async def test_update_data() -> None:
    async with make_client(create_app()) as client:
        response = await client.get("/update-data")

    assert response.status_code == 200
    assert response.json() == snapshot(
        {
            "message": "Data updated successfully",
            "newCounter": 1,
            "newVersion": 2,
            "updatedAt": "2024-01-01T00:00:00.000Z",
        }
    )


@pytest.mark.anyio
async def test_concurrent_updates() -> None:
    state = ServerState()

    async with make_client(create_app(state)) as client:

        async def update() -> None:
            response = await client.get("/update-data")
            assert response.status_code == 200

        async with anyio.create_task_group() as tg:
            for _ in range(25):
                tg.start_soon(update)

        status = (await client.get("/api/status")).json()

    assert status["dataStore"]["counter"] == 25
    assert status["dataStore"]["version"] == 26
    assert state.snapshot().counter == 25


@pytest.mark.anyio
@travel(datetime(2024, 1, 1, 0, 0, 0, tzinfo=ZoneInfo("UTC")), tick=False)
async def test_force_error() -> None:
    state = ServerState()

    async with make_client(create_app(state)) as client:
        for _ in range(3):
            response = await client.get("/force-error")

            assert response.status_code == 500
            assert response.json() == snapshot(
                {
                    "error": "Simulated server error for stale-if-error testing",
                    "timestamp": "2024-01-01T00:00:00.000Z",
                }
            )

    assert state.snapshot().counter == 0
    assert state.snapshot().version == 1


@pytest.mark.anyio
@travel(datetime(2024, 1, 1, 0, 0, 0, tzinfo=ZoneInfo("UTC")), tick=False)
async def test_api_status() -> None:
    async with make_client(create_app()) as client:
        response = await client.get("/api/status")

    assert response.status_code == 200
    assert response.json() == snapshot(
        {
            "serverTime": "2024-01-01T00:00:00.000Z",
            "dataStore": {"counter": 0, "lastUpdated": "2024-01-01T00:00:00.000Z", "version": 1},
            "uptime": 0.0,
        }
    )


@pytest.mark.anyio
async def test_index_links_every_endpoint() -> None:
    async with make_client(create_app()) as client:
        response = await client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    for path in [s.path for s in STRATEGIES] + ["/update-data", "/force-error", "/api/status"]:
        assert f'href="{path}"' in response.text
    assert "<h2>Conditional Requests</h2>" in response.text


@pytest.mark.anyio
async def test_unhandled_errors_become_json(caplog: pytest.LogCaptureFixture) -> None:
    app = create_app()

    async def broken() -> None:
        raise RuntimeError("boom")

    app.add_api_route("/broken", broken, methods=["GET"])

    async with make_client(app, raise_app_exceptions=False) as client:
        response = await client.get("/broken")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error"
    assert any("Unhandled error: path=/broken error=boom" in msg for msg in caplog.messages)


@pytest.mark.anyio
async def test_states_are_isolated_per_app() -> None:
    async with make_client(create_app()) as first, make_client(create_app()) as second:
        await first.get("/update-data")

        assert (await first.get("/max-age")).json()["counter"] == 1
        assert (await second.get("/max-age")).json()["counter"] == 0
