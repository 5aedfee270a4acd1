"""Rate limiting integration tests."""

import uuid

import pytest
from fastapi import Request

from slowapi.util import get_remote_address

from csrms.core.rate_limiter import limiter
from csrms.main import app


def _test_key_func(request: Request) -> str:
    return request.headers.get("x-test-key", get_remote_address(request))


@app.post("/__limited")
@limiter.limit("3/minute", key_func=_test_key_func)
async def limited_endpoint(request: Request):  # pragma: no cover - exercised via tests
    return {"ok": True}


@pytest.mark.asyncio
async def test_per_endpoint_rate_limit(api_client):
    headers = {"x-test-key": f"per-test-{uuid.uuid4()}"}
    for _ in range(3):
        response = await api_client.post("/__limited", headers=headers)
        assert response.status_code == 200

    response = await api_client.post("/__limited", headers=headers)
    assert response.status_code == 429
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"].startswith("Rate limit exceeded")


@pytest.mark.asyncio
async def test_rate_limit_is_tracked_per_client(api_client):
    first = {"x-test-key": f"client-a-{uuid.uuid4()}"}
    second = {"x-test-key": f"client-b-{uuid.uuid4()}"}
    for _ in range(3):
        await api_client.post("/__limited", headers=first)

    assert (await api_client.post("/__limited", headers=first)).status_code == 429
    assert (await api_client.post("/__limited", headers=second)).status_code == 200
