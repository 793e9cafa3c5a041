"""应用级接口与全局异常处理"""

import json

import pytest
from starlette.requests import Request

from main import unhandled_exception_handler


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to Blog API"


@pytest.mark.asyncio
async def test_ping_sets_security_headers(client):
    response = await client.get("/ping", headers={"X-Request-ID": "abc123"})
    assert response.json() == {"message": "pong"}
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["x-request-id"] == "abc123"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_unknown_route_is_404(client):
    response = await client.get("/api/nothing-here")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unhandled_exception_handler_hides_details():
    request = Request({"type": "http", "method": "GET", "path": "/boom", "headers": []})
    response = await unhandled_exception_handler(request, RuntimeError("secret internals"))
    assert response.status_code == 500
    assert json.loads(response.body) == {"detail": "Something went wrong!"}
