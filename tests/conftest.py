from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from adapters.coolify_client import CoolifyClient

BASE_URL = "https://coolify.test"
TOKEN = "test-token"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def make_client() -> Callable[[Handler], tuple[CoolifyClient, RecordingTransport]]:
    def _factory(handler: Handler) -> tuple[CoolifyClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        return CoolifyClient(BASE_URL, TOKEN, transport=transport), transport

    return _factory


def respond(status: int = 200, payload: Any = None) -> Handler:
    def _handler(request: httpx.Request) -> httpx.Response:
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    return _handler


def project_payload(**overrides: Any) -> dict[str, Any]:
    data = {
        "uuid": "p-1",
        "name": "alpha",
        "description": "first project",
        "teamId": "t-1",
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-02T10:00:00Z",
    }
    data.update(overrides)
    return data


def server_payload(**overrides: Any) -> dict[str, Any]:
    data = {
        "uuid": "s-1",
        "name": "edge",
        "ip": "10.0.0.5",
        "port": 22,
        "status": "reachable",
        "teamId": "t-1",
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return data


def application_payload(**overrides: Any) -> dict[str, Any]:
    data = {
        "uuid": "a-1",
        "name": "web",
        "repository": "https://github.com/acme/web",
        "branch": "main",
        "projectUuid": "p-1",
        "environmentName": "production",
        "status": "running",
        "buildPack": "nixpacks",
        "teamId": "t-1",
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return data


def database_payload(**overrides: Any) -> dict[str, Any]:
    data = {
        "uuid": "d-1",
        "name": "main-db",
        "type": "postgresql",
        "version": "16",
        "projectUuid": "p-1",
        "environmentName": "production",
        "status": "running",
        "teamId": "t-1",
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return data


def service_payload(**overrides: Any) -> dict[str, Any]:
    data = {
        "uuid": "sv-1",
        "name": "analytics",
        "type": "plausible",
        "projectUuid": "p-1",
        "environmentName": "production",
        "status": "running",
        "teamId": "t-1",
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return data


def deployment_payload(**overrides: Any) -> dict[str, Any]:
    data = {
        "uuid": "dep-1",
        "applicationUuid": "a-1",
        "status": "waiting",
        "commit": "abc123",
        "branch": "main",
        "buildId": 42,
        "createdAt": "2024-05-01T10:00:00Z",
        "updatedAt": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return data
