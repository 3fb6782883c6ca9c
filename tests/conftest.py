"""Shared fixtures for sensu-runbook tests."""

from __future__ import annotations

import json
from typing import Callable, List

import httpx
import pytest

from runbook.config import DispatchConfig


ENV_VARS = [
    "SENSU_RUNBOOK_JOB_ID",
    "SENSU_RUNBOOK_COMMAND",
    "SENSU_RUNBOOK_TIMEOUT",
    "SENSU_RUNBOOK_ASSETS",
    "SENSU_RUNBOOK_SUBSCRIPTIONS",
    "SENSU_RUNBOOK_EVENT_LOG",
    "SENSU_RUNBOOK_CONFIG",
    "SENSU_NAMESPACE",
    "SENSU_API_URL",
    "SENSU_ACCESS_TOKEN",
    "SENSU_TRUSTED_CA_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's Sensu environment out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config() -> DispatchConfig:
    """A complete config with a fixed job id."""
    return DispatchConfig(
        command="uptime",
        subscriptions=("web", "db", "cache"),
        namespace="default",
        sensu_api_url="https://sensu.example.com:8080",
        timeout=30,
        job_id="restart-nginx",
        sensu_access_token="secret-token",
    )


class FakeSensu:
    """Records requests and answers with queued status codes."""

    def __init__(self, create_status: int = 201, invoke_status: int = 202, body: str = ""):
        self.create_status = create_status
        self.invoke_status = invoke_status
        self.body = body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/execute"):
            return httpx.Response(self.invoke_status, text=self.body)
        return httpx.Response(self.create_status, text=self.body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    def bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def fake_sensu() -> Callable[..., FakeSensu]:
    """Factory for FakeSensu handlers."""
    return FakeSensu
