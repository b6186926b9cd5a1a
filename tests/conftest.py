"""Shared fixtures for ga_dashboard tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ga_dashboard.main import create_app
from ga_dashboard.models.property import PropertyRegistry

from helpers import FakeQueryClient, dashboard_handler, make_settings

TEST_REGISTRY = {
    "defaultProperty": "freeshow",
    "groups": {
        "websites": {"label": "Websites", "items": {"freeshow": {"name": "FreeShow.app", "id": "408962359"}}},
        "apps": {"label": "Apps", "items": {"b1-admin": {"name": "B1 Admin", "id": "516573834"}}},
    },
}


@pytest.fixture()
def registry() -> PropertyRegistry:
    return PropertyRegistry.from_dict(TEST_REGISTRY)


@pytest.fixture()
def fake_client() -> FakeQueryClient:
    """Backend where every property reports the same healthy week."""
    return FakeQueryClient(dashboard_handler(
        ranges={
            "Today": (4, 1, 5, 12),
            "7 Days": (100, 30, 140, 500),
            "14 Days": (190, 55, 270, 950),
            "28 Days": (360, 95, 520, 1900),
        },
        realtime=2,
        sources=[("google / organic", 70), ("(direct) / (none)", 30)],
        countries=[("United States", 50), ("(not set)", 9)],
        sunday=14,
    ))


@pytest.fixture()
def client(fake_client, registry):
    """TestClient for an open (no password) dashboard backed by fake_client."""
    app = create_app(settings=make_settings(), query_client=fake_client, registry=registry)
    with TestClient(app) as tc:
        yield tc


@pytest.fixture()
def gated_client(fake_client, registry):
    """TestClient for a dashboard behind the shared password 'hunter2'."""
    app = create_app(
        settings=make_settings(dashboard_password="hunter2"),
        query_client=fake_client,
        registry=registry,
    )
    with TestClient(app) as tc:
        yield tc
