"""
Tests for the archetype API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from archetype_engine.features.archetypes.api import router as router_module
from archetype_engine.features.archetypes.errors import DataAccessError
from archetype_engine.features.archetypes.jobs import ArchetypeAssignmentJob
from archetype_engine.features.archetypes.services import ArchetypeAssignmentService
from archetype_engine.main import app

client = TestClient(app)


@pytest.fixture
def fake_service(interaction_store, profile_store, achievement_store, monkeypatch):
    service = ArchetypeAssignmentService(
        interaction_store=interaction_store,
        profile_store=profile_store,
        achievement_store=achievement_store,
    )
    job = ArchetypeAssignmentJob(service=service, inter_user_delay=0)
    monkeypatch.setattr(router_module, "archetype_assignment_service", service)
    monkeypatch.setattr(router_module, "archetype_assignment_job", job)
    return service


def test_list_archetypes():
    response = client.get("/archetypes")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 20
    assert {"key", "title", "emoji", "description"} <= set(data[0])


def test_get_single_archetype():
    response = client.get("/archetypes/the-chaos-goblin")

    assert response.status_code == 200
    assert response.json()["title"] == "The Chaos Goblin"


def test_get_unknown_archetype_returns_404():
    response = client.get("/archetypes/the-nobody")

    assert response.status_code == 404


def test_assign_all_returns_summary(fake_service, profile_store, interaction_store):
    profile_store.archetypes = {"user-1": None, "user-2": None}
    interaction_store.failing_users = {"user-2"}

    response = client.post("/archetypes/assign")

    assert response.status_code == 200
    data = response.json()
    assert data["total_users"] == 2
    assert data["updated"] == 1
    assert data["errored"] == 1
    assert data["errors"][0]["user_id"] == "user-2"


def test_assign_all_reports_listing_failure(fake_service, monkeypatch):
    async def broken_listing():
        raise DataAccessError("profiles unreachable", operation="list_all_user_ids")

    monkeypatch.setattr(router_module.archetype_assignment_job.profile_store, "list_all_user_ids", broken_listing)

    response = client.post("/archetypes/assign")

    assert response.status_code == 500
    assert "profiles unreachable" in response.json()["error"]


def test_assign_single_user(fake_service, profile_store):
    profile_store.archetypes = {"user-1": None}

    response = client.post("/archetypes/assign/user-1")

    assert response.status_code == 200
    data = response.json()
    assert data["archetype_key"] == "the-peaceful-observer"
    assert data["updated"] is True
    assert data["stats"]["total"] == 0


def test_assign_single_user_store_failure(fake_service, interaction_store):
    interaction_store.failing_users = {"user-1"}

    response = client.post("/archetypes/assign/user-1")

    assert response.status_code == 503


def test_assign_single_unknown_user_returns_404(fake_service, profile_store):
    profile_store.archetypes = {"user-1": None}

    response = client.post("/archetypes/assign/ghost-user")

    assert response.status_code == 404
    assert "ghost-user" in response.json()["detail"]
    assert profile_store.writes == []
