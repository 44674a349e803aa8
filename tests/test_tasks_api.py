"""Tests for the tasks API."""
import pytest

from taskmanager.config import settings

TASKS_URL = "/api/v1/tasks"


async def _post_task(client, headers, **payload):
    response = await client.post(TASKS_URL, headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_task(client, auth_headers, test_user):
    """Create a task and read it back."""
    created = await _post_task(client, auth_headers, title="Write report")
    assert created["status"] == "TODO"
    assert created["priority"] == "MEDIUM"
    assert created["archived"] is False
    assert created["deleted_at"] is None
    assert created["owner_id"] == test_user.id

    response = await client.get(f"{TASKS_URL}/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Write report"


@pytest.mark.asyncio
async def test_blank_title_rejected(client, auth_headers):
    response = await client.post(TASKS_URL, headers=auth_headers, json={"title": "   "})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.get(TASKS_URL)
    assert response.status_code == 401

    response = await client.get(TASKS_URL, headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_other_user_gets_not_found_or_forbidden(client, auth_headers, other_auth_headers):
    created = await _post_task(client, auth_headers, title="Private")
    task_url = f"{TASKS_URL}/{created['id']}"

    assert (await client.get(task_url, headers=other_auth_headers)).status_code == 404
    assert (
        await client.put(task_url, headers=other_auth_headers, json={"title": "Mine now"})
    ).status_code == 404
    assert (await client.patch(f"{task_url}/archive", headers=other_auth_headers)).status_code == 404
    assert (await client.delete(task_url, headers=other_auth_headers)).status_code == 404

    assert (await client.delete(task_url, headers=auth_headers)).status_code == 204
    assert (await client.patch(f"{task_url}/restore", headers=other_auth_headers)).status_code == 403
    assert (
        await client.delete(f"{task_url}/permanent", headers=other_auth_headers)
    ).status_code == 403


@pytest.mark.asyncio
async def test_status_update_endpoint(client, auth_headers):
    created = await _post_task(client, auth_headers, title="Status me")
    url = f"{TASKS_URL}/{created['id']}/status"

    response = await client.patch(url, headers=auth_headers, json={"status": "IN_PROGRESS"})
    assert response.status_code == 200
    assert response.json()["status"] == "IN_PROGRESS"

    response = await client.patch(url, headers=auth_headers, json={"status": "BOGUS"})
    assert response.status_code == 400

    response = await client.get(f"{TASKS_URL}/{created['id']}", headers=auth_headers)
    assert response.json()["status"] == "IN_PROGRESS"

    response = await client.patch(
        f"{TASKS_URL}/99999/status", headers=auth_headers, json={"status": "COMPLETED"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_soft_delete_restore_cycle(client, auth_headers):
    created = await _post_task(client, auth_headers, title="Cycle")
    task_url = f"{TASKS_URL}/{created['id']}"

    assert (await client.delete(task_url, headers=auth_headers)).status_code == 204
    assert (await client.get(TASKS_URL, headers=auth_headers)).json() == []
    deleted = (await client.get(f"{TASKS_URL}/deleted", headers=auth_headers)).json()
    assert [t["id"] for t in deleted] == [created["id"]]

    response = await client.patch(f"{task_url}/restore", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["deleted_at"] is None

    response = await client.patch(f"{task_url}/restore", headers=auth_headers)
    assert response.status_code == 400

    listed = (await client.get(TASKS_URL, headers=auth_headers)).json()
    assert [t["id"] for t in listed] == [created["id"]]


@pytest.mark.asyncio
async def test_archive_unarchive_endpoints(client, auth_headers):
    created = await _post_task(client, auth_headers, title="Shelf")
    task_url = f"{TASKS_URL}/{created['id']}"

    response = await client.patch(f"{task_url}/archive", headers=auth_headers)
    assert response.json()["archived"] is True
    archived = (await client.get(f"{TASKS_URL}/archived", headers=auth_headers)).json()
    assert [t["id"] for t in archived] == [created["id"]]

    response = await client.patch(f"{task_url}/unarchive", headers=auth_headers)
    assert response.json()["archived"] is False
    assert response.json()["deleted_at"] is None


@pytest.mark.asyncio
async def test_filter_and_listing_endpoints(client, auth_headers):
    await _post_task(client, auth_headers, title="Fix login bug", priority="HIGH")
    await _post_task(client, auth_headers, title="Write docs", priority="LOW", description="login page")
    await _post_task(client, auth_headers, title="Deploy", status="COMPLETED", priority="HIGH")

    response = await client.get(
        f"{TASKS_URL}/filter",
        headers=auth_headers,
        params={"status": "TODO", "priority": "HIGH"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert [t["title"] for t in body["items"]] == ["Fix login bug"]

    body = (
        await client.get(
            f"{TASKS_URL}/filter",
            headers=auth_headers,
            params={"keyword": "LOGIN", "sort_by": "title", "sort_dir": "asc"},
        )
    ).json()
    assert [t["title"] for t in body["items"]] == ["Fix login bug", "Write docs"]

    high = (await client.get(f"{TASKS_URL}/priority/HIGH", headers=auth_headers)).json()
    assert {t["title"] for t in high} == {"Fix login bug", "Deploy"}

    done = (await client.get(f"{TASKS_URL}/status/COMPLETED", headers=auth_headers)).json()
    assert [t["title"] for t in done] == ["Deploy"]

    found = (await client.get(f"{TASKS_URL}/search", headers=auth_headers, params={"keyword": "docs"})).json()
    assert [t["title"] for t in found] == ["Write docs"]

    stats = (await client.get(f"{TASKS_URL}/stats", headers=auth_headers)).json()
    assert {entry["status"]: entry["count"] for entry in stats} == {
        "TODO": 2,
        "IN_PROGRESS": 0,
        "COMPLETED": 1,
    }


@pytest.mark.asyncio
async def test_paginated_list_endpoint(client, auth_headers):
    for i in range(3):
        await _post_task(client, auth_headers, title=f"Task {i}")

    body = (
        await client.get(
            TASKS_URL,
            headers=auth_headers,
            params={"paginate": "true", "size": 2, "sort_by": "title", "sort_dir": "asc"},
        )
    ).json()
    assert body["total"] == 3
    assert body["total_pages"] == 2
    assert [t["title"] for t in body["items"]] == ["Task 0", "Task 1"]

    response = await client.get(
        TASKS_URL, headers=auth_headers, params={"paginate": "true", "sort_by": "nope"}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_all_endpoint_soft_deletes(client, auth_headers, other_auth_headers):
    await _post_task(client, auth_headers, title="One")
    await _post_task(client, auth_headers, title="Two")
    await _post_task(client, other_auth_headers, title="Someone else's")

    assert (await client.delete(TASKS_URL, headers=auth_headers)).status_code == 204
    assert (await client.get(TASKS_URL, headers=auth_headers)).json() == []
    assert len((await client.get(f"{TASKS_URL}/deleted", headers=auth_headers)).json()) == 2
    assert len((await client.get(TASKS_URL, headers=other_auth_headers)).json()) == 1


@pytest.mark.asyncio
async def test_single_tenant_mode_ignores_identity(client, monkeypatch):
    """Single-tenant deployments share one list and purge on delete-all."""
    monkeypatch.setattr(settings, "TENANCY_MODE", "single")

    created = await _post_task(client, {}, title="Shared")
    assert created["owner_id"] is None

    listed = (await client.get(TASKS_URL)).json()
    assert [t["id"] for t in listed] == [created["id"]]

    assert (await client.delete(f"{TASKS_URL}/{created['id']}")).status_code == 204
    assert len((await client.get(f"{TASKS_URL}/deleted")).json()) == 1

    await _post_task(client, {}, title="Another")
    assert (await client.delete(TASKS_URL)).status_code == 204
    assert (await client.get(TASKS_URL)).json() == []
    assert (await client.get(f"{TASKS_URL}/deleted")).json() == []
