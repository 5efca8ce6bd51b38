"""Task endpoints: CRUD, toggle, pagination, filtering and per-user scoping."""

import pytest

from models.task import TaskStatus

from tests.conftest import bearer, register


def _create(client, headers, **body):
    body.setdefault("title", "Write tests")
    r = client.post("/api/v1/tasks", json=body, headers=headers)
    assert r.status_code == 201, r.get_json()
    return r.get_json()


# ═══════════════════════════════════════════════════════════
# Status transitions
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "current, expected",
    [
        (TaskStatus.TODO, TaskStatus.IN_PROGRESS),
        (TaskStatus.IN_PROGRESS, TaskStatus.DONE),
        (TaskStatus.DONE, TaskStatus.TODO),
    ],
)
def test_status_next_is_total(current, expected):
    assert current.next() is expected


# ═══════════════════════════════════════════════════════════
# CRUD
# ═══════════════════════════════════════════════════════════


def test_create_task_defaults_to_todo(client, auth_headers):
    task = _create(client, auth_headers, title="Buy milk", description="2 litres")
    assert task["title"] == "Buy milk"
    assert task["description"] == "2 litres"
    assert task["status"] == "TODO"
    assert {"id", "createdAt", "updatedAt"} <= set(task)


def test_create_task_with_status(client, auth_headers):
    task = _create(client, auth_headers, status="IN_PROGRESS")
    assert task["status"] == "IN_PROGRESS"


def test_create_task_validation(client, auth_headers):
    r = client.post(
        "/api/v1/tasks", json={"title": "", "status": "LATER"}, headers=auth_headers
    )
    assert r.status_code == 400
    fields = {d["field"] for d in r.get_json()["details"]}
    assert fields == {"title", "status"}


def test_title_too_long(client, auth_headers):
    r = client.post("/api/v1/tasks", json={"title": "x" * 256}, headers=auth_headers)
    assert r.status_code == 400
    assert r.get_json()["details"] == [{"field": "title", "message": "Title too long"}]


def test_get_update_delete(client, auth_headers):
    task = _create(client, auth_headers)
    url = f"/api/v1/tasks/{task['id']}"

    assert client.get(url, headers=auth_headers).get_json()["title"] == "Write tests"

    r = client.patch(url, json={"status": "DONE", "title": "Wrote tests"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()["status"] == "DONE"
    assert r.get_json()["title"] == "Wrote tests"
    assert r.get_json()["description"] is None

    r = client.delete(url, headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json() == {"message": "Task deleted successfully"}
    assert client.get(url, headers=auth_headers).status_code == 404


def test_toggle_cycles_status(client, auth_headers):
    task = _create(client, auth_headers)
    url = f"/api/v1/tasks/{task['id']}/toggle"

    seen = [client.patch(url, headers=auth_headers).get_json()["status"] for _ in range(3)]
    assert seen == ["IN_PROGRESS", "DONE", "TODO"]


def test_unknown_task_is_404(client, auth_headers):
    r = client.get("/api/v1/tasks/does-not-exist", headers=auth_headers)
    assert r.status_code == 404
    assert r.get_json()["message"] == "Task not found"


# ═══════════════════════════════════════════════════════════
# Scoping
# ═══════════════════════════════════════════════════════════


def test_other_users_task_looks_absent(client, auth_headers):
    task = _create(client, auth_headers)
    mallory = bearer(register(client, email="mallory@test.com")["accessToken"])
    url = f"/api/v1/tasks/{task['id']}"

    for r in (
        client.get(url, headers=mallory),
        client.patch(url, json={"title": "mine now"}, headers=mallory),
        client.patch(f"{url}/toggle", headers=mallory),
        client.delete(url, headers=mallory),
    ):
        assert r.status_code == 404
        assert r.get_json()["message"] == "Task not found"

    assert client.get(url, headers=auth_headers).get_json()["title"] == "Write tests"
    assert client.get("/api/v1/tasks", headers=mallory).get_json()["pagination"]["total"] == 0


# ═══════════════════════════════════════════════════════════
# Listing
# ═══════════════════════════════════════════════════════════


def test_list_is_newest_first_and_paginated(client, auth_headers):
    for i in range(12):
        _create(client, auth_headers, title=f"task {i}")

    r = client.get("/api/v1/tasks", headers=auth_headers)
    body = r.get_json()
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 12, "totalPages": 2}
    assert [t["title"] for t in body["tasks"]][:2] == ["task 11", "task 10"]

    r = client.get("/api/v1/tasks?page=2&limit=10", headers=auth_headers)
    assert [t["title"] for t in r.get_json()["tasks"]] == ["task 1", "task 0"]


def test_list_limit_is_clamped(client, auth_headers):
    r = client.get("/api/v1/tasks?limit=1000&page=0", headers=auth_headers)
    assert r.get_json()["pagination"]["limit"] == 100
    assert r.get_json()["pagination"]["page"] == 1


def test_list_rejects_non_integer_paging(client, auth_headers):
    r = client.get("/api/v1/tasks?page=abc", headers=auth_headers)
    assert r.status_code == 400
    assert r.get_json()["error"] == "BAD_REQUEST"


def test_list_filters_by_status_and_query(client, auth_headers):
    _create(client, auth_headers, title="Buy MILK")
    _create(client, auth_headers, title="Buy bread", status="DONE")
    _create(client, auth_headers, title="Call mom", status="DONE")

    r = client.get("/api/v1/tasks?status=DONE", headers=auth_headers)
    assert {t["title"] for t in r.get_json()["tasks"]} == {"Buy bread", "Call mom"}

    r = client.get("/api/v1/tasks?q=milk", headers=auth_headers)
    assert [t["title"] for t in r.get_json()["tasks"]] == ["Buy MILK"]

    r = client.get("/api/v1/tasks?q=buy&status=DONE", headers=auth_headers)
    assert [t["title"] for t in r.get_json()["tasks"]] == ["Buy bread"]


def test_list_search_treats_wildcards_literally(client, auth_headers):
    _create(client, auth_headers, title="100% done")
    _create(client, auth_headers, title="1000 things")

    r = client.get("/api/v1/tasks?q=100%25", headers=auth_headers)
    assert [t["title"] for t in r.get_json()["tasks"]] == ["100% done"]


def test_list_rejects_unknown_status(client, auth_headers):
    r = client.get("/api/v1/tasks?status=LATER", headers=auth_headers)
    assert r.status_code == 400
