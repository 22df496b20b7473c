"""
Records API: /records CRUD over a temporary JSON file.

Scenarios
- Create -> 201 with store-assigned id; concurrent requests get distinct ids.
- Get/Put/Delete unknown id -> 404 with {"error","code","success"} payload.
- Put merges only sent fields and refuses to change the id.
- Storage failure -> 500 storage_failure; list degrades to [].
"""

import asyncio
import json

import pytest


pytestmark = pytest.mark.anyio


async def test_create_and_list(client):
    r1 = await client.post("/records", json={})
    r2 = await client.post("/records", json={"login": "bob", "fullName": "Bob Smith", "phone": 998})

    assert r1.status_code == 201 and r1.json() == {"id": 1}
    assert r2.status_code == 201
    assert r2.json() == {"id": 2, "login": "bob", "fullName": "Bob Smith", "phone": "998"}

    listed = await client.get("/records")
    assert listed.status_code == 200
    assert [r["id"] for r in listed.json()] == [1, 2]
    assert "X-Request-ID" in listed.headers


async def test_concurrent_create_requests(client):
    responses = await asyncio.gather(*[client.post("/records", json={"n": i}) for i in range(10)])

    assert all(r.status_code == 201 for r in responses)
    assert sorted(r.json()["id"] for r in responses) == list(range(1, 11))


async def test_get_by_id(client):
    await client.post("/records", json={"login": "a"})

    ok = await client.get("/records/1")
    missing = await client.get("/records/2")

    assert ok.status_code == 200 and ok.json() == {"id": 1, "login": "a"}
    assert missing.status_code == 404
    assert missing.json() == {"error": "Student not found", "code": "not_found", "success": False}


async def test_non_integer_id_is_rejected(client):
    r = await client.get("/records/abc")

    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"
    assert r.json()["success"] is False
    assert "student_id" in r.json()["error"]


async def test_update_merges_fields(client):
    await client.post("/records", json={"login": "a", "phone": "1", "studentId": "G-1"})

    r = await client.put("/records/1", json={"phone": "2"})

    assert r.status_code == 200
    assert r.json() == {"id": 1, "login": "a", "phone": "2", "studentId": "G-1"}


async def test_update_errors(client, students_file):
    await client.post("/records", json={"login": "a"})
    before = students_file.read_bytes()

    missing = await client.put("/records/9", json={"login": "b"})
    id_change = await client.put("/records/1", json={"id": 3})

    assert missing.status_code == 404 and missing.json()["code"] == "not_found"
    assert id_change.status_code == 400 and id_change.json()["code"] == "immutable_field"
    assert students_file.read_bytes() == before


async def test_delete(client, students_file):
    await client.post("/records", json={"login": "a"})
    await client.post("/records", json={"login": "b"})

    r = await client.delete("/records/1")
    assert r.status_code == 200
    assert r.json() == {"message": "Student deleted successfully"}

    before = students_file.read_bytes()
    again = await client.delete("/records/1")
    assert again.status_code == 404
    assert students_file.read_bytes() == before
    assert [s["login"] for s in json.loads(before)] == ["b"]


async def test_storage_failure(client, students_file):
    students_file.write_text("garbage", encoding="utf-8")

    listed = await client.get("/records")
    created = await client.post("/records", json={})

    assert listed.status_code == 200 and listed.json() == []
    assert created.status_code == 500
    assert created.json()["code"] == "storage_failure"
    assert created.json()["success"] is False


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200 and r.json()["status"] == "healthy"


async def test_non_object_record_is_a_storage_failure(client, students_file):
    students_file.write_text(json.dumps([None, {"id": 1}]), encoding="utf-8")

    r = await client.get("/records/1")
    listed = await client.get("/records")

    assert r.status_code == 500
    assert r.json() == {
        "error": "Student storage is unavailable",
        "code": "storage_failure",
        "success": False,
    }
    assert listed.status_code == 200 and listed.json() == []


async def test_invalid_body_gets_structured_error(client):
    r = await client.post("/records", json={"login": ["not", "a", "string"]})

    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"
    assert (await client.get("/records")).json() == []
