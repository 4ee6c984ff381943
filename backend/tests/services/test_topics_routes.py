"""Topics Routes - flat CRUD with soft delete on /api/v1/topics."""

from uuid import UUID

from sqlalchemy import select

from question_bank.models.topic import Topic

URL = "/api/v1/topics"


async def _create(client, en="Math", vi="Toán"):
    res = await client.post(URL, json={"name_en": en, "name_vi": vi})
    assert res.status_code == 201
    return res.json()["data"]


async def test_create_topic(client):
    res = await client.post(URL, json={"name_en": "Math", "name_vi": "Toán"})
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Topic created successfully"
    assert body["data"]["name_vi"] == "Toán"
    assert body["data"]["deleted_at"] is None


async def test_create_topic_requires_both_names(client, test_db):
    res = await client.post(URL, json={"name_en": "Math"})
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "name_en and name_vi are required"}
    assert (await test_db.execute(select(Topic))).scalars().all() == []


async def test_list_and_get(client):
    math = await _create(client)
    await _create(client, "History", "Lịch sử")

    listed = (await client.get(URL)).json()
    assert listed["message"] == "Topics retrieved successfully"
    assert len(listed["data"]) == 2

    single = await client.get(URL, params={"id": math["id"]})
    assert single.status_code == 200
    assert single.json()["data"]["name_en"] == "Math"


async def test_update_topic_is_partial(client):
    topic = await _create(client)

    res = await client.put(URL, params={"id": topic["id"]}, json={"name_en": "Mathematics"})

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["name_en"] == "Mathematics"
    assert data["name_vi"] == "Toán"


async def test_update_without_id_is_400(client):
    res = await client.put(URL, json={"name_en": "x"})
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Topic ID is required"}


async def test_soft_delete_topic(client, test_db):
    topic = await _create(client)

    res = await client.delete(URL, params={"id": topic["id"]})
    assert res.status_code == 200
    assert res.json()["message"] == "Topic deleted successfully"

    assert (await client.get(URL)).json()["data"] == []
    assert (await client.get(URL, params={"id": topic["id"]})).status_code == 404
    row = (await test_db.execute(select(Topic).where(Topic.id == UUID(topic["id"])))).scalar_one()
    assert row.deleted_at is not None


async def test_delete_missing_topic_is_404(client):
    res = await client.delete(URL, params={"id": "00000000-0000-0000-0000-000000000000"})
    assert res.status_code == 404


async def test_delete_without_id_is_400(client):
    res = await client.delete(URL)
    assert res.json() == {"success": False, "error": "Topic ID is required"}


async def test_store_failure_is_500(client, inject_store_faults):
    inject_store_faults({("insert", "topics"): 1})
    res = await client.post(URL, json={"name_en": "Math", "name_vi": "Toán"})
    assert res.status_code == 500
    assert res.json()["success"] is False
