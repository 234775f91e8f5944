"""HTTP-level tests for the record endpoints, backed by in-memory fakes."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from tests.fakes import (
    TEST_SECRET,
    FakeAttachmentStorage,
    FakeWalkinRecordRepository,
    make_token,
    store_down,
)
from walkin.application.services import WalkinRecordService
from walkin.infrastructure.auth.jwt_identity_extractor import JwtIdentityExtractor
from walkin.infrastructure.dependencies import get_walkin_record_service
from walkin.main import app

U1 = {"Authorization": f"Bearer {make_token({'uid': 'u1', 'email': 'one@example.com'})}"}
U2 = {"Authorization": f"Bearer {make_token({'uid': 'u2'})}"}

JANE = {
    "student": {
        "name": "Jane",
        "emails": [{"email": "jane@example.com"}],
        "numbers": [{"number": "+1555", "country_code": "+1"}, {"number": "+1666"}],
    }
}


@pytest.fixture
def repo() -> FakeWalkinRecordRepository:
    return FakeWalkinRecordRepository()


@pytest.fixture
def storage() -> FakeAttachmentStorage:
    return FakeAttachmentStorage()


@pytest.fixture
def client_app(repo, storage):
    service = WalkinRecordService(repo, JwtIdentityExtractor(TEST_SECRET), storage)
    app.dependency_overrides[get_walkin_record_service] = lambda: service
    yield app
    app.dependency_overrides.clear()


async def _post_record(client: AsyncClient, headers=U1) -> dict:
    response = await client.post("/api/v1/records", json=JANE, headers=headers)
    assert response.status_code == 201
    return response.json()["record"]


@pytest.mark.asyncio
async def test_create_and_list_records(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await client.post("/api/v1/records", json=JANE, headers=U1)
        await _post_record(client, headers=U2)
        listed = await client.get("/api/v1/records", headers=U1)

    assert created.status_code == 201
    body = created.json()
    assert body["message"] == "Record created successfully"
    assert body["record"]["author"]["uid"] == "u1"
    assert [n["verified"] for n in body["record"]["student"]["numbers"]] == [None, None]

    assert listed.status_code == 200
    page = listed.json()
    assert (page["page"], page["limit"], page["count"]) == (1, 10, 1)
    assert page["data"][0]["id"] == body["record"]["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Token abc"},
        {"Authorization": "Bearer not.a-valid.token"},
        {"Authorization": f"Bearer {make_token({'uid': 'u1'}, exp=1)}"},
    ],
)
async def test_requests_without_valid_token_are_401(client_app, headers):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/records", json=JANE, headers=headers)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_invalid_create_body_is_400(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/records", json={"student": {"numbers": []}}, headers=U1)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bad_pagination_is_400(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/records", params={"page": "abc"}, headers=U1)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_multipart_update_with_attachment(client_app, storage):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await _post_record(client)
        response = await client.post(
            "/api/v1/records/records-data",
            data={
                "verified": json.dumps([{"number": "+1555", "verified": True}]),
                "comment": "Confirmed by phone",
            },
            files={"record": ("call.mp3", b"audio-bytes", "audio/mpeg")},
            headers=U1,
        )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Record updated successfully"
    record = body["record"]
    assert record["id"] == created["id"]
    assert [n["verified"] for n in record["student"]["numbers"]] == [True, None]
    assert record["details"] == {"comment": "Confirmed by phone", "type": "walkin"}
    assert record["record_attachment"] == "media/call.mp3"
    assert record["version"] == 2
    assert storage.files["media/call.mp3"] == b"audio-bytes"


@pytest.mark.asyncio
async def test_multipart_update_with_bad_verified_is_400(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _post_record(client)
        response = await client.post(
            "/api/v1/records/records-data",
            data={"verified": "not json"},
            headers=U1,
        )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_by_other_author_is_403(client_app, repo):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await _post_record(client)
        response = await client.put(
            f"/api/v1/records/{created['id']}",
            json={"verified": [{"number": "+1555", "verified": True}], "comment": "nope"},
            headers=U2,
        )

    assert response.status_code == 403
    assert repo.stored(created["id"]).details is None


@pytest.mark.asyncio
async def test_put_update_by_owner(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await _post_record(client)
        response = await client.put(
            f"/api/v1/records/{created['id']}",
            json={"verified": [{"number": "+1666", "verified": False}], "comment": "wrong person"},
            headers=U1,
        )
        fetched = await client.get(f"/api/v1/records/{created['id']}", headers=U1)

    assert response.status_code == 200
    assert fetched.status_code == 200
    assert [n["verified"] for n in fetched.json()["student"]["numbers"]] == [None, False]
    assert fetched.json()["details"]["comment"] == "wrong person"


@pytest.mark.asyncio
async def test_unknown_record_is_404(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        put = await client.put("/api/v1/records/999", json={"comment": "x"}, headers=U1)
        get = await client.get("/api/v1/records/999", headers=U1)
        by_number = await client.post(
            "/api/v1/records/records-data", params={"number": "+1000"}, data={"comment": "x"}, headers=U1
        )

    assert put.status_code == 404
    assert get.status_code == 404
    assert by_number.status_code == 404


@pytest.mark.asyncio
async def test_store_outage_is_503(client_app, repo):
    repo.fail_with = store_down()
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/records", headers=U1)

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_non_integer_record_id_is_400(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _post_record(client)
        get = await client.get("/api/v1/records/abc", headers=U1)
        put = await client.put("/api/v1/records/abc", json={"comment": "x"}, headers=U1)
        form = await client.post(
            "/api/v1/records/records-data", params={"id": "abc"}, data={"comment": "x"}, headers=U1
        )

    assert (get.status_code, put.status_code, form.status_code) == (400, 400, 400)


@pytest.mark.asyncio
async def test_reading_another_authors_record_is_403(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await _post_record(client)
        response = await client.get(f"/api/v1/records/{created['id']}", headers=U2)

    assert response.status_code == 403
    assert response.json()["detail"] == "You are not authorized to read this record"
