from __future__ import annotations

from cms.extensions import db
from cms.models import AuditLog, Page, Section, User


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_login_rejects_bad_password(client, editor):
    response = client.post("/api/v1/auth/login", json={"email": editor.email, "password": "nope"})
    assert response.status_code == 401


def test_write_routes_require_token(client, payloads):
    response = client.post("/api/v1/pages", json=payloads.page([]))
    assert response.status_code == 401


def test_readers_cannot_write(client, payloads):
    reader = User(email="reader@example.com", role="user")
    reader.set_password("reader-password")
    db.session.add(reader)
    db.session.commit()

    token = client.post(
        "/api/v1/auth/login",
        json={"email": reader.email, "password": "reader-password"},
    ).get_json()["access_token"]

    response = client.post(
        "/api/v1/pages",
        json=payloads.page([]),
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403


def test_create_edit_and_update_page(client, auth_headers, editor, make_post, make_media, payloads):
    post = make_post()
    media = make_media()

    response = client.post("/api/v1/pages", headers=auth_headers, json=payloads.page([
        payloads.section(
            [[payloads.block("post", post.id)], [payloads.block("media", media.id)]],
            ui_type="2 columns",
        ),
    ]))
    assert response.status_code == 201
    created = response.get_json()
    assert created["slug"] == "about"
    assert db.session.get(Page, created["id"]).author_id == editor.id

    response = client.get(f"/api/v1/pages/{created['id']}/edit", headers=auth_headers)
    assert response.status_code == 200
    dto = response.get_json()
    assert dto["sections"] == created["sections"]

    dto["title"] = "About us"
    response = client.put(f"/api/v1/pages/{created['id']}", headers=auth_headers, json=dto)
    assert response.status_code == 200
    assert response.get_json()["title"] == "About us"
    assert response.get_json()["sections"] == created["sections"]

    actions = [log.action for log in AuditLog.query.order_by(AuditLog.id)]
    assert actions == ["page.create", "page.update"]


def test_invalid_payload_returns_validation_error(client, auth_headers, payloads):
    payload = payloads.page([payloads.section([[]])])
    payload["sections"][0]["layout"]["columns_count"] = 9

    response = client.post("/api/v1/pages", headers=auth_headers, json=payload)

    assert response.status_code == 400
    assert response.get_json()["error"] == "ValidationError"


def test_missing_content_returns_not_found_and_writes_nothing(client, auth_headers, payloads):
    response = client.post("/api/v1/pages", headers=auth_headers, json=payloads.page([
        payloads.section([[payloads.block("media", 31337)]]),
    ]))

    assert response.status_code == 404
    assert response.get_json() == {"error": "NotFoundError", "message": "Media 31337 not found"}
    assert Page.query.count() == 0


def test_stale_update_is_rejected(client, auth_headers, payloads):
    created = client.post("/api/v1/pages", headers=auth_headers, json=payloads.page([])).get_json()

    response = client.put(
        f"/api/v1/pages/{created['id']}",
        headers={**auth_headers, "If-Unmodified-Since": "Mon, 01 Jan 2001 00:00:00 GMT"},
        json=payloads.page([]),
    )

    assert response.status_code == 409
    assert response.get_json()["error"] == "Conflict"


def test_prune_orphans_query_flag(client, auth_headers, payloads):
    created = client.post("/api/v1/pages", headers=auth_headers, json=payloads.page([
        payloads.section([[]], title="Temporary"),
    ])).get_json()
    section_id = created["sections"][0]["id"]

    response = client.put(
        f"/api/v1/pages/{created['id']}?prune_orphans=1",
        headers=auth_headers,
        json=payloads.page([]),
    )

    assert response.status_code == 200
    assert db.session.get(Section, section_id).is_deleted is True


def test_public_page_and_delete(client, auth_headers, payloads):
    created = client.post(
        "/api/v1/pages",
        headers=auth_headers,
        json=payloads.page([], title="Services", status="published"),
    ).get_json()

    response = client.get("/api/v1/pages/services")
    assert response.status_code == 200
    assert response.get_json()["page"]["title"] == "Services"

    response = client.delete(f"/api/v1/pages/{created['id']}", headers=auth_headers)
    assert response.status_code == 200

    assert client.get("/api/v1/pages/services").status_code == 404
    assert client.get(f"/api/v1/pages/{created['id']}/edit", headers=auth_headers).status_code == 404


def test_openapi_document_is_served(client):
    response = client.get("/openapi/cms.yaml")
    assert response.status_code == 200
    assert b"Page Composition CMS API" in response.data
    response.close()
