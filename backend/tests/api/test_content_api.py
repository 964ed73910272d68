from __future__ import annotations

import io

from cms.models import Media, MenuItem


def test_create_and_update_post(client, auth_headers):
    response = client.post("/api/v1/posts", headers=auth_headers, json={
        "title": "First post",
        "status": "published",
        "tags": ["news"],
    })
    assert response.status_code == 201
    post = response.get_json()
    assert post["slug"] == "first-post"
    assert post["tags"] == ["news"]

    response = client.put(f"/api/v1/posts/{post['id']}", headers=auth_headers, json={"status": "draft"})
    assert response.status_code == 200
    assert response.get_json()["is_published"] is False


def test_update_unknown_post(client, auth_headers):
    response = client.put("/api/v1/posts/404", headers=auth_headers, json={"title": "x"})
    assert response.status_code == 404


def test_upload_media(app, client, auth_headers, tmp_path):
    app.config["UPLOAD_FOLDER"] = str(tmp_path)
    try:
        response = client.post(
            "/api/v1/media",
            headers=auth_headers,
            data={"file": (io.BytesIO(b"fake-png"), "Logo File.png"), "alt": "Logo"},
            content_type="multipart/form-data",
        )
    finally:
        app.config["UPLOAD_FOLDER"] = "uploads"

    assert response.status_code == 201
    media = response.get_json()
    assert media["original_name"] == "Logo_File.png"
    assert media["type"] == "image"
    assert media["meta"] == {"alt": "Logo"}
    assert media["url"].startswith("/uploads/")
    assert (tmp_path / media["filename"]).read_bytes() == b"fake-png"
    assert Media.query.count() == 1


def test_upload_rejects_disallowed_extension(client, auth_headers):
    response = client.post(
        "/api/v1/media",
        headers=auth_headers,
        data={"file": (io.BytesIO(b"#!/bin/sh"), "script.sh")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "ValidationError"


def test_menu_lifecycle(client, auth_headers):
    response = client.post("/api/v1/menus", headers=auth_headers, json={
        "name": "Main",
        "tree": [
            {"id": "home", "label": "Home", "url": "/"},
            {"id": "blog", "label": "Blog", "url": "/blog", "children": [
                {"id": "tips", "label": "Tips", "url": "/blog/tips"},
            ]},
        ],
    })
    assert response.status_code == 201
    menu = response.get_json()
    home, blog = menu["tree"]
    assert blog["children"][0]["label"] == "Tips"

    public = client.get("/api/v1/menus/main/tree").get_json()
    assert [node["label"] for node in public["tree"]] == ["Home", "Blog"]

    response = client.put(f"/api/v1/menus/{menu['id']}", headers=auth_headers, json={
        "name": "Main",
        "tree": [
            {"id": blog["id"], "label": "Blog", "url": "/blog"},
            {"id": home["id"], "label": "Start", "url": "/", "is_visible": False},
        ],
    })
    assert response.status_code == 200
    assert MenuItem.query.count() == 2

    public = client.get("/api/v1/menus/main/tree").get_json()
    assert [node["label"] for node in public["tree"]] == ["Blog"]
    assert public["tree"][0]["children"] == []


def test_menu_with_duplicate_sibling_labels_is_rejected(client, auth_headers):
    response = client.post("/api/v1/menus", headers=auth_headers, json={
        "name": "Footer",
        "tree": [{"id": "a", "label": "Same"}, {"id": "b", "label": "Same"}],
    })
    assert response.status_code == 400
    assert MenuItem.query.count() == 0


def test_unknown_menu_tree_is_404(client):
    response = client.get("/api/v1/menus/missing/tree")
    assert response.status_code == 404
    assert response.get_json()["error"] == "NotFoundError"


def test_publish_archive_and_restore_post(client, auth_headers):
    post = client.post("/api/v1/posts", headers=auth_headers, json={"title": "Draft post"}).get_json()

    response = client.post(f"/api/v1/content/post/{post['id']}/publish", headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()["is_published"] is True

    response = client.post(f"/api/v1/content/post/{post['id']}/archive", headers=auth_headers)
    assert response.status_code == 200
    listed = client.get("/api/v1/content?type=post", headers=auth_headers).get_json()
    assert listed == []

    response = client.post(f"/api/v1/content/post/{post['id']}/restore", headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()["status"] == "draft"
    listed = client.get("/api/v1/content", headers=auth_headers).get_json()
    assert listed == [{"id": post["id"], "title": "Draft post", "type": "post"}]


def test_unknown_status_action_is_404(client, auth_headers):
    post = client.post("/api/v1/posts", headers=auth_headers, json={"title": "Any"}).get_json()

    response = client.post(f"/api/v1/content/post/{post['id']}/explode", headers=auth_headers)
    assert response.status_code == 404
    assert response.get_json()["error"] == "NotFoundError"

    response = client.post(f"/api/v1/content/widget/{post['id']}/publish", headers=auth_headers)
    assert response.status_code == 404


def test_status_routes_require_token(client):
    assert client.post("/api/v1/content/page/1/publish").status_code == 401
    assert client.get("/api/v1/content").status_code == 401


def test_home_is_public(client, auth_headers, payloads):
    assert client.get("/api/v1/home").get_json() == {"page": None, "menu": None}

    client.post("/api/v1/pages", headers=auth_headers, json=payloads.page([], title="Home", status="published"))
    client.post("/api/v1/menus", headers=auth_headers, json={
        "name": "Main",
        "tree": [{"id": "a", "label": "Home", "url": "/"}],
    })

    home = client.get("/api/v1/home").get_json()
    assert home["page"]["page"]["title"] == "Home"
    assert [node["label"] for node in home["menu"]["tree"]] == ["Home"]


def test_single_menu_item_routes(client, auth_headers):
    menu = client.post("/api/v1/menus", headers=auth_headers, json={"name": "Footer"}).get_json()

    response = client.post(
        f"/api/v1/menus/{menu['id']}/items",
        headers=auth_headers,
        json={"label": "Legal", "url": "/legal"},
    )
    assert response.status_code == 201
    item = response.get_json()["item"]
    assert item["position"] == 0

    response = client.post(f"/api/v1/menus/{menu['id']}/items", headers=auth_headers, json={"label": "Legal"})
    assert response.status_code == 400

    response = client.put(
        f"/api/v1/menus/{menu['id']}/items/{item['id']}",
        headers=auth_headers,
        json={"is_visible": False},
    )
    assert response.status_code == 200
    assert response.get_json()["item"]["url"] == "/legal"
    assert client.get("/api/v1/menus/footer/tree").get_json()["tree"] == []

    response = client.delete(f"/api/v1/menus/{menu['id']}/items/{item['id']}", headers=auth_headers)
    assert response.get_json() == {"deleted": 1}

    response = client.delete(f"/api/v1/menus/{menu['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert client.get("/api/v1/menus/footer/tree").status_code == 404
    assert MenuItem.query.count() == 0
