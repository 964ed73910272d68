from __future__ import annotations

from uuid import uuid4

import pytest

from cms import create_app
from cms.extensions import cache, db
from cms.models import HtmlContent, Media, Post, User

EDITOR_PASSWORD = "editor-password"


@pytest.fixture(scope="session")
def app():
    app = create_app("testing")
    app.config.update(
        TESTING=True,
    )
    yield app


@pytest.fixture(autouse=True)
def database(app):
    # Every test runs inside one app context on a fresh schema
    with app.app_context():
        db.create_all()
        cache.clear()
        yield
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def editor():
    user = User(email=f"editor-{uuid4().hex[:8]}@example.com", role="editor")
    user.set_password(EDITOR_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def auth_headers(client, editor):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": editor.email, "password": EDITOR_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['access_token']}"}


@pytest.fixture()
def make_post():
    def factory(title="A post", **fields):
        post = Post(
            title=title,
            slug=f"post-{uuid4().hex[:8]}",
            content=fields.pop("content", "Body"),
            status="published",
            is_published=True,
            **fields,
        )
        db.session.add(post)
        db.session.commit()
        return post
    return factory


@pytest.fixture()
def make_media():
    def factory(original_name="photo.jpg", **fields):
        media = Media(
            type="image",
            filename=f"{uuid4().hex}.jpg",
            original_name=original_name,
            mime_type="image/jpeg",
            size=10,
            path=f"{uuid4().hex}.jpg",
            url="/uploads/photo.jpg",
            meta=fields.pop("meta", {}),
            **fields,
        )
        db.session.add(media)
        db.session.commit()
        return media
    return factory


@pytest.fixture()
def html_content():
    html = HtmlContent(content="<p>hello</p>")
    db.session.add(html)
    db.session.commit()
    return html


class Payloads:
    """Builders for editor payloads."""

    @staticmethod
    def block(content_type, content_id=None, **extra):
        data = {"contentType": content_type, "contentId": content_id}
        data.update(extra)
        return data

    @staticmethod
    def section(columns, ui_type="1 column", columns_count=None, **extra):
        data = {
            "title": extra.pop("title", "Section"),
            "ui_type": ui_type,
            "layout": {
                "columns_count": columns_count or max(1, len(columns)),
                "columns": [
                    {"index": index, "blocks": blocks}
                    for index, blocks in enumerate(columns)
                ],
            },
        }
        data.update(extra)
        return data

    @staticmethod
    def page(sections, title="About", status="draft", **extra):
        data = {
            "title": title,
            "type": "page",
            "status": status,
            "sections": sections,
        }
        data.update(extra)
        return data


@pytest.fixture()
def payloads():
    return Payloads
