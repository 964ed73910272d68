# cms/api/v1/content.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from cms.application.content.publication import (
    archive_content,
    publish_content,
    restore_content,
    unpublish_content,
)
from cms.application.content.picker import list_linkable_content
from cms.application.cms.home import get_home_payload
from cms.domain.exceptions import NotFoundError
from cms.normalizers.page import normalize_page_for_editor
from cms.normalizers.post import normalize_post
from cms.utils.decorators import roles_required, current_actor_id
from . import v1_bp

STATUS_ACTIONS = {
    "publish": publish_content,
    "unpublish": unpublish_content,
    "archive": archive_content,
    "restore": restore_content,
}


def _normalize(kind, entity):
    if kind == "page":
        return normalize_page_for_editor(entity)
    return normalize_post(entity)


@v1_bp.route("/content/<kind>/<int:content_id>/<action>", methods=["POST"])
@jwt_required()
@roles_required("admin", "editor")
def change_content_status(kind, content_id, action):
    service = STATUS_ACTIONS.get(action)
    if service is None:
        raise NotFoundError(f"Unknown action '{action}'")

    entity = service(kind=kind, content_id=content_id, actor_id=current_actor_id())
    return jsonify(_normalize(kind, entity)), 200


@v1_bp.route("/content", methods=["GET"])
@jwt_required()
@roles_required("admin", "editor")
def list_content():
    return jsonify(list_linkable_content(request.args.get("type") or None)), 200


@v1_bp.route("/home", methods=["GET"])
def home():
    return jsonify(get_home_payload()), 200
