# cms/api/v1/pages.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from cms.extensions import db
from cms.models.page import Page
from cms.models.user import User
from cms.domain.exceptions import NotFoundError
from cms.application.cms.create_page import create_page as create_page_service
from cms.application.cms.update_page import update_page as update_page_service
from cms.application.cms.delete_page import delete_page as delete_page_service
from cms.application.cms.rendered_page import get_rendered_by_slug
from cms.normalizers.page import normalize_page_for_editor
from cms.validators.page import validate_page_payload
from cms.utils.decorators import roles_required, current_actor_id
from cms.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp

EDITOR_ROLES = ("admin", "editor")
TRUTHY = {"1", "true", "yes", "on"}


def _get_live_page(page_id):
    page = db.session.get(Page, page_id)
    if page is None or page.is_deleted:
        raise NotFoundError(f"Page {page_id} not found")
    return page


# ------------------------
# Pages (editor)
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def create_page():
    data = validate_page_payload(request.get_json(silent=True))

    actor_id = current_actor_id()
    author = db.session.get(User, actor_id) if actor_id is not None else None

    page = create_page_service(data=data, author=author)

    return jsonify(normalize_page_for_editor(page)), 201


@v1_bp.route("/pages/<int:page_id>/edit", methods=["GET"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def edit_page(page_id):
    page = _get_live_page(page_id)
    return jsonify(normalize_page_for_editor(page)), 200


@v1_bp.route("/pages/<int:page_id>", methods=["PUT"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def update_page(page_id):
    page = _get_live_page(page_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(page)

    data = validate_page_payload(request.get_json(silent=True))
    prune_orphans = request.args.get("prune_orphans", "").lower() in TRUTHY

    page = update_page_service(
        page=page,
        data=data,
        prune_orphans=prune_orphans,
        actor_id=current_actor_id(),
    )

    return jsonify(normalize_page_for_editor(page)), 200


@v1_bp.route("/pages/<int:page_id>", methods=["DELETE"])
@jwt_required()
@roles_required(*EDITOR_ROLES)
def delete_page(page_id):
    delete_page_service(page_id=page_id, actor_id=current_actor_id())
    return jsonify({"message": "Page deleted successfully"}), 200


# ------------------------
# Pages (public)
# ------------------------

@v1_bp.route("/pages/<slug>", methods=["GET"])
def get_page(slug):
    payload = get_rendered_by_slug(slug)
    if payload is None:
        raise NotFoundError(f"Page '{slug}' not found")
    return jsonify(payload), 200
