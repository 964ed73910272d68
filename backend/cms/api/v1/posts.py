from flask import request, jsonify
from flask_jwt_extended import jwt_required
from cms.extensions import db
from cms.models.user import User
from cms.domain.exceptions import ValidationError
from cms.application.posts.save_post import create_post as create_post_service
from cms.application.posts.save_post import update_post as update_post_service
from cms.normalizers.post import normalize_post
from cms.utils.decorators import roles_required, current_actor_id
from . import v1_bp


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


@v1_bp.route("/posts", methods=["POST"])
@jwt_required()
@roles_required("admin", "editor")
def create_post():
    data = _json_body()

    actor_id = current_actor_id()
    author = db.session.get(User, actor_id) if actor_id is not None else None

    post = create_post_service(data=data, author=author)
    return jsonify(normalize_post(post)), 201


@v1_bp.route("/posts/<int:post_id>", methods=["PUT"])
@jwt_required()
@roles_required("admin", "editor")
def update_post(post_id):
    post = update_post_service(
        post_id=post_id,
        data=_json_body(),
        actor_id=current_actor_id(),
    )
    return jsonify(normalize_post(post)), 200
