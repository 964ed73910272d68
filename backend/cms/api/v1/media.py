from flask import request, jsonify
from flask_jwt_extended import jwt_required
from cms.domain.exceptions import ValidationError
from cms.application.media.ingest_media import ingest_media
from cms.normalizers.media import normalize_media
from cms.utils.decorators import roles_required, current_actor_id
from . import v1_bp


@v1_bp.route("/media", methods=["POST"])
@jwt_required()
@roles_required("admin", "editor")
def upload_media():
    file = request.files.get("file")
    if file is None or not file.filename:
        raise ValidationError("A file is required")

    meta = {}
    for key in ("title", "alt"):
        if request.form.get(key):
            meta[key] = request.form[key]

    media = ingest_media(file=file, meta=meta, actor_id=current_actor_id())
    return jsonify(normalize_media(media)), 201
