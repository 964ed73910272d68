from typing import Any, Dict, Optional
from flask import current_app
from cms.extensions import db
from cms.models.media import Media
from cms.domain.exceptions import ValidationError
from cms.utils.audit import log_action
from cms.utils.media import LocalBlobStore, store_upload
from cms.utils.transaction import transactional


def ingest_media(
    *,
    file,
    meta: Optional[Dict[str, Any]] = None,
    actor_id: Optional[int] = None,
    store: Optional[LocalBlobStore] = None,
) -> Media:
    """
    Store an uploaded file and register it as a Media row.

    The blob is removed again when the row cannot be committed.
    """
    store = store or LocalBlobStore.from_app()

    try:
        stored = store_upload(file, store)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    media = Media()
    for field, value in stored.items():
        setattr(media, field, value)
    media.meta = meta or {}

    try:
        with transactional():
            db.session.add(media)
            db.session.flush()

            log_action(
                action="media.create",
                entity_type="media",
                entity_id=media.id,
                actor_id=actor_id,
                payload={"filename": media.filename, "size": media.size},
            )
    except Exception:
        current_app.logger.error("Media registration failed, removing %s", stored["path"])
        store.delete(stored["path"])
        raise

    return media
