# cms/models/soft_delete_mixin.py
from cms.extensions import db
from .base import utc_now


class SoftDeleteMixin:
    deleted_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    def soft_delete(self):
        self.deleted_at = utc_now()

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    @classmethod
    def live(cls):
        """Query scoped to rows that are not soft-deleted."""
        return cls.query.filter(cls.deleted_at.is_(None))
