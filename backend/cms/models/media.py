from cms.extensions import db
from .base import BaseModel
from .soft_delete_mixin import SoftDeleteMixin


class Media(BaseModel, SoftDeleteMixin):
    __tablename__ = "media"

    type = db.Column(db.String(20), nullable=False, default="file")  # image, video, file, audio
    disk = db.Column(db.String(50), nullable=False, default="local")
    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(100), nullable=False, default="application/octet-stream")
    size = db.Column(db.BigInteger, nullable=False, default=0)
    path = db.Column(db.String(512), nullable=False)
    url = db.Column(db.String(512), nullable=True)
    meta = db.Column(db.JSON, default=dict)  # dimensions, alt, title...
    is_public = db.Column(db.Boolean, default=True)

    @property
    def title(self):
        meta = self.meta or {}
        return meta.get("title") or self.original_name or self.filename
