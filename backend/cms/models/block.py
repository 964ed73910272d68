import enum
from cms.extensions import db
from .base import BaseModel
from .soft_delete_mixin import SoftDeleteMixin


class BlockKind(str, enum.Enum):
    POST = "post"
    MEDIA = "media"
    HTML = "html"


class Block(BaseModel, SoftDeleteMixin):
    __tablename__ = "blocks"

    # Tagged reference to the wrapped content row
    kind = db.Column(db.String(20), nullable=False)
    target_id = db.Column(db.Integer, nullable=False)
    template_hint = db.Column(db.String(100), nullable=True)
    settings = db.Column(db.JSON, default=dict)

    section_links = db.relationship("BlockSection", back_populates="block")

    __table_args__ = (
        # One canonical wrapper per content item
        db.UniqueConstraint("kind", "target_id", name="uq_block_target"),
    )
