from cms.extensions import db
from .base import BaseModel
from .soft_delete_mixin import SoftDeleteMixin

SECTION_TYPES = ("one_column", "two_columns", "three_columns", "four_columns", "hero", "gallery")


class Section(BaseModel, SoftDeleteMixin):
    __tablename__ = "sections"

    title = db.Column(db.String(255), nullable=True)
    type = db.Column(db.String(50), nullable=False, default="one_column")
    color = db.Column(db.String(20), nullable=False, default="#ffffff")
    slug = db.Column(db.String(255), nullable=True, unique=True)
    is_published = db.Column(db.Boolean, default=False)
    settings = db.Column(db.JSON, default=dict)

    page_links = db.relationship("PageSection", back_populates="section")

    # Ordered section <-> block pivot rows (order spans all columns)
    block_links = db.relationship(
        "BlockSection",
        back_populates="section",
        order_by="BlockSection.order",
        cascade="all, delete-orphan"
    )


class BlockSection(db.Model):
    __tablename__ = "block_section"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    block_id = db.Column(db.Integer, db.ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id = db.Column(db.Integer, db.ForeignKey("sections.id", ondelete="CASCADE"), nullable=False)
    order = db.Column(db.Integer, nullable=False, default=0)
    column_index = db.Column(db.Integer, nullable=False, default=0)

    section = db.relationship("Section", back_populates="block_links")
    block = db.relationship("Block", back_populates="section_links")

    __table_args__ = (
        db.UniqueConstraint("section_id", "order", name="uq_section_block_order"),
        db.Index("idx_block_section_order", "section_id", "order"),
    )
