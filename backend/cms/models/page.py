from cms.extensions import db
from .base import BaseModel
from .soft_delete_mixin import SoftDeleteMixin

PAGE_STATUSES = ("draft", "review", "published")


class Page(BaseModel, SoftDeleteMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    excerpt = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(50), nullable=False, default='page', index=True)
    status = db.Column(db.String(50), nullable=False, default='draft', index=True)
    is_published = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime(timezone=True), nullable=True)
    settings = db.Column(db.JSON(none_as_null=True), default=dict)

    author_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("pages.id", ondelete="SET NULL"), nullable=True)

    author = db.relationship("User")
    parent = db.relationship("Page", remote_side="Page.id")

    # Ordered page <-> section pivot rows
    section_links = db.relationship(
        "PageSection",
        back_populates="page",
        order_by="PageSection.order",
        cascade="all, delete-orphan"
    )

    @property
    def sections(self):
        return [link.section for link in self.section_links]


class PageSection(db.Model):
    __tablename__ = "page_section"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    page_id = db.Column(db.Integer, db.ForeignKey("pages.id", ondelete="CASCADE"), nullable=False)
    section_id = db.Column(db.Integer, db.ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True)
    order = db.Column(db.Integer, nullable=False, default=0)

    page = db.relationship("Page", back_populates="section_links")
    section = db.relationship("Section", back_populates="page_links")

    __table_args__ = (
        db.UniqueConstraint("page_id", "order", name="uq_page_section_order"),
    )
