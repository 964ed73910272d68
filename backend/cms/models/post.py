from cms.extensions import db
from .base import BaseModel
from .soft_delete_mixin import SoftDeleteMixin


post_tag = db.Table(
    "post_tag",
    db.Column("post_id", db.Integer, db.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.Integer, db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Post(BaseModel, SoftDeleteMixin):
    __tablename__ = "posts"

    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    excerpt = db.Column(db.String(500), nullable=True)
    content = db.Column(db.Text, nullable=False, default="")
    cover_media_id = db.Column(db.Integer, db.ForeignKey("media.id", ondelete="SET NULL"), nullable=True)
    image_position = db.Column(db.String(10), nullable=False, default="left")  # left | right
    type = db.Column(db.String(50), nullable=False, default="post")
    status = db.Column(db.String(50), nullable=False, default="draft", index=True)
    is_published = db.Column(db.Boolean, nullable=False, default=False)
    published_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)
    meta = db.Column(db.JSON, default=dict)

    author_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    cover_media = db.relationship("Media")
    tags = db.relationship("Tag", secondary=post_tag, back_populates="posts", order_by="Tag.name")


class Tag(BaseModel):
    __tablename__ = "tags"

    name = db.Column(db.String(100), nullable=False, unique=True)
    slug = db.Column(db.String(120), nullable=False, unique=True)

    posts = db.relationship("Post", secondary=post_tag, back_populates="tags")
