from cms.extensions import db
from .base import BaseModel


class Menu(BaseModel):
    __tablename__ = "menus"

    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, unique=True, index=True)
    settings = db.Column(db.JSON, default=dict)

    items = db.relationship(
        "MenuItem",
        back_populates="menu",
        order_by="MenuItem.position",
        cascade="all, delete-orphan"
    )


class MenuItem(BaseModel):
    __tablename__ = "menu_items"

    menu_id = db.Column(db.Integer, db.ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=True, index=True)
    label = db.Column(db.String(255), nullable=False)
    url = db.Column(db.String(512), nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    is_visible = db.Column(db.Boolean, nullable=False, default=True)
    meta = db.Column(db.JSON, default=dict)

    # page | post | None
    linkable_type = db.Column(db.String(20), nullable=True)
    linkable_id = db.Column(db.Integer, nullable=True)

    menu = db.relationship("Menu", back_populates="items")
    children = db.relationship("MenuItem", order_by="MenuItem.position")

    __table_args__ = (
        db.UniqueConstraint("menu_id", "parent_id", "label", name="uq_menu_item_label"),
    )
