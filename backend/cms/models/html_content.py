from cms.extensions import db
from .base import BaseModel


class HtmlContent(BaseModel):
    __tablename__ = "html_contents"

    content = db.Column(db.Text, nullable=False, default="")
