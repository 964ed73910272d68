import re
import unicodedata
from typing import Optional

from cms.extensions import db

DEFAULT_SLUG = "item"


def slugify(value: Optional[str]) -> str:
    value = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return re.sub(r"-+", "-", value).strip("-")


def make_unique(scope, candidate: Optional[str], fallback_seed: Optional[str], *, column: str = "slug", exclude_id=None) -> str:
    """
    Returns a slug unique within ``scope`` (a model class).

    The candidate wins over the fallback seed; collisions get ``-2``, ``-3``...
    Soft-deleted rows still hold their slug, the unique index covers them.
    """
    base = slugify(candidate) or slugify(fallback_seed) or DEFAULT_SLUG
    attribute = getattr(scope, column)

    def taken(value):
        query = db.session.query(scope.id).filter(attribute == value)
        if exclude_id is not None:
            query = query.filter(scope.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    slug = base
    suffix = 2
    while taken(slug):
        slug = f"{base}-{suffix}"
        suffix += 1

    return slug
