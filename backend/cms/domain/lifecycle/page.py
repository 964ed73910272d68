from datetime import datetime, timezone
from typing import Optional

from cms.domain.exceptions import ValidationError

PUBLISHED = "published"
ALLOWED_STATUSES = ("draft", "review", PUBLISHED)


def apply_publication_status(entity, status: str, *, now: Optional[datetime] = None) -> None:
    """
    Sets status and the fields derived from it on a page or post.

    - published_at is stamped the first time the entity becomes published
      and kept on later saves while it stays published
    - leaving "published" clears both is_published and published_at
    """
    if status not in ALLOWED_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}', expected one of {', '.join(ALLOWED_STATUSES)}"
        )

    entity.status = status

    if status == PUBLISHED:
        entity.is_published = True
        if entity.published_at is None:
            entity.published_at = now or datetime.now(timezone.utc)
    else:
        entity.is_published = False
        entity.published_at = None
