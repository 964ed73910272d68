from typing import Optional
from cms.application.content.publication import archive_content


def delete_page(
    *,
    page_id: int,
    actor_id: Optional[int] = None,
) -> None:
    """
    Soft-delete (archive) a page.

    Notes:
    - Section pivots are kept for audit history; reusable sections survive
    - The rendered page and menus linking it leave the cache in the same request
    """
    archive_content(kind="page", content_id=page_id, actor_id=actor_id)
