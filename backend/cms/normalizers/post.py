def normalize_post(post):
    return {
        "id": post.id,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "content": post.content,
        "type": post.type,
        "status": post.status,
        "is_published": post.is_published,
        "published_at": post.published_at.isoformat() if post.published_at else None,
        "image_position": post.image_position,
        "cover_media_id": post.cover_media_id,
        "tags": [tag.name for tag in post.tags],
        "updated_at": post.updated_at.isoformat() if post.updated_at else None,
    }
