def normalize_media(media):
    return {
        "id": media.id,
        "type": media.type,
        "title": media.title,
        "filename": media.filename,
        "original_name": media.original_name,
        "mime_type": media.mime_type,
        "size": media.size,
        "url": media.url,
        "meta": media.meta or {},
    }
