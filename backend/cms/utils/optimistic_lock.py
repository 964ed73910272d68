from flask import request, abort
from datetime import timezone
from dateutil.parser import parse, ParserError


def as_utc(ts):
    """Naive timestamps (SQLite drops tzinfo) are read as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def enforce_optimistic_lock(entity, label=None):
    """
    Rejects a write when the row changed after the client loaded it.

    The client echoes the ``updated_at`` it was served in If-Unmodified-Since;
    without the header the write goes through unchecked.
    """
    header = request.headers.get("If-Unmodified-Since")
    if not header or entity.updated_at is None:
        return

    try:
        client_ts = as_utc(parse(header))
    except (ParserError, OverflowError, ValueError):
        abort(400, description="Invalid If-Unmodified-Since header")

    # HTTP dates carry whole seconds only
    server_ts = as_utc(entity.updated_at).replace(microsecond=0)
    client_ts = client_ts.replace(microsecond=0)

    if server_ts > client_ts:
        label = label or type(entity).__name__
        abort(409, description=f"{label} {entity.id} was modified by someone else, reload it first")
