from contextlib import contextmanager
from cms.extensions import db

@contextmanager
def transactional():
    """Context manager for database transactions."""
    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

@contextmanager
def savepoint():
    """
    Nested transaction inside the current one.

    Only the work done inside the block is rolled back on error; the error
    still propagates so the caller can recover from it.
    """
    with db.session.begin_nested():
        yield
