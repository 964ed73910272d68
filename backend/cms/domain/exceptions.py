class CMSError(Exception):
    """Base class for errors raised by the composition and sync services."""

    status_code = 500


class NotFoundError(CMSError):
    """An explicit reference (block, post, media, page, menu) has no live row."""

    status_code = 404


class ValidationError(CMSError):
    """Malformed payload, rejected at the boundary."""

    status_code = 400


class ConflictError(CMSError):
    """A uniqueness race could not be recovered by re-selecting the winner."""

    status_code = 409


class InvariantViolation(CMSError):
    status_code = 400
