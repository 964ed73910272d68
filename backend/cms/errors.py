from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException
from cms.domain.exceptions import CMSError


def _error_response(name, message, status_code):
    response = jsonify({
        "error": name,
        "message": message
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(CMSError)
    def handle_cms_error(error):
        # NotFoundError, ValidationError, ConflictError, InvariantViolation
        if error.status_code >= 500:
            current_app.logger.error("%s: %s", type(error).__name__, error)
        return _error_response(type(error).__name__, str(error), error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return _error_response(error.name, error.description, error.code)
