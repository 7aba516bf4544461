"""
Translation Service - Custom Exceptions and Exception Handlers
"""
import structlog
from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger('exceptions')


class TranslationServiceException(Exception):
    """Base exception for the translation service"""
    status_code = 400

    def __init__(self, message: str, code: str = "TRANSLATION_SERVICE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {
            'success': False,
            'code': self.code,
            'message': self.message
        }


class ValidationException(TranslationServiceException):
    """Malformed, missing or duplicate input, with per-field messages"""
    status_code = 422

    def __init__(self, errors: dict, message: str = "The given data was invalid."):
        self.errors = errors
        super().__init__(message, code="VALIDATION_ERROR")
        logger.warning(f"Validation error: {errors}")

    def to_dict(self):
        result = super().to_dict()
        result['errors'] = self.errors
        return result


class NotFoundException(TranslationServiceException):
    """Referenced record does not exist"""
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, code="NOT_FOUND")


class StorageException(TranslationServiceException):
    """Database transaction or connection failure"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, code="DATABASE_ERROR")
        logger.error(f"Database error: {message}")


class CacheException(TranslationServiceException):
    """Cache backend failure; callers degrade to the uncached path"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, code="CACHE_ERROR")
        logger.warning(f"Cache error: {message}")


def register_exception_handlers(app):
    """Register exception handlers with Flask app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle HTTP exceptions"""
        return jsonify({
            'success': False,
            'code': e.name.upper().replace(' ', '_'),
            'message': e.description
        }), e.code

    @app.errorhandler(TranslationServiceException)
    def handle_service_exception(e):
        """Handle translation service exceptions, status comes from the class"""
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        """Handle all other exceptions"""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred'
        }), 500
