"""
API Response Utilities - Standardized responses for the translation endpoints
"""

from flask import jsonify


class ErrorCode:
    SUCCESS = "SUCCESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


def success_response(data=None, message=None, status_code=200):
    """
    Standard success response format for API endpoints
    """
    response = {"code": ErrorCode.SUCCESS, "success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return jsonify(response), status_code


def error_response(error_code=ErrorCode.INTERNAL_ERROR, message=None, details=None, status_code=400):
    """
    Standard error response format for API endpoints
    """
    response = {"code": error_code, "success": False}

    if message:
        response["message"] = message
    elif error_code == ErrorCode.NOT_FOUND:
        response["message"] = "Resource not found"
    elif error_code == ErrorCode.VALIDATION_ERROR:
        response["message"] = "Invalid request parameters"
    elif error_code == ErrorCode.INTERNAL_ERROR:
        response["message"] = "An unexpected error occurred"

    if details:
        response["details"] = details

    return jsonify(response), status_code


def paginated_response(page):
    """
    List response: `data` holds the items, `meta` the page position.

    `page` is a TranslationPage from the query engine.
    """
    response = {
        "code": ErrorCode.SUCCESS,
        "success": True,
        "data": [item.to_dict() for item in page.items],
        "meta": {
            "current_page": page.page,
            "last_page": page.last_page,
            "per_page": page.per_page,
            "total": page.total,
        },
    }

    resp = jsonify(response)
    resp.headers["X-Total-Count"] = str(page.total)
    resp.headers["X-Page"] = str(page.page)
    resp.headers["X-Per-Page"] = str(page.per_page)
    return resp, 200
