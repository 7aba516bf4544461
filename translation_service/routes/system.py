"""
System Routes - health and export cache administration
"""

from flask import Blueprint

from translation_service.api_responses import ErrorCode, error_response, success_response
from translation_service.constants import BUILD_VERSION
from translation_service.db import check_db_connection
from translation_service.routes import get_services

system_bp = Blueprint("system", __name__, url_prefix="/api/system")


@system_bp.route("/health")
def health():
    """Database reachability plus cache backend status"""
    db_ok, db_error = check_db_connection()
    data = {
        "status": "healthy" if db_ok else "unhealthy",
        "version": BUILD_VERSION,
        "database": {"status": "ok" if db_ok else "error"},
        "cache": get_services().export_cache.info(),
    }
    if not db_ok:
        data["database"]["error"] = db_error
        return error_response(
            ErrorCode.SERVICE_UNAVAILABLE, message="Database unavailable", details=data, status_code=503
        )
    return success_response(data=data)


@system_bp.route("/cache")
def cache_info():
    return success_response(data=get_services().export_cache.info())


@system_bp.route("/cache", methods=["DELETE"])
def clear_cache():
    removed = get_services().export_cache.clear()
    return success_response(data={"removed": removed}, message="Export cache cleared")
