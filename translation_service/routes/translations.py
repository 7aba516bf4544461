"""
Translation Routes - listing, CRUD and export
"""

from flask import Blueprint, jsonify, request

from translation_service.api_responses import paginated_response, success_response
from translation_service.routes import get_services
from translation_service.services.query_engine import TranslationFilter
from translation_service.utils import now_utc
from translation_service.validation import validate_export_args, validate_translation_payload

translations_bp = Blueprint("translations", __name__, url_prefix="/api")


@translations_bp.route("/translations")
def list_translations():
    """Paginated, filtered list of translations with their tags"""
    services = get_services()
    api_settings = services.settings["api"]
    filters = TranslationFilter.from_args(
        request.args,
        default_per_page=api_settings["default_per_page"],
        max_per_page=api_settings["max_per_page"],
    )
    page = services.query_engine.paginate(filters)
    return paginated_response(page)


@translations_bp.route("/translations", methods=["POST"])
def create_translation():
    payload = validate_translation_payload(request.get_json(silent=True), partial=False)
    translation = get_services().translations.create(payload)
    return success_response(
        data=translation.to_dict(), message="Translation created successfully", status_code=201
    )


@translations_bp.route("/translations/export")
def export_translations():
    """
    Full key -> content slice for one locale/namespace (optionally tag
    filtered), served through the export cache
    """
    export_request = validate_export_args(request.args)
    result = get_services().export_cache.export(
        export_request.locale, export_request.namespace, export_request.tags
    )

    resp = jsonify(
        {
            "locale": export_request.locale,
            "namespace": export_request.namespace,
            "translations": result.translations,
            "count": result.count,
            "exported_at": now_utc().isoformat(),
            "cache_hit": result.cache_hit,
        }
    )
    resp.headers["X-Cache"] = "HIT" if result.cache_hit else "MISS"
    return resp, 200


@translations_bp.route("/translations/<int:translation_id>")
def show_translation(translation_id):
    translation = get_services().translations.get(translation_id)
    return success_response(data=translation.to_dict())


@translations_bp.route("/translations/<int:translation_id>", methods=["PUT", "PATCH"])
def update_translation(translation_id):
    services = get_services()
    # 404 takes precedence over body validation
    services.translations.get(translation_id)
    payload = validate_translation_payload(request.get_json(silent=True), partial=True)
    translation = services.translations.update(translation_id, payload)
    return success_response(data=translation.to_dict(), message="Translation updated successfully")


@translations_bp.route("/translations/<int:translation_id>", methods=["DELETE"])
def delete_translation(translation_id):
    get_services().translations.delete(translation_id)
    return success_response(message="Translation deleted successfully")
