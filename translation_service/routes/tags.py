"""
Tag Routes
"""

from flask import Blueprint, request

from translation_service.api_responses import success_response
from translation_service.routes import get_services
from translation_service.validation import validate_tag_payload

tags_bp = Blueprint("tags", __name__, url_prefix="/api")


@tags_bp.route("/tags")
def list_tags():
    """Get all available tags"""
    tags = get_services().translations.list_tags()
    return success_response(data=[tag.to_dict() for tag in tags])


@tags_bp.route("/tags", methods=["POST"])
def create_tag():
    """Create a tag unless one with the same name exists"""
    name, description = validate_tag_payload(request.get_json(silent=True))
    tag, created = get_services().translations.create_tag(name, description)
    if created:
        return success_response(data=tag.to_dict(), message="Tag created successfully", status_code=201)
    return success_response(data=tag.to_dict(), message="Tag already exists")
