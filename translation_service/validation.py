"""
Request validation - turns raw JSON bodies and query strings into typed records.

Nothing reaches the repositories without passing through here first.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from translation_service.constants import (
    DEFAULT_NAMESPACE,
    KEY_MAX_LENGTH,
    LOCALE_MAX_LENGTH,
    NAMESPACE_MAX_LENGTH,
    TAG_DESCRIPTION_MAX_LENGTH,
    TAG_NAME_MAX_LENGTH,
)
from translation_service.exceptions import ValidationException
from translation_service.utils import parse_bool, split_tag_names

# Fields a write request may carry, in the order errors are reported
TRANSLATION_FIELDS = ("key", "locale", "content", "namespace", "is_active", "metadata", "tags")
REQUIRED_ON_CREATE = ("key", "locale", "content")


@dataclass
class TranslationPayload:
    """Validated write request. `provided` lists the fields the client sent."""

    key: Optional[str] = None
    locale: Optional[str] = None
    content: Optional[str] = None
    namespace: Optional[str] = None
    is_active: Optional[bool] = None
    metadata: Optional[dict] = None
    tags: Optional[List[str]] = None
    provided: frozenset = field(default_factory=frozenset)

    def has(self, name):
        return name in self.provided

    def column_values(self):
        """Values for the Translation columns the client supplied"""
        values = {}
        for name in ("key", "locale", "content", "namespace", "is_active"):
            if self.has(name):
                values[name] = getattr(self, name)
        if self.has("metadata"):
            values["meta_data"] = self.metadata
        return values


@dataclass
class ExportRequest:
    locale: str
    namespace: str = DEFAULT_NAMESPACE
    tags: List[str] = field(default_factory=list)


class _Errors:
    def __init__(self):
        self.fields: Dict[str, List[str]] = {}

    def add(self, name, message):
        self.fields.setdefault(name, []).append(message)

    def raise_if_any(self):
        if self.fields:
            raise ValidationException(self.fields)


def _check_string(errors, name, value, max_length=None, allow_empty=False):
    if not isinstance(value, str):
        errors.add(name, f"The {name} field must be a string.")
        return False
    if not allow_empty and not value.strip():
        errors.add(name, f"The {name} field is required.")
        return False
    if max_length is not None and len(value) > max_length:
        errors.add(name, f"The {name} field must not be greater than {max_length} characters.")
        return False
    return True


def _check_tags(errors, value):
    if not isinstance(value, list):
        errors.add("tags", "The tags field must be an array.")
        return None

    names = []
    for index, name in enumerate(value):
        label = f"tags.{index}"
        if not isinstance(name, str) or not name.strip():
            errors.add(label, f"The {label} field must be a non-empty string.")
        elif len(name.strip()) > TAG_NAME_MAX_LENGTH:
            errors.add(label, f"The {label} field must not be greater than {TAG_NAME_MAX_LENGTH} characters.")
        else:
            names.append(name.strip())
    return list(dict.fromkeys(names))


def validate_translation_payload(data, partial=False):
    """
    Validate a create (partial=False) or update (partial=True) body.

    Key uniqueness needs the store and is checked by the service.
    """
    errors = _Errors()
    if not isinstance(data, dict):
        errors.add("body", "The request body must be a JSON object.")
        errors.raise_if_any()

    if not partial:
        for name in REQUIRED_ON_CREATE:
            if data.get(name) is None:
                errors.add(name, f"The {name} field is required.")

    values = {}
    provided = set()

    for name in TRANSLATION_FIELDS:
        if name not in data or (name in REQUIRED_ON_CREATE and data[name] is None and not partial):
            continue
        value = data[name]

        if name == "key":
            if _check_string(errors, name, value, KEY_MAX_LENGTH):
                values[name] = value.strip()
        elif name == "locale":
            if _check_string(errors, name, value, LOCALE_MAX_LENGTH):
                values[name] = value.strip()
        elif name == "content":
            if _check_string(errors, name, value):
                values[name] = value
        elif name == "namespace":
            if _check_string(errors, name, value, NAMESPACE_MAX_LENGTH):
                values[name] = value.strip()
        elif name == "is_active":
            parsed = parse_bool(value)
            if parsed is None:
                errors.add(name, "The is_active field must be true or false.")
            else:
                values[name] = parsed
        elif name == "metadata":
            if value is not None and not isinstance(value, dict):
                errors.add(name, "The metadata field must be an object.")
            else:
                values[name] = value
        elif name == "tags":
            tags = _check_tags(errors, value)
            if tags is not None:
                values[name] = tags

        provided.add(name)

    errors.raise_if_any()

    if not partial:
        values.setdefault("namespace", DEFAULT_NAMESPACE)
        values.setdefault("is_active", True)
        provided.update(("namespace", "is_active"))

    return TranslationPayload(provided=frozenset(provided), **values)


def validate_tag_payload(data):
    """Validate a tag body; returns (name, description)"""
    errors = _Errors()
    if not isinstance(data, dict):
        errors.add("body", "The request body must be a JSON object.")
        errors.raise_if_any()

    name = data.get("name")
    description = data.get("description")

    if name is None:
        errors.add("name", "The name field is required.")
    else:
        _check_string(errors, "name", name, TAG_NAME_MAX_LENGTH)
    if description is not None:
        _check_string(errors, "description", description, TAG_DESCRIPTION_MAX_LENGTH, allow_empty=True)

    errors.raise_if_any()
    return name.strip(), description


def validate_export_args(args):
    """
    Validate export query parameters.

    Tags may come as `tags[]=a&tags[]=b`, repeated `tags=a&tags=b` or `tags=a,b`.
    """
    errors = _Errors()

    locale = args.get("locale")
    if locale is None or not locale.strip():
        errors.add("locale", "The locale field is required.")
    elif len(locale.strip()) > LOCALE_MAX_LENGTH:
        errors.add("locale", f"The locale field must not be greater than {LOCALE_MAX_LENGTH} characters.")

    namespace = args.get("namespace")
    if namespace is None or not namespace.strip():
        namespace = DEFAULT_NAMESPACE
    elif len(namespace.strip()) > NAMESPACE_MAX_LENGTH:
        errors.add("namespace", f"The namespace field must not be greater than {NAMESPACE_MAX_LENGTH} characters.")

    errors.raise_if_any()

    tags = split_tag_names(args.getlist("tags[]") + args.getlist("tags"))
    return ExportRequest(locale=locale.strip(), namespace=namespace.strip(), tags=tags)
