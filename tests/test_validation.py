"""
Tests for request validation
"""
import pytest
from werkzeug.datastructures import MultiDict

from translation_service.exceptions import ValidationException
from translation_service.utils import parse_bool, split_tag_names
from translation_service.validation import (
    validate_export_args,
    validate_tag_payload,
    validate_translation_payload,
)


def errors_of(func, *args, **kwargs):
    with pytest.raises(ValidationException) as exc_info:
        func(*args, **kwargs)
    return exc_info.value.errors


class TestTranslationPayload:

    def test_create_defaults(self):
        payload = validate_translation_payload({'key': ' a.b ', 'locale': 'en', 'content': 'Hi'})

        assert payload.key == 'a.b'
        assert payload.namespace == 'general'
        assert payload.is_active is True
        assert payload.tags is None
        assert payload.column_values() == {
            'key': 'a.b', 'locale': 'en', 'content': 'Hi', 'namespace': 'general', 'is_active': True,
        }

    def test_required_on_create(self):
        errors = errors_of(validate_translation_payload, {'key': 'a'})
        assert set(errors) == {'locale', 'content'}

    def test_null_required_field(self):
        errors = errors_of(validate_translation_payload, {'key': 'a', 'locale': None, 'content': 'x'})
        assert errors['locale'] == ['The locale field is required.']

    def test_length_limits(self):
        errors = errors_of(
            validate_translation_payload,
            {'key': 'k' * 256, 'locale': 'l' * 11, 'content': 'x', 'namespace': 'n' * 256},
        )
        assert set(errors) == {'key', 'locale', 'namespace'}

    def test_empty_content_rejected(self):
        errors = errors_of(validate_translation_payload, {'key': 'a', 'locale': 'en', 'content': '  '})
        assert 'content' in errors

    def test_types(self):
        errors = errors_of(
            validate_translation_payload,
            {'key': 1, 'locale': 'en', 'content': 'x', 'metadata': [], 'tags': 'web', 'is_active': 'perhaps'},
        )
        assert set(errors) == {'key', 'metadata', 'tags', 'is_active'}

    def test_tag_entries(self):
        errors = errors_of(
            validate_translation_payload,
            {'key': 'a', 'locale': 'en', 'content': 'x', 'tags': ['ok', '', 't' * 51]},
        )
        assert set(errors) == {'tags.1', 'tags.2'}

    def test_tags_trimmed_and_deduplicated(self):
        payload = validate_translation_payload(
            {'key': 'a', 'locale': 'en', 'content': 'x', 'tags': [' web', 'web', 'mobile']}
        )
        assert payload.tags == ['web', 'mobile']

    def test_partial_tracks_provided_fields(self):
        payload = validate_translation_payload({'content': 'New', 'metadata': None}, partial=True)

        assert payload.has('content')
        assert not payload.has('tags')
        assert payload.column_values() == {'content': 'New', 'meta_data': None}

    def test_partial_empty_tags_provided(self):
        payload = validate_translation_payload({'tags': []}, partial=True)
        assert payload.has('tags')
        assert payload.tags == []

    def test_body_must_be_object(self):
        assert 'body' in errors_of(validate_translation_payload, ['not', 'an', 'object'])


class TestTagPayload:

    def test_valid(self):
        assert validate_tag_payload({'name': ' web ', 'description': 'Web app'}) == ('web', 'Web app')

    def test_name_required(self):
        assert 'name' in errors_of(validate_tag_payload, {})

    def test_name_too_long(self):
        assert 'name' in errors_of(validate_tag_payload, {'name': 'x' * 51})


class TestExportArgs:

    def test_defaults(self):
        request = validate_export_args(MultiDict({'locale': 'en'}))
        assert request.locale == 'en'
        assert request.namespace == 'general'
        assert request.tags == []

    def test_tag_forms_are_combined(self):
        args = MultiDict([('locale', 'en'), ('tags[]', 'web'), ('tags', 'mobile,web')])
        assert validate_export_args(args).tags == ['web', 'mobile']

    def test_locale_required(self):
        assert 'locale' in errors_of(validate_export_args, MultiDict({'namespace': 'admin'}))

    def test_locale_too_long(self):
        assert 'locale' in errors_of(validate_export_args, MultiDict({'locale': 'x' * 11}))


class TestParsing:

    @pytest.mark.parametrize('value,expected', [
        (True, True), (0, False), ('YES', True), ('off', False), ('', False), ('maybe', None), (None, None),
    ])
    def test_parse_bool(self, value, expected):
        assert parse_bool(value) is expected

    def test_split_tag_names(self):
        assert split_tag_names(['a, b', 'b', ' ', 'c']) == ['a', 'b', 'c']
        assert split_tag_names('x,y') == ['x', 'y']
        assert split_tag_names(None) == []
