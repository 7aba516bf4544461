"""
Tests for the query engine: filter composition, pagination and export slices
"""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from werkzeug.datastructures import MultiDict

from translation_service.exceptions import StorageException
from translation_service.services.query_engine import (
    QueryEngine,
    TranslationFilter,
    build_translation_query,
)


def keys_of(page):
    return [item.key for item in page.items]


class TestTranslationFilterFromArgs:
    """Tests for parsing list query parameters"""

    def test_defaults(self):
        filters = TranslationFilter.from_args(MultiDict())
        assert filters.locale is None
        assert filters.namespace is None
        assert filters.search is None
        assert filters.tags is None
        assert filters.active_only is True
        assert filters.page == 1
        assert filters.per_page == 15

    def test_per_page_is_clamped(self):
        assert TranslationFilter.from_args(MultiDict({'per_page': '500'})).per_page == 100
        assert TranslationFilter.from_args(MultiDict({'per_page': '0'})).per_page == 1
        assert TranslationFilter.from_args(MultiDict({'per_page': 'lots'})).per_page == 15

    def test_page_never_below_one(self):
        assert TranslationFilter.from_args(MultiDict({'page': '-3'})).page == 1
        assert TranslationFilter.from_args(MultiDict({'page': 'abc'})).page == 1

    def test_tags_comma_form(self):
        filters = TranslationFilter.from_args(MultiDict({'tags': 'web, mobile,,web'}))
        assert filters.tags == ['web', 'mobile']

    def test_tags_array_form(self):
        filters = TranslationFilter.from_args(MultiDict([('tags[]', 'web'), ('tags[]', 'admin')]))
        assert filters.tags == ['web', 'admin']

    def test_blank_tags_mean_no_tag_filter(self):
        assert TranslationFilter.from_args(MultiDict({'tags': ' , '})).tags is None

    def test_unreadable_active_only_reads_as_false(self):
        assert TranslationFilter.from_args(MultiDict({'active_only': 'abc'})).active_only is False

    @pytest.mark.parametrize('raw,expected', [
        ('false', False), ('0', False), ('no', False), ('', False), ('garbage', False),
        ('true', True), ('1', True),
    ])
    def test_active_only(self, raw, expected):
        assert TranslationFilter.from_args(MultiDict({'active_only': raw})).active_only is expected


class TestBuildTranslationQuery:
    """Tests for clause composition"""

    def test_clause_order_is_fixed(self):
        filters = TranslationFilter(locale='en', namespace='general', search='hi', tags=['web'])
        where = str(build_translation_query(filters)).split('WHERE', 1)[1]

        positions = [
            where.index('translations.locale'),
            where.index('translations.namespace'),
            where.index('translations.key'),
            where.index('EXISTS'),
            where.index('translations.is_active'),
        ]
        assert positions == sorted(positions)

    def test_no_filters_no_where_clause(self):
        query = build_translation_query(TranslationFilter(active_only=False))
        assert 'WHERE' not in str(query)


class TestQueryEnginePaginate:
    """Tests for QueryEngine.paginate against the seeded store"""

    def test_active_only_by_default(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter())
        assert page.total == 5
        assert 'legacy.banner' not in keys_of(page)

    def test_include_inactive(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(active_only=False))
        assert page.total == 6

    def test_locale_and_namespace_are_conjunctive(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(locale='en', namespace='general'))
        assert sorted(keys_of(page)) == ['goodbye.title', 'welcome.title']

    def test_search_matches_key_or_content_case_insensitive(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(search='WELCOME'))
        assert sorted(keys_of(page)) == ['welcome.title', 'welcome.title.fr']

        page = services.query_engine.paginate(TranslationFilter(search='dashboard'))
        assert keys_of(page) == ['admin.dashboard']

    def test_search_treats_wildcards_literally(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(search='%'))
        assert keys_of(page) == ['admin.users']

    def test_tags_match_any(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(tags=['mobile', 'admin']))
        assert sorted(keys_of(page)) == ['admin.dashboard', 'welcome.title']

    def test_tags_do_not_duplicate_rows(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(tags=['web', 'mobile']))
        assert page.total == 3
        assert sorted(keys_of(page)) == ['goodbye.title', 'welcome.title', 'welcome.title.fr']

    def test_unknown_tag_returns_empty_page(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(tags=['does-not-exist']))
        assert page.items == []
        assert page.total == 0
        assert page.last_page == 1

    def test_unknown_locale_returns_empty_page(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(locale='xx'))
        assert page.items == []
        assert page.total == 0

    def test_pagination_metadata(self, services, seeded):
        first = services.query_engine.paginate(TranslationFilter(per_page=2, page=1))
        last = services.query_engine.paginate(TranslationFilter(per_page=2, page=3))
        beyond = services.query_engine.paginate(TranslationFilter(per_page=2, page=4))

        assert len(first.items) == 2
        assert first.total == 5
        assert first.last_page == 3
        assert len(last.items) == 1
        assert beyond.items == []
        assert beyond.total == 5

    def test_page_size_is_capped_for_direct_callers(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(per_page=500))
        assert page.per_page == 100
        assert page.total == 5

    def test_zero_page_size_becomes_one(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(per_page=0))
        assert page.per_page == 1
        assert len(page.items) == 1
        assert page.last_page == 5

    def test_pages_are_ordered_by_id(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(active_only=False, per_page=100))
        ids = [item.id for item in page.items]
        assert ids == sorted(ids)

    def test_items_carry_tags(self, services, seeded):
        page = services.query_engine.paginate(TranslationFilter(locale='en', namespace='general', search='welcome'))
        assert [tag.name for tag in page.items[0].tags] == ['mobile', 'web']

    def test_storage_failure_raises_storage_exception(self):
        session = MagicMock()
        session.scalar.side_effect = OperationalError('SELECT', {}, Exception('database is locked'))

        with pytest.raises(StorageException):
            QueryEngine(session).paginate(TranslationFilter())
        session.rollback.assert_called_once()


class TestQueryEngineExportSlice:
    """Tests for QueryEngine.export_slice"""

    def test_active_rows_of_slice_ordered_by_key(self, services, seeded):
        result = services.query_engine.export_slice('en', 'general')
        assert list(result.items()) == [('goodbye.title', 'Goodbye'), ('welcome.title', 'Welcome aboard')]

    def test_tag_filter(self, services, seeded):
        assert services.query_engine.export_slice('en', 'general', ['mobile']) == {'welcome.title': 'Welcome aboard'}

    def test_inactive_rows_excluded_even_when_tagged(self, services, seeded):
        assert services.query_engine.export_slice('en', 'general', ['desktop']) == {}

    def test_empty_slice(self, services, seeded):
        assert services.query_engine.export_slice('de', 'general') == {}
