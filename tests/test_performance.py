"""
Latency tests on a large locale/namespace slice
"""
import time

import pytest
from sqlalchemy import insert

from translation_service.db import db
from translation_service.models import Translation
from translation_service.services.query_engine import TranslationFilter
from translation_service.utils import now_utc

SLICE_SIZE = 20000
NOISE_SIZE = 5000
BUDGET_SECONDS = 0.5

pytestmark = pytest.mark.slow


def timed(func, *args, **kwargs):
    start = time.perf_counter()
    result = func(*args, **kwargs)
    return result, time.perf_counter() - start


@pytest.fixture
def large_slice(app):
    """SLICE_SIZE active rows in en/general plus rows in other slices"""
    created = now_utc()
    rows = [
        {
            'key': f'bulk.{index:05d}',
            'locale': 'en',
            'content': f'Bulk content {index}',
            'namespace': 'general',
            'is_active': True,
            'created_at': created,
            'updated_at': created,
        }
        for index in range(SLICE_SIZE)
    ]
    rows += [
        {
            'key': f'noise.{index:05d}',
            'locale': 'fr' if index % 2 else 'en',
            'content': f'Autre contenu {index}',
            'namespace': 'general' if index % 2 else 'admin',
            'is_active': index % 3 != 0,
            'created_at': created,
            'updated_at': created,
        }
        for index in range(NOISE_SIZE)
    ]
    db.session.execute(insert(Translation), rows)
    db.session.commit()
    return SLICE_SIZE


class TestExportLatency:
    """Export of a large slice stays within budget"""

    def test_cold_export_slice(self, services, large_slice):
        translations, elapsed = timed(services.query_engine.export_slice, 'en', 'general')

        assert len(translations) == large_slice
        assert elapsed < BUDGET_SECONDS

    def test_cache_hit_is_faster_than_miss(self, services, large_slice):
        miss, miss_elapsed = timed(services.export_cache.export, 'en', 'general')
        hit, hit_elapsed = timed(services.export_cache.export, 'en', 'general')

        assert miss.cache_hit is False
        assert hit.cache_hit is True
        assert hit.translations == miss.translations
        assert miss_elapsed < BUDGET_SECONDS
        assert hit_elapsed < miss_elapsed

    def test_export_endpoint(self, client, large_slice):
        start = time.perf_counter()
        response = client.get('/api/translations/export?locale=en&namespace=general')
        elapsed = time.perf_counter() - start

        assert response.status_code == 200
        assert response.get_json()['count'] == large_slice
        assert elapsed < BUDGET_SECONDS


class TestListLatency:
    """Paginated listing and search over the large table"""

    def test_filtered_page(self, services, large_slice):
        page, elapsed = timed(services.query_engine.paginate, TranslationFilter(locale='en', namespace='general'))

        assert page.total == large_slice
        assert len(page.items) == 15
        assert elapsed < BUDGET_SECONDS

    def test_search(self, services, large_slice):
        page, elapsed = timed(services.query_engine.paginate, TranslationFilter(search='content 1999'))

        # bulk.01999 plus bulk.19990 .. bulk.19999
        assert page.total == 11
        assert elapsed < BUDGET_SECONDS

    def test_last_page(self, services, large_slice):
        filters = TranslationFilter(locale='en', namespace='general', per_page=100, page=200)
        page, elapsed = timed(services.query_engine.paginate, filters)

        assert page.last_page == 200
        assert len(page.items) == 100
        assert elapsed < BUDGET_SECONDS
