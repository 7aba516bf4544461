"""
Services package

- query_engine.py: filtered, paginated reads and export slices
- export_cache.py: memoized export slices with per-slice invalidation
- translation_service.py: transactional writes
"""
