"""
Repositories package

Each repository wraps database operations for a model and receives the
session it works with:
- translation_repository.py
- tag_repository.py

Usage:
    from translation_service.repositories.tag_repository import TagRepository
    tags = TagRepository(db.session).get_all()
"""
