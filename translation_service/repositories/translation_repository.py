"""
Repository for Translation database operations
"""

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from translation_service.models.translation import Translation


class TranslationRepository:
    """Repository for Translation database operations"""

    def __init__(self, session):
        self.session = session

    def get_by_id(self, id):
        """Get Translation by primary key ID, tags loaded"""
        return self.session.get(Translation, id, options=[selectinload(Translation.tags)])

    def key_exists(self, key, exclude_id=None):
        """True when another row already holds `key`"""
        query = select(Translation.id).where(Translation.key == key)
        if exclude_id is not None:
            query = query.where(Translation.id != exclude_id)
        return self.session.scalars(query.limit(1)).first() is not None

    def add(self, translation):
        """Stage a new Translation; the caller commits"""
        self.session.add(translation)
        return translation

    def delete(self, translation):
        """Stage removal; association rows go with it"""
        self.session.delete(translation)

    def count(self):
        """Count total Translation records"""
        return self.session.query(Translation).count()
