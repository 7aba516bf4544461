"""
Translation Service - transactional writes for translations and tags.

A write is one transaction: the row change and its tag sync commit
together or not at all. Export slices touched by the write are
invalidated after the commit, for both the old and the new
(locale, namespace).
"""

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from translation_service.exceptions import NotFoundException, StorageException, ValidationException
from translation_service.metrics import track_db_query
from translation_service.models.translation import Translation
from translation_service.repositories.tag_repository import TagRepository
from translation_service.repositories.translation_repository import TranslationRepository

logger = structlog.get_logger("translation_service")

DUPLICATE_KEY_MESSAGE = "The key has already been taken."


class TranslationService:
    def __init__(self, session, export_cache):
        self.session = session
        self.export_cache = export_cache
        self.translations = TranslationRepository(session)
        self.tags = TagRepository(session)

    def get(self, translation_id):
        try:
            translation = self.translations.get_by_id(translation_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to load translation: {e}") from e
        if translation is None:
            raise NotFoundException("Translation not found")
        return translation

    def list_tags(self):
        try:
            return self.tags.get_all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to list tags: {e}") from e

    def create_tag(self, name, description=None):
        """Create-if-absent; returns (tag, created)"""
        try:
            tag, created = self.tags.get_or_create(name, description)
            if created:
                self.session.commit()
                logger.info("tag_created", name=name)
            return tag, created
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to create tag: {e}") from e

    @track_db_query("create")
    def create(self, payload):
        """Insert a translation from a validated TranslationPayload"""
        try:
            if self.translations.key_exists(payload.key):
                raise ValidationException({"key": [DUPLICATE_KEY_MESSAGE]})

            translation = Translation(**payload.column_values())
            if payload.tags:
                translation.tags = self.tags.ensure_tags(payload.tags)
            self.translations.add(translation)
            self._commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to create translation: {e}") from e

        logger.info("translation_created", id=translation.id, key=translation.key)
        self.export_cache.invalidate_slices([translation.slice])
        return translation

    @track_db_query("update")
    def update(self, translation_id, payload):
        """
        Partial update. When `tags` is supplied it replaces the whole
        association set; when absent the associations are left alone.
        """
        translation = self.get(translation_id)
        previous_slice = translation.slice
        try:
            if payload.has("key") and self.translations.key_exists(payload.key, exclude_id=translation.id):
                raise ValidationException({"key": [DUPLICATE_KEY_MESSAGE]})

            for name, value in payload.column_values().items():
                setattr(translation, name, value)
            if payload.has("tags"):
                # Column changes stay pending until commit so a key clash surfaces in _commit
                with self.session.no_autoflush:
                    translation.tags = self.tags.ensure_tags(payload.tags)
            self._commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to update translation: {e}") from e

        logger.info("translation_updated", id=translation.id, fields=sorted(payload.provided))
        self.export_cache.invalidate_slices([previous_slice, translation.slice])
        return translation

    @track_db_query("delete")
    def delete(self, translation_id):
        translation = self.get(translation_id)
        affected_slice = translation.slice

        try:
            self.translations.delete(translation)
            self._commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageException(f"Failed to delete translation: {e}") from e

        logger.info("translation_deleted", id=translation_id)
        self.export_cache.invalidate_slices([affected_slice])

    def count_records(self):
        return self.translations.count(), self.tags.count()

    def _commit(self):
        """
        Commit the unit of work. A unique-key violation raised by the database
        (a concurrent insert of the same key) is reported like the pre-check.
        """
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if _is_duplicate_key(e):
                raise ValidationException({"key": [DUPLICATE_KEY_MESSAGE]}) from e
            raise StorageException(f"Integrity error: {e.orig}") from e


def _is_duplicate_key(error):
    # SQLite reports the column, PostgreSQL the unique index name
    message = str(error.orig)
    return "translations.key" in message or "ix_translations_key" in message
