"""
Model: Translation

`key` is unique across the whole table, independent of locale.
"""

from translation_service.constants import (
    DEFAULT_NAMESPACE,
    KEY_MAX_LENGTH,
    LOCALE_MAX_LENGTH,
    NAMESPACE_MAX_LENGTH,
)
from translation_service.db import db
from translation_service.utils import isoformat, now_utc


class Translation(db.Model):
    __tablename__ = "translations"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(KEY_MAX_LENGTH), unique=True, nullable=False, index=True)
    locale = db.Column(db.String(LOCALE_MAX_LENGTH), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    namespace = db.Column(db.String(NAMESPACE_MAX_LENGTH), nullable=False, default=DEFAULT_NAMESPACE, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    # "metadata" is reserved on declarative classes, the column keeps the public name
    meta_data = db.Column("metadata", db.JSON)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)

    tags = db.relationship(
        "Tag",
        secondary="translation_tag",
        order_by="Tag.name",
        backref=db.backref("translations", lazy="dynamic"),
    )

    __table_args__ = (
        # Export and list filters hit (locale, namespace) together
        db.Index("idx_translations_locale_namespace", "locale", "namespace"),
        db.Index("idx_translations_key_locale", "key", "locale"),
    )

    @property
    def slice(self):
        return (self.locale, self.namespace)

    def to_dict(self, include_tags=True):
        result = {
            "id": self.id,
            "key": self.key,
            "locale": self.locale,
            "content": self.content,
            "namespace": self.namespace,
            "is_active": self.is_active,
            "metadata": self.meta_data,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
        if include_tags:
            result["tags"] = [tag.to_dict() for tag in self.tags]
        return result

    def __repr__(self):
        return f"<Translation {self.key} ({self.locale}/{self.namespace})>"
