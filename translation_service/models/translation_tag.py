"""
Association table: Translation <-> Tag

Each (translation, tag) pair appears once; deleting either parent removes the row.
"""

from translation_service.db import db
from translation_service.utils import now_utc

translation_tag = db.Table(
    "translation_tag",
    db.Column(
        "translation_id", db.Integer, db.ForeignKey("translations.id", ondelete="CASCADE"), primary_key=True
    ),
    db.Column("tag_id", db.Integer, db.ForeignKey("translation_tags.id", ondelete="CASCADE"), primary_key=True),
    db.Column("created_at", db.DateTime(timezone=True), default=now_utc),
    db.Index("idx_translation_tag_tag_id", "tag_id"),
)
