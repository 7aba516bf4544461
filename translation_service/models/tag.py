"""
Model: Tag
"""

from translation_service.constants import TAG_DESCRIPTION_MAX_LENGTH, TAG_NAME_MAX_LENGTH
from translation_service.db import db
from translation_service.utils import isoformat, now_utc


class Tag(db.Model):
    __tablename__ = "translation_tags"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(TAG_NAME_MAX_LENGTH), unique=True, nullable=False)
    description = db.Column(db.String(TAG_DESCRIPTION_MAX_LENGTH))
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Tag {self.name}>"
