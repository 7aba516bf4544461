"""
Repository for Tag database operations
"""

from sqlalchemy import select

from translation_service.models.tag import Tag


class TagRepository:
    """Repository for Tag database operations"""

    def __init__(self, session):
        self.session = session

    def get_all(self):
        """Get all Tag records, ordered by name"""
        return self.session.scalars(select(Tag).order_by(Tag.name)).all()

    def get_by_name(self, name):
        return self.session.scalars(select(Tag).where(Tag.name == name)).first()

    def get_by_names(self, names):
        """Get Tags by a list of names"""
        if not names:
            return []
        return self.session.scalars(select(Tag).where(Tag.name.in_(names)).order_by(Tag.name)).all()

    def get_or_create(self, name, description=None):
        """
        Return (tag, created). New tags are added to the session, not committed.
        """
        tag = self.get_by_name(name)
        if tag:
            return tag, False

        tag = Tag(name=name, description=description)
        self.session.add(tag)
        return tag, True

    def ensure_tags(self, names):
        """
        Resolve tag names to Tag rows, creating the missing ones.

        Duplicates are collapsed; result follows the order of `names`.
        Runs inside the caller's transaction.
        """
        unique_names = list(dict.fromkeys(names))
        existing = {tag.name: tag for tag in self.get_by_names(unique_names)}

        tags = []
        for name in unique_names:
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name)
                self.session.add(tag)
                existing[name] = tag
            tags.append(tag)
        return tags

    def count(self):
        """Count total Tag records"""
        return self.session.query(Tag).count()
