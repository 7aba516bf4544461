"""
Models package

- translation.py: Translation rows (one key, one locale)
- tag.py: Tag rows
- translation_tag.py: association table between the two
"""

from .translation_tag import translation_tag
from .tag import Tag
from .translation import Translation

__all__ = [
    "Translation",
    "Tag",
    "translation_tag",
]
