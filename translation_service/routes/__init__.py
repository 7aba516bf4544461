"""
Routes package

- translations.py: translation CRUD, listing and export
- tags.py: tag listing and creation
- system.py: health and cache administration
"""

from flask import current_app


def get_services():
    """The ServiceContainer registered by create_app()"""
    return current_app.extensions["translation_service"]
