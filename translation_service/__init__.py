"""
Translation Service - multi-locale key/value translation store over HTTP.

Use translation_service.app.create_app() to build the Flask application.
"""
