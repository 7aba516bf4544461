"""
Pytest fixtures and configuration for translation service tests
"""
import pytest

from translation_service.app import create_app
from translation_service.cache import MemoryCacheBackend
from translation_service.db import db
from translation_service.validation import validate_translation_payload


class FakeClock:
    """Monotonic clock the tests move by hand"""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def app_config():
    """In-memory database, no migrations stamping, quiet logs"""
    return {
        'database': {'url': 'sqlite://'},
        'cache': {'backend': 'memory', 'export_ttl': 3600},
        'logging': {'level': 'WARNING'},
        'flask': {'TESTING': True},
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_backend(clock):
    return MemoryCacheBackend(clock=clock)


@pytest.fixture
def app(app_config, cache_backend):
    _app = create_app(app_config, cache_backend=cache_backend)
    with _app.app_context():
        yield _app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def services(app):
    return app.extensions['translation_service']


@pytest.fixture
def make_translation(services):
    """Create a translation through the service, with sensible defaults"""

    def _make(key, content='Some content', locale='en', namespace='general', is_active=True, tags=None,
              metadata=None):
        data = {
            'key': key,
            'locale': locale,
            'content': content,
            'namespace': namespace,
            'is_active': is_active,
        }
        if tags is not None:
            data['tags'] = tags
        if metadata is not None:
            data['metadata'] = metadata
        return services.translations.create(validate_translation_payload(data))

    return _make


@pytest.fixture
def seeded(make_translation):
    """
    A small mixed dataset:
    en/general x3 (one inactive), fr/general x1, en/admin x2
    """
    return {
        'welcome': make_translation('welcome.title', 'Welcome aboard', tags=['web', 'mobile']),
        'goodbye': make_translation('goodbye.title', 'Goodbye', tags=['web']),
        'legacy': make_translation('legacy.banner', 'Old banner', is_active=False, tags=['desktop']),
        'bienvenue': make_translation('welcome.title.fr', 'Bienvenue', locale='fr', tags=['web']),
        'dashboard': make_translation('admin.dashboard', 'Admin Dashboard', namespace='admin', tags=['admin']),
        'users': make_translation('admin.users', 'Users 100%', namespace='admin'),
    }

