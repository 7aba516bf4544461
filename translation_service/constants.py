import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_DIR = os.environ.get("TRANSLATION_SERVICE_CONFIG_DIR", os.path.join(APP_DIR, "config"))
CONFIG_FILE = os.environ.get("TRANSLATION_SERVICE_CONFIG", os.path.join(CONFIG_DIR, "settings.yaml"))
DB_FILE = os.path.join(CONFIG_DIR, "translations.db")
ALEMBIC_DIR = os.path.join(APP_DIR, "migrations")

TRANSLATION_SERVICE_DB = "sqlite:///" + DB_FILE

BUILD_VERSION = "20250801_2117"

DEFAULT_NAMESPACE = "general"
DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100

# Export slices live for one hour unless invalidated by a write
EXPORT_CACHE_TTL = 3600
EXPORT_CACHE_PREFIX = "translations_export"

KEY_MAX_LENGTH = 255
LOCALE_MAX_LENGTH = 10
NAMESPACE_MAX_LENGTH = 255
TAG_NAME_MAX_LENGTH = 50
TAG_DESCRIPTION_MAX_LENGTH = 255

CACHE_BACKEND_REDIS = "redis"
CACHE_BACKEND_MEMORY = "memory"
CACHE_BACKEND_NONE = "none"

DEFAULT_SETTINGS = {
    "database": {
        "url": TRANSLATION_SERVICE_DB,
        "echo": False,
    },
    "cache": {
        "backend": CACHE_BACKEND_REDIS,
        "redis_url": "redis://localhost:6379/0",
        "export_ttl": EXPORT_CACHE_TTL,
        "key_prefix": EXPORT_CACHE_PREFIX,
    },
    "api": {
        "default_per_page": DEFAULT_PER_PAGE,
        "max_per_page": MAX_PER_PAGE,
    },
    "logging": {
        "level": "INFO",
        "format": "console",
    },
}

TRUTHY_VALUES = ("1", "true", "on", "yes")
FALSY_VALUES = ("0", "false", "off", "no", "")
