import copy
import logging
import os

import yaml

from translation_service.constants import (
    CACHE_BACKEND_MEMORY,
    CACHE_BACKEND_NONE,
    CACHE_BACKEND_REDIS,
    CONFIG_FILE,
    DEFAULT_SETTINGS,
    MAX_PER_PAGE,
)

# Retrieve main logger
logger = logging.getLogger("main")

CACHE_BACKENDS = (CACHE_BACKEND_REDIS, CACHE_BACKEND_MEMORY, CACHE_BACKEND_NONE)

# Environment variable -> (section, option, cast)
ENV_OVERRIDES = {
    "DATABASE_URL": ("database", "url", str),
    "REDIS_URL": ("cache", "redis_url", str),
    "CACHE_BACKEND": ("cache", "backend", str),
    "EXPORT_CACHE_TTL": ("cache", "export_ttl", int),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FORMAT": ("logging", "format", str),
}


def merge_settings(base, values):
    """Merge `values` into a copy of `base`, one level deep per section."""
    merged = copy.deepcopy(base)
    for section, section_values in (values or {}).items():
        if isinstance(section_values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(section_values)
        else:
            merged[section] = section_values
    return merged


def apply_env_overrides(settings, environ=None):
    environ = os.environ if environ is None else environ
    for env_name, (section, option, cast) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            settings.setdefault(section, {})[option] = cast(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {env_name}: {raw!r}")
    return settings


def load_settings(config_file=None, overrides=None, environ=None):
    """
    Build the effective settings.

    Order of precedence (lowest first): DEFAULT_SETTINGS, the YAML file,
    environment variables, then explicit `overrides`.
    """
    config_file = config_file or CONFIG_FILE
    settings = copy.deepcopy(DEFAULT_SETTINGS)

    if os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            file_settings = yaml.safe_load(yaml_file) or {}
        if not isinstance(file_settings, dict):
            raise ValueError(f"Configuration file {config_file} must contain a mapping")
        settings = merge_settings(settings, file_settings)
    else:
        logger.debug(f"Configuration file {config_file} not found, using defaults.")

    settings = apply_env_overrides(settings, environ)
    return merge_settings(settings, overrides)


def verify_settings(settings):
    success = True
    errors = []

    per_page = settings["api"].get("default_per_page")
    max_per_page = settings["api"].get("max_per_page")
    if not isinstance(max_per_page, int) or not 1 <= max_per_page <= MAX_PER_PAGE:
        success = False
        errors.append({"path": "api/max_per_page", "error": f"Must be between 1 and {MAX_PER_PAGE}."})
    elif not isinstance(per_page, int) or not 1 <= per_page <= max_per_page:
        success = False
        errors.append({"path": "api/default_per_page", "error": f"Must be between 1 and {max_per_page}."})

    backend = settings["cache"].get("backend")
    if backend not in CACHE_BACKENDS:
        success = False
        errors.append({"path": "cache/backend", "error": f"Unknown cache backend {backend!r}."})

    ttl = settings["cache"].get("export_ttl")
    if not isinstance(ttl, int) or ttl < 1:
        success = False
        errors.append({"path": "cache/export_ttl", "error": "Must be a positive number of seconds."})

    return success, errors
