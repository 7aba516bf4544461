import logging
import re
from datetime import datetime, timezone

from translation_service.constants import FALSY_VALUES, TRUTHY_VALUES


# Custom logging formatter to support colors
class ColoredFormatter(logging.Formatter):
    # Define color codes
    COLORS = {
        'DEBUG': '\033[94m',   # Blue
        'INFO': '\033[92m',    # Green
        'WARNING': '\033[93m', # Yellow
        'ERROR': '\033[91m',   # Red
        'CRITICAL': '\033[95m' # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"

        return super().format(record)


# Filter to remove date from http access logs
class FilterRemoveDateFromWerkzeugLogs(logging.Filter):
    # '192.168.0.102 - - [30/Jun/2024 01:14:03] "%s" %s %s' -> '192.168.0.102 - "%s" %s %s'
    pattern: re.Pattern = re.compile(r' - - \[.+?] "')

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.pattern.sub(' - "', record.msg)
        return True


def now_utc():
    return datetime.now(timezone.utc)


def isoformat(value):
    """Serialize a datetime the way API clients expect it (UTC, ISO-8601)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_bool(value, default=None):
    """
    Interpret query-string and JSON booleans.

    Returns `default` when the value cannot be read as a boolean.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUTHY_VALUES:
            return True
        if lowered in FALSY_VALUES:
            return False
    return default


def parse_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def split_tag_names(values):
    """
    Flatten tag parameters into a list of names.

    Accepts the comma form ("a,b") and repeated/array values (["a", "b"]).
    Blank names are dropped and duplicates removed, keeping first-seen order.
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]

    names = []
    seen = set()
    for value in values:
        if not isinstance(value, str):
            continue
        for part in value.split(","):
            name = part.strip()
            if name and name not in seen:
                seen.add(name)
                names.append(name)
    return names
