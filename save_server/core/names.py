# save_server/core/names.py

import re
from urllib.parse import unquote


MAX_NAME_LENGTH = 32
_ALLOWED = re.compile(r"[a-z0-9 _-]+")


def normalize_name(raw) -> str | None:
    """
    Canonical storage key for a profile name, or None if it cannot be one.

    "Alice Smith", "alice+smith" and "ALICE SMITH " all map to "alice smith".
    """
    if not isinstance(raw, str):
        return None

    name = raw.replace("+", " ")
    try:
        name = unquote(name, errors="strict")
    except UnicodeDecodeError:
        pass

    name = name.strip().lower()
    if not name or len(name) > MAX_NAME_LENGTH:
        return None
    if not _ALLOWED.fullmatch(name):
        return None
    return name
