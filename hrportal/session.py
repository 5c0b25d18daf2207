"""Login session storage for the HR portal CLI.

Stores the last successful login in ~/.hrportal/session.json with
restrictive permissions. A session expires 24 hours after it was saved.
"""

from __future__ import annotations

import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any

SESSION_DIR = ".hrportal"
SESSION_FILE = "session.json"
SESSION_LIFETIME_MS = 24 * 60 * 60 * 1000


def get_session_path() -> Path:
    return Path.home() / SESSION_DIR / SESSION_FILE


def _now_ms() -> int:
    return int(time.time() * 1000)


def save_session(user: dict[str, Any], now: int | None = None) -> dict[str, Any]:
    """Persist ``user`` as the current session and return the stored record.

    - Directory: 0700 (owner read/write/execute only)
    - File: 0600 (owner read/write only)
    - Atomic: writes to temp file in same dir, then os.replace()
    """
    timestamp = _now_ms() if now is None else now
    session = {
        "user": user,
        "timestamp": timestamp,
        "expires": timestamp + SESSION_LIFETIME_MS,
    }

    session_path = get_session_path()
    session_dir = session_path.parent
    session_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(session_dir, 0o700)

    fd, tmp_path = tempfile.mkstemp(dir=session_dir, prefix=".session_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(json.dumps(session, indent=2))
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, session_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    return session


def clear_session() -> bool:
    """Delete the session file. Returns True if one was removed."""
    session_path = get_session_path()
    if session_path.exists():
        session_path.unlink()
        return True
    return False


def load_session(now: int | None = None) -> dict[str, Any] | None:
    """Load the current session.

    Returns None if the file doesn't exist, is corrupt, is not a dict or
    has expired. Corrupt and expired files are removed.
    """
    session_path = get_session_path()
    if not session_path.exists():
        return None

    try:
        data = json.loads(session_path.read_text())
    except (json.JSONDecodeError, OSError):
        clear_session()
        return None

    if not isinstance(data, dict) or not isinstance(data.get("expires"), (int, float)):
        clear_session()
        return None

    current = _now_ms() if now is None else now
    if current > data["expires"]:
        clear_session()
        return None

    return data


def is_authenticated(now: int | None = None) -> bool:
    return load_session(now) is not None
