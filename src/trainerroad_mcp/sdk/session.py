"""
File-backed session store.

Layout on disk:
    {"cookies": {name: value}, "updatedAt": ISO, "authenticatedAt"?: ISO,
     "lastLoginRedirect"?: str}

Reads are tolerant: a missing or corrupt file is an empty session.
Writes go to a temp file in the same directory and are swapped in with
os.replace, so a crash mid-write never leaves a half-written file behind.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SessionStore:
    """Single-owner JSON session file."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        """Read the session file, returning {} when absent or unreadable."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        if not isinstance(data.get("cookies"), dict):
            data["cookies"] = {}
        return data

    def load_cookies(self) -> Dict[str, str]:
        return {
            str(name): str(value)
            for name, value in self.load().get("cookies", {}).items()
        }

    def save(self, cookies: Dict[str, str], **extra: Any) -> Dict[str, Any]:
        """Atomically replace the session file.

        Args:
            cookies: Cookie name -> value map
            **extra: Additional metadata (authenticatedAt, lastLoginRedirect, ...)

        Returns:
            The payload written
        """
        payload = {"cookies": dict(cookies), "updatedAt": utc_now_iso(), **extra}
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return payload

    def clear(self) -> None:
        """Delete the session file if it exists."""
        self.path.unlink(missing_ok=True)
