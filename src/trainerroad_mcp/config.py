"""
Runtime configuration for the TrainerRoad MCP server.

All environment-derived defaults are collected here once and passed into
constructors. Nothing below the tool layer reads os.environ directly.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


DEFAULT_SESSION_FILE = Path(".trainerroad") / "session.json"
DEFAULT_RETURN_PATH = "/app/career"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    """Process-wide defaults. Every field can be overridden per call."""
    username: Optional[str] = None
    password: Optional[str] = None
    session_file: Path = DEFAULT_SESSION_FILE
    timezone: Optional[str] = None
    transport: str = "stdio"
    host: str = "0.0.0.0"
    port: int = 8081

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "Settings":
        """Build settings from TR_* and MCP_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance
        """
        env = os.environ if environ is None else environ

        session_file = _clean(env.get("TR_SESSION_FILE"))
        try:
            port = int(env.get("MCP_PORT", "8081"))
        except ValueError:
            port = 8081

        return cls(
            username=_clean(env.get("TR_USERNAME")),
            password=env.get("TR_PASSWORD") or None,
            session_file=Path(session_file).expanduser() if session_file else DEFAULT_SESSION_FILE,
            timezone=_clean(env.get("TR_TIMEZONE")),
            transport=_clean(env.get("MCP_TRANSPORT")) or "stdio",
            host=_clean(env.get("MCP_HOST")) or "0.0.0.0",
            port=port,
        )
