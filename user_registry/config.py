import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _getenv_bool(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    val = env.get(key)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _getenv_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, str(default)))
    except ValueError:
        return default


def _getenv_float(env: Mapping[str, str], key: str, default: float) -> float:
    try:
        return float(env.get(key, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    threaded: bool = True
    drain_timeout: float = 10.0  # seconds
    max_content_length: int = 100 * 1024  # bytes

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        if env is None:
            env = os.environ

        port = _getenv_int(env, "PORT", cls.port)
        if not 0 <= port <= 65535:
            port = cls.port

        max_content_length = _getenv_int(env, "MAX_CONTENT_LENGTH", cls.max_content_length)
        if max_content_length <= 0:
            max_content_length = cls.max_content_length

        return cls(
            host=env.get("HOST", cls.host),
            port=port,
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
            threaded=_getenv_bool(env, "THREADED", cls.threaded),
            drain_timeout=max(0.0, _getenv_float(env, "DRAIN_TIMEOUT", cls.drain_timeout)),
            max_content_length=max_content_length,
        )
