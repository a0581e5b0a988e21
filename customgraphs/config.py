"""Configuration helpers for loading environment variables.

Variables defined in a project-level ``.env`` file are loaded before they are
looked up.  Consumers should rely on :func:`get_env` or :meth:`Settings.from_env`
instead of :func:`os.getenv` so that the file is read in one well-defined
place.  Per-request state (translation hook, output channel) travels in an
explicit :class:`GraphContext` rather than module globals.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv

Translator = Callable[[str], str]
OutputWriter = Callable[[str], object]

DEFAULT_PRIVILEGES = "IR"
DEFAULT_RESOLUTION = 60

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _project_env_path() -> Path:
    return Path(__file__).resolve().parents[1] / ".env"


@lru_cache(maxsize=1)
def _load_environment() -> None:
    """Load environment variables from the project's ``.env`` file.

    When the file does not exist :func:`load_dotenv` still runs so the default
    discovery mechanism can pick up a file stored elsewhere.  Subsequent calls
    are cached so the file is only read once per process.
    """

    env_path = _project_env_path()

    if env_path.exists():
        load_dotenv(env_path, override=False)
    else:
        load_dotenv(override=False)


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the value for ``key`` from the environment.

    Parameters
    ----------
    key:
        The name of the environment variable to look up.
    default:
        The value to return when ``key`` is not present.
    """

    _load_environment()
    return os.environ.get(key, default)


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    """Library defaults applied when callers leave a parameter unset."""

    default_privileges: str = DEFAULT_PRIVILEGES
    include_all_group: bool = True
    default_user: Optional[str] = None
    resolution: int = DEFAULT_RESOLUTION

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``CUSTOMGRAPHS_*`` environment variables."""

        resolution = get_env("CUSTOMGRAPHS_RESOLUTION")
        try:
            resolution_value = int(resolution) if resolution else DEFAULT_RESOLUTION
        except ValueError as exc:
            raise ValueError(f"CUSTOMGRAPHS_RESOLUTION must be an integer, got {resolution!r}") from exc
        if resolution_value <= 0:
            raise ValueError("CUSTOMGRAPHS_RESOLUTION must be positive")

        return cls(
            default_privileges=get_env("CUSTOMGRAPHS_DEFAULT_PRIVILEGES") or DEFAULT_PRIVILEGES,
            include_all_group=_as_bool(get_env("CUSTOMGRAPHS_INCLUDE_ALL_GROUP"), True),
            default_user=get_env("CUSTOMGRAPHS_DEFAULT_USER") or None,
            resolution=resolution_value,
        )


def _identity(text: str) -> str:
    return text


def _stdout_write(text: str) -> object:
    return sys.stdout.write(text)


@dataclass
class GraphContext:
    """Explicit request-scoped context handed to the core operations."""

    settings: Settings = field(default_factory=Settings)
    translate: Translator = _identity
    output: OutputWriter = _stdout_write


__all__ = ["GraphContext", "Settings", "get_env"]
