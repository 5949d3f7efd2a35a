# Strongbox Settings
# Environment-driven configuration, optionally seeded from a .env file.
#
#   STRONGBOX_HOME           base directory for relative vault names
#   STRONGBOX_IDENTITY_FILE  file holding the decryption identity string
#   STRONGBOX_LOG_LEVEL      log level (default INFO)
#   STRONGBOX_LOG_JSON       render logs as JSON (default false)

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

ENV_HOME = "STRONGBOX_HOME"
ENV_IDENTITY_FILE = "STRONGBOX_IDENTITY_FILE"
ENV_LOG_LEVEL = "STRONGBOX_LOG_LEVEL"
ENV_LOG_JSON = "STRONGBOX_LOG_JSON"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class StrongboxSettings:
    """Resolved runtime settings."""
    vault_home: Optional[Path] = None
    identity_file: Optional[Path] = None
    log_level: str = "INFO"
    log_json: bool = False

    def resolve_vault_path(self, vault_name: Union[str, Path]) -> Path:
        """Map a vault name to its root directory.

        Absolute names (and ``~`` paths) are used as-is; relative names are
        placed under ``vault_home`` when it is configured.
        """
        path = Path(vault_name).expanduser()
        if path.is_absolute() or self.vault_home is None:
            return path
        return self.vault_home / path


def _optional_path(value: str) -> Optional[Path]:
    value = value.strip()
    return Path(value).expanduser() if value else None


def load_settings(env_file: Optional[Union[str, Path]] = None) -> StrongboxSettings:
    """Build settings from the process environment.

    ``env_file`` (or a ``.env`` found by python-dotenv) is loaded first;
    variables already present in the environment are not overridden.
    """
    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=False)
    else:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    return StrongboxSettings(
        vault_home=_optional_path(os.environ.get(ENV_HOME, "")),
        identity_file=_optional_path(os.environ.get(ENV_IDENTITY_FILE, "")),
        log_level=os.environ.get(ENV_LOG_LEVEL, "INFO").strip().upper() or "INFO",
        log_json=os.environ.get(ENV_LOG_JSON, "").strip().lower() in _TRUTHY,
    )


_settings: Optional[StrongboxSettings] = None


def get_settings() -> StrongboxSettings:
    """Get the process-wide settings (loaded on first use)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
