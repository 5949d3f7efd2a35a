# Core Module - Shared Utilities
#
# Core module provides shared functionality across Strongbox modules:
# - Typed error hierarchy
# - Vault event logging
# - Configuration

from .config import StrongboxSettings, get_settings, load_settings, reset_settings
from .event_log import (
    EventLogger,
    EventSeverity,
    EventType,
    configure_logging,
    get_event_logger,
    log_vault_event,
)
from .exceptions import (
    CryptoError,
    InvalidInputError,
    RecordFormatError,
    StrongboxError,
    VaultIOError,
    VaultNotFoundError,
)

__all__ = [
    # Configuration
    "StrongboxSettings",
    "get_settings",
    "load_settings",
    "reset_settings",
    # Event Logging
    "EventLogger",
    "EventType",
    "EventSeverity",
    "configure_logging",
    "get_event_logger",
    "log_vault_event",
    # Errors
    "StrongboxError",
    "InvalidInputError",
    "VaultNotFoundError",
    "VaultIOError",
    "CryptoError",
    "RecordFormatError",
]
