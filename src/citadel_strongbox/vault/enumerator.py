# Strongbox - Vault Enumerator
#
# Lists account names for presentation. Formatting belongs to the caller.

from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from ..core.config import StrongboxSettings
from ..core.event_log import EventSeverity, EventType, log_vault_event
from .locations import VAULT_ONLY, Locations


def list_vault_entries(
    vault_name: Union[str, Path],
    settings: Optional[StrongboxSettings] = None,
) -> List[str]:
    """Account names in a vault. Empty list for an empty vault."""
    locations = Locations(vault_name, VAULT_ONLY, settings=settings)
    names = locations.find_account_names()

    log_vault_event(
        EventType.VAULT_ENUMERATED,
        "Vault entries listed",
        severity=EventSeverity.DEBUG,
        vault=str(locations.vault_location),
        count=len(names),
    )
    return names


def print_vault_entries(
    vault_name: Union[str, Path],
    render: Optional[Callable[[str], Any]] = None,
    settings: Optional[StrongboxSettings] = None,
) -> List[str]:
    """Enumerate a vault and hand each account name to ``render``.

    Returns the names so callers can present them however they like.
    """
    names = list_vault_entries(vault_name, settings=settings)
    if render is not None:
        for name in names:
            render(name)
    return names
