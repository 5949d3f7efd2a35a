# Strongbox - Location Resolver
#
# Path computation and directory/file checks for a vault and its
# accounts. Disk layout:
#
#     <vault_root>/
#       recipient            plaintext recipient (public key) string
#       <account_name>/
#         data               one line: "<username>:<ciphertext-bytes>"
#
# Constructing Locations does no I/O. Directory creation and renaming
# only happen here.
#
# Policies (kept distinct on purpose):
#   - creation is idempotent: an existing directory is success
#   - existence checks and renames are strict: absence is VaultNotFoundError

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from ..core.config import StrongboxSettings, get_settings
from ..core.event_log import EventType, log_vault_event
from ..core.exceptions import InvalidInputError, VaultIOError, VaultNotFoundError

logger = logging.getLogger(__name__)

# Account name used for vault-only operations ("no specific account")
VAULT_ONLY = "null"

RECIPIENT_FILE = "recipient"
DATA_FILE = "data"

PathLike = Union[str, Path]


def validate_account_name(account_name: str) -> str:
    """Reject names that are empty or would escape or collide with the vault layout."""
    if not isinstance(account_name, str) or not account_name:
        raise InvalidInputError("Account name must be a non-empty string")
    if account_name in (".", ".."):
        raise InvalidInputError(f"Invalid account name: {account_name!r}")
    separators = [sep for sep in ("/", os.sep, os.altsep) if sep]
    if "\x00" in account_name or any(sep in account_name for sep in separators):
        raise InvalidInputError(f"Account name may not contain path separators: {account_name!r}")
    if account_name == RECIPIENT_FILE:
        raise InvalidInputError(f"Account name {RECIPIENT_FILE!r} is reserved")
    return account_name


def rename_directory(old_path: PathLike, new_path: PathLike) -> None:
    """
    Rename a directory.

    Raises:
        VaultNotFoundError: ``old_path`` does not exist
        VaultIOError: ``old_path`` is not a directory, ``new_path`` already
            exists, or the rename itself fails
    """
    old_path, new_path = Path(old_path), Path(new_path)

    if not old_path.exists():
        raise VaultNotFoundError(f"Directory not found: {old_path}")
    if not old_path.is_dir():
        raise VaultIOError(f"Not a directory: {old_path}")
    if new_path.exists():
        raise VaultIOError(f"Rename target already exists: {new_path}")

    try:
        os.rename(old_path, new_path)
    except OSError as exc:
        raise VaultIOError(f"Failed to rename {old_path} to {new_path}: {exc}") from exc

    logger.debug("Renamed %s -> %s", old_path, new_path)


class Locations:
    """
    Paths for one (vault, account) pair.

    Attributes:
        vault_location: Vault root directory
        recipient_location: Recipient (public key) file in the vault root
        account_location: Account subdirectory
        data_location: Encrypted record file inside the account directory
    """

    def __init__(
        self,
        vault_name: PathLike,
        account_name: str,
        settings: Optional[StrongboxSettings] = None,
    ):
        # str(Path("")) is ".", so check a Path by its parts
        empty = not vault_name.parts if isinstance(vault_name, Path) else not vault_name
        if empty:
            raise InvalidInputError("Vault name must be non-empty")
        validate_account_name(account_name)

        self.settings = settings or get_settings()
        self.vault_name = vault_name
        self.account_name = account_name

        self.vault_location = self.settings.resolve_vault_path(vault_name)
        self.recipient_location = self.vault_location / RECIPIENT_FILE
        self.account_location = self.vault_location / account_name
        self.data_location = self.account_location / DATA_FILE

    def __repr__(self) -> str:
        return f"Locations(vault={str(self.vault_location)!r}, account={self.account_name!r})"

    def for_account(self, account_name: str) -> "Locations":
        """Locations for another account in the same vault."""
        return Locations(self.vault_name, account_name, settings=self.settings)

    # ── Creation (idempotent) ───────────────────────────────────────

    def initialize_vault(self) -> None:
        """Create the vault root and an empty recipient file if absent."""
        try:
            self.vault_location.mkdir(parents=True, exist_ok=True)
            self.recipient_location.touch(exist_ok=True)
        except OSError as exc:
            raise VaultIOError(f"Failed to initialize vault {self.vault_location}: {exc}") from exc

        log_vault_event(
            EventType.VAULT_INITIALIZED,
            "Vault initialized",
            vault=str(self.vault_location),
        )

    def create_account_directory(self) -> None:
        """Create the account subdirectory if absent."""
        try:
            self.account_location.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise VaultIOError(
                f"Failed to create account directory {self.account_location}: {exc}"
            ) from exc

        log_vault_event(
            EventType.ACCOUNT_CREATED,
            "Account directory ready",
            vault=str(self.vault_location),
            account=self.account_name,
        )

    # ── Existence checks (strict) ───────────────────────────────────

    def does_vault_exist(self) -> None:
        """Raise VaultNotFoundError unless the vault root and recipient file exist."""
        if not self.vault_location.is_dir() or not self.recipient_location.is_file():
            raise VaultNotFoundError(f"Vault not found: {self.vault_location}")

    def does_account_exist(self) -> None:
        """Raise VaultNotFoundError unless the account directory and data file exist."""
        if not self.account_location.is_dir():
            raise VaultNotFoundError(
                f"Account {self.account_name!r} not found in {self.vault_location}"
            )
        if not self.data_location.is_file():
            raise VaultNotFoundError(f"No data file for account {self.account_name!r}")

    # ── Enumeration ─────────────────────────────────────────────────

    def find_account_names(self) -> List[str]:
        """
        Names of the account directories in the vault.

        Non-directory entries (the recipient file, stray files) are skipped.
        Returned sorted for stable presentation.
        """
        self.does_vault_exist()

        try:
            with os.scandir(self.vault_location) as entries:
                names = [entry.name for entry in entries if entry.is_dir()]
        except OSError as exc:
            raise VaultIOError(f"Failed to list vault {self.vault_location}: {exc}") from exc

        return sorted(names)

    # ── Rename ──────────────────────────────────────────────────────

    def rename_directory(self, old_path: PathLike, new_path: PathLike) -> None:
        """Rename a directory (see module-level rename_directory)."""
        rename_directory(old_path, new_path)

    def rename_account(self, new_name: str) -> "Locations":
        """Rename this account's directory and return the new Locations."""
        target = self.for_account(new_name)
        self.rename_directory(self.account_location, target.account_location)

        log_vault_event(
            EventType.ACCOUNT_RENAMED,
            "Account renamed",
            vault=str(self.vault_location),
            old_name=self.account_name,
            new_name=new_name,
        )
        return target
