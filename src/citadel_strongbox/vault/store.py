# Strongbox - Store
#
# Binds one account's Locations to one CryptoContext and implements the
# read/write/mutate operations on its encrypted record.
#
# Write path:  UserPass -> encode_record -> temp file (0600) -> os.replace
# Read path:   data file -> decode_record -> decrypt check -> UserPass
#
# Known limitation: single process, single thread per vault/account.
# There is no file locking; a concurrent writer from another process is
# not detected and shows up as RecordFormatError or CryptoError on the
# next read.

import logging
import os
import stat
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

from ..core.config import StrongboxSettings, get_settings
from ..core.event_log import EventSeverity, EventType, log_vault_event
from ..core.exceptions import (
    CryptoError,
    RecordFormatError,
    VaultIOError,
    VaultNotFoundError,
)
from .envelope import (
    CryptoContext,
    ciphertext_matches_recipient,
    decrypt_variable,
    encrypt_variable,
)
from .locations import Locations
from .record import UserPass, decode_record, encode_record
from .secret import BytesLike, SecretBox, wipe

logger = logging.getLogger(__name__)

DATA_FILE_MODE = stat.S_IRUSR | stat.S_IWUSR   # 0o600


class Store:
    """
    Encrypted credential storage for one account.

    Args:
        vault_name: Vault root (absolute, or relative to STRONGBOX_HOME)
        account_name: Account directory name
        identity: Identity string for decryption (optional)
        identity_file: File holding the identity; defaults to
            STRONGBOX_IDENTITY_FILE. Read lazily on first decrypt.
        settings: Explicit settings (defaults to get_settings())

    Not safe for concurrent use: the context and the read-modify-write
    sequences assume one caller at a time.
    """

    def __init__(
        self,
        vault_name: Union[str, Path],
        account_name: str,
        identity: Optional[str] = None,
        identity_file: Optional[Union[str, Path]] = None,
        settings: Optional[StrongboxSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.locations = Locations(vault_name, account_name, settings=self.settings)
        self.ctx = CryptoContext(
            identity=identity,
            identity_file=identity_file or self.settings.identity_file,
        )

    def __repr__(self) -> str:
        return f"Store({self.locations!r})"

    # ── Recipient ───────────────────────────────────────────────────

    def read_recipient(self) -> str:
        """Load the vault's recipient string fresh from disk."""
        path = self.locations.recipient_location
        try:
            recipient = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            raise CryptoError(f"Vault recipient is missing: {path}") from None
        except UnicodeDecodeError:
            raise CryptoError("Vault recipient is not valid text") from None
        except OSError as exc:
            raise VaultIOError(f"Failed to read recipient {path}: {exc}") from exc

        if not recipient:
            raise CryptoError(f"Vault recipient is missing: {path}")
        return recipient

    def seal_password(self, plaintext: BytesLike) -> SecretBox:
        """Encrypt a password for this vault's recipient.

        A bytearray plaintext is zeroed. Returns a SecretBox of ciphertext
        suitable for UserPass.password or change_account_password().
        """
        return SecretBox(encrypt_variable(self.ctx, plaintext, self.read_recipient()))

    def reveal_password(self, record: UserPass) -> SecretBox:
        """Decrypt a record's password into a new SecretBox of plaintext."""
        plaintext = bytearray(decrypt_variable(self.ctx, record.password.expose_secret()))
        return SecretBox(plaintext)

    # ── Write ───────────────────────────────────────────────────────

    def encrypt_to_file(self, record: UserPass) -> None:
        """
        Store ``record`` in the account's data file.

        The password must already be sealed for the vault recipient. The
        file is replaced atomically and restricted to owner read/write.

        Raises:
            VaultIOError: Account directory missing or the write fails
            CryptoError: Recipient missing/invalid, or the password was not
                sealed for it (nothing is written)
        """
        locations = self.locations
        if not locations.account_location.is_dir():
            raise VaultIOError(f"Account directory does not exist: {locations.account_location}")

        recipient = self.read_recipient()
        if not ciphertext_matches_recipient(self.ctx, record.password.expose_secret(), recipient):
            raise CryptoError("Password is not encrypted for this vault's recipient")

        line = bytearray(encode_record(record.username, record.password))
        try:
            # First-colon framing cannot carry a username that contains ':'
            if decode_record(bytes(line)) != (record.username, bytes(record.password.expose_secret())):
                raise RecordFormatError("Username cannot be stored: it would not decode back unchanged")
            self._write_data_file(line)
        finally:
            wipe(line)

        log_vault_event(
            EventType.RECORD_WRITTEN,
            "Credential record written",
            vault=str(locations.vault_location),
            account=locations.account_name,
        )

    def _write_data_file(self, payload: BytesLike) -> None:
        data_location = self.locations.data_location
        tmp_path = data_location.with_name(f".{data_location.name}.{uuid4().hex}.tmp")

        # Write to a temp file first, then rename for atomicity
        try:
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, DATA_FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, data_location)
        except OSError as exc:
            # Clean up temp file on failure
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise VaultIOError(f"Failed to write {data_location}: {exc}") from exc

        self._restrict_permissions(data_location)

    @staticmethod
    def _restrict_permissions(path: Path) -> None:
        """Owner read/write only, where POSIX permission bits exist."""
        if os.name != "posix":
            return
        try:
            os.chmod(path, DATA_FILE_MODE)
        except OSError as exc:
            raise VaultIOError(f"Failed to restrict permissions on {path}: {exc}") from exc

    # ── Read ────────────────────────────────────────────────────────

    def decrypt_from_file(self) -> UserPass:
        """
        Load and verify the account's record.

        The returned password is still ciphertext (use reveal_password()
        to get plaintext); it has been checked to decrypt with the
        context identity.

        Raises:
            VaultNotFoundError: Account directory or data file absent
            VaultIOError: Data file unreadable
            RecordFormatError: Stored line does not decode
            CryptoError: Ciphertext does not decrypt (no/wrong identity,
                corruption, tampering)
        """
        locations = self.locations
        locations.does_account_exist()

        try:
            line = locations.data_location.read_bytes()
        except FileNotFoundError:
            raise VaultNotFoundError(f"No data file for account {locations.account_name!r}") from None
        except OSError as exc:
            raise VaultIOError(f"Failed to read {locations.data_location}: {exc}") from exc

        try:
            username, ciphertext = decode_record(line)
        except RecordFormatError:
            log_vault_event(
                EventType.RECORD_REJECTED,
                "Credential record does not parse",
                severity=EventSeverity.WARNING,
                vault=str(locations.vault_location),
                account=locations.account_name,
            )
            raise

        password = SecretBox(ciphertext)
        try:
            plaintext = bytearray(decrypt_variable(self.ctx, ciphertext))
        except CryptoError:
            password.close()
            log_vault_event(
                EventType.CRYPTO_FAILURE,
                "Credential record failed decryption",
                severity=EventSeverity.WARNING,
                vault=str(locations.vault_location),
                account=locations.account_name,
            )
            raise
        wipe(plaintext)

        log_vault_event(
            EventType.RECORD_READ,
            "Credential record read",
            severity=EventSeverity.DEBUG,
            vault=str(locations.vault_location),
            account=locations.account_name,
        )
        return UserPass(username=username, password=password)

    # ── Mutation ────────────────────────────────────────────────────
    # Any read failure aborts the mutation before anything is written.

    def change_account_username(self, new_username: str) -> None:
        """Replace the username, keeping the stored ciphertext as-is."""
        with self.decrypt_from_file() as record:
            record.username = new_username
            self.encrypt_to_file(record)

        log_vault_event(
            EventType.USERNAME_CHANGED,
            "Account username changed",
            vault=str(self.locations.vault_location),
            account=self.locations.account_name,
        )

    def change_account_password(self, new_password: SecretBox) -> None:
        """Replace the ciphertext with an already-sealed password, keeping the username."""
        with self.decrypt_from_file() as record:
            self.encrypt_to_file(UserPass(username=record.username, password=new_password))

        log_vault_event(
            EventType.PASSWORD_CHANGED,
            "Account password changed",
            vault=str(self.locations.vault_location),
            account=self.locations.account_name,
        )

    def rename_account(self, new_name: str) -> None:
        """Rename the account directory and follow it."""
        self.locations = self.locations.rename_account(new_name)
