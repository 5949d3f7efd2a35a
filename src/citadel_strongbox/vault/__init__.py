# Vault Module - File-Backed Credential Storage
#
# One directory per vault, one subdirectory per account, password fields
# sealed for the vault's X25519 recipient.

from .enumerator import list_vault_entries, print_vault_entries
from .envelope import (
    CryptoContext,
    ciphertext_matches_recipient,
    decrypt_variable,
    encrypt_variable,
    format_identity,
    format_recipient,
    parse_identity,
    parse_recipient,
)
from .locations import VAULT_ONLY, Locations, rename_directory, validate_account_name
from .record import UserPass, decode_record, encode_record
from .secret import SecretBox
from .store import Store

__all__ = [
    "Locations",
    "VAULT_ONLY",
    "rename_directory",
    "validate_account_name",
    "CryptoContext",
    "encrypt_variable",
    "decrypt_variable",
    "ciphertext_matches_recipient",
    "parse_recipient",
    "parse_identity",
    "format_recipient",
    "format_identity",
    "SecretBox",
    "UserPass",
    "encode_record",
    "decode_record",
    "Store",
    "list_vault_entries",
    "print_vault_entries",
]
