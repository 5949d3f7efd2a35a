# Citadel Strongbox - Main Package
#
# Local, file-backed secret vault: named accounts holding a username and
# a password sealed for the vault's recipient key.

__version__ = "0.1.0"
__author__ = "Citadel Archer Team"
__description__ = "File-backed encrypted credential vault"

from .core import (
    CryptoError,
    InvalidInputError,
    RecordFormatError,
    StrongboxError,
    VaultIOError,
    VaultNotFoundError,
)
from .vault import (
    Locations,
    SecretBox,
    Store,
    UserPass,
    decrypt_variable,
    encrypt_variable,
    print_vault_entries,
)

__all__ = [
    "__version__",
    "Locations",
    "Store",
    "UserPass",
    "SecretBox",
    "encrypt_variable",
    "decrypt_variable",
    "print_vault_entries",
    "StrongboxError",
    "InvalidInputError",
    "VaultNotFoundError",
    "VaultIOError",
    "CryptoError",
    "RecordFormatError",
]
