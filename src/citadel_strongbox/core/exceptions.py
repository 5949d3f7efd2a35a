"""
Strongbox Exception Classes
"""


class StrongboxError(Exception):
    """Base exception for vault storage operations"""
    pass


class InvalidInputError(StrongboxError, ValueError):
    """Raised when construction arguments are malformed (e.g. empty account name)"""
    pass


class VaultNotFoundError(StrongboxError):
    """Raised when a vault, account directory or data file is required but absent"""
    pass


class VaultIOError(StrongboxError):
    """Raised when a filesystem operation fails"""
    pass


class CryptoError(StrongboxError):
    """Raised when a recipient/identity is invalid or decryption fails.

    Wrong key, corrupted ciphertext and tampered data all surface as this
    one error with the same message.
    """
    pass


class RecordFormatError(StrongboxError):
    """Raised when an on-disk credential record does not parse"""
    pass
