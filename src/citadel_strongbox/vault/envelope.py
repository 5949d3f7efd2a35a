# Strongbox - Encryption Envelope
#
# Seals a single value for a vault recipient and opens it with the
# matching identity:
#   - X25519 ephemeral-static Diffie-Hellman per value
#   - HKDF-SHA256 key derivation (ephemeral ‖ recipient public keys as salt)
#   - AES-256-GCM authenticated encryption, header bound as associated data
#
# Wire layout (raw bytes, any byte value including ':' may appear):
#   MAGIC (4) ‖ recipient key id (8) ‖ ephemeral public key (32) ‖
#   nonce (12) ‖ ciphertext ‖ GCM tag (16)
#
# Key strings (serialization boundary only, raw bytes everywhere else):
#   recipient  "strongbox-recipient-" + 64 hex chars (X25519 public key)
#   identity   "STRONGBOX-IDENTITY-"  + 64 hex chars (X25519 private key)
#
# Security:
#   - Every failure to open a value raises CryptoError with the same
#     message, whether the key is wrong or the data corrupted/tampered
#   - A bytearray plaintext passed to encrypt_variable is zeroed afterwards

import hashlib
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import x25519
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..core.exceptions import CryptoError
from .secret import BytesLike, wipe

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────────

MAGIC = b"CSB1"
KEY_ID_SIZE = 8
KEY_SIZE = 32               # X25519 keys and the derived AES-256 key
NONCE_SIZE = 12             # AES-256-GCM nonce (96 bits per NIST)
TAG_SIZE = 16
HEADER_SIZE = len(MAGIC) + KEY_ID_SIZE + KEY_SIZE + NONCE_SIZE

# Domain separation for HKDF
ENVELOPE_INFO = b"CitadelStrongbox_Envelope_v1"

RECIPIENT_PREFIX = "strongbox-recipient-"
IDENTITY_PREFIX = "STRONGBOX-IDENTITY-"

_OPEN_FAILED = "Unable to decrypt value"


# ── Key Strings ──────────────────────────────────────────────────────


def _raw_public(public_key: x25519.X25519PublicKey) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw,
    )


def _decode_key_string(value: str, prefix: str, kind: str) -> bytes:
    if not isinstance(value, str):
        raise CryptoError(f"Invalid {kind}: expected a string")
    value = value.strip()
    if not value.startswith(prefix):
        raise CryptoError(f"Invalid {kind}: missing '{prefix}' prefix")
    body = value[len(prefix):]
    if any(ch.isspace() for ch in body):
        raise CryptoError(f"Invalid {kind}: key contains whitespace")
    try:
        raw = bytes.fromhex(body)
    except ValueError:
        raise CryptoError(f"Invalid {kind}: key is not hex encoded") from None
    if len(raw) != KEY_SIZE:
        raise CryptoError(f"Invalid {kind}: expected {KEY_SIZE} key bytes")
    return raw


def parse_recipient(recipient: str) -> x25519.X25519PublicKey:
    """Parse a recipient string into an X25519 public key."""
    raw = _decode_key_string(recipient, RECIPIENT_PREFIX, "recipient")
    return x25519.X25519PublicKey.from_public_bytes(raw)


def parse_identity(identity: str) -> x25519.X25519PrivateKey:
    """Parse an identity string into an X25519 private key."""
    raw = bytearray(_decode_key_string(identity, IDENTITY_PREFIX, "identity"))
    try:
        return x25519.X25519PrivateKey.from_private_bytes(bytes(raw))
    finally:
        wipe(raw)


def format_recipient(public_key: x25519.X25519PublicKey) -> str:
    """Encode a public key as a recipient string."""
    return RECIPIENT_PREFIX + _raw_public(public_key).hex()


def format_identity(private_key: x25519.X25519PrivateKey) -> str:
    """Encode a private key as an identity string."""
    raw = private_key.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )
    return IDENTITY_PREFIX + raw.hex().upper()


def recipient_key_id(public_key: x25519.X25519PublicKey) -> bytes:
    """Short fingerprint of a recipient, stored in every envelope header."""
    return hashlib.sha256(_raw_public(public_key)).digest()[:KEY_ID_SIZE]


def _derive_key(shared_secret: bytes, ephemeral_public: bytes, recipient_public: bytes) -> bytes:
    return HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=ephemeral_public + recipient_public,
        info=ENVELOPE_INFO,
    ).derive(shared_secret)


# ── Context ──────────────────────────────────────────────────────────


class CryptoContext:
    """
    Encryption/decryption handle threaded through envelope calls.

    Holds the decryption identity (if any) and a cache of parsed
    recipients. One context per Store; not safe to share between
    threads.

    Args:
        identity: Identity string to load immediately
        identity_file: File to read the identity from on first decrypt
    """

    def __init__(
        self,
        identity: Optional[str] = None,
        identity_file: Optional[Union[str, Path]] = None,
    ):
        self._identity: Optional[x25519.X25519PrivateKey] = None
        self._identity_file = Path(identity_file) if identity_file else None
        self._recipients: Dict[str, x25519.X25519PublicKey] = {}

        if identity is not None:
            self.load_identity(identity)

    @property
    def has_identity(self) -> bool:
        return self._identity is not None

    def load_identity(self, identity: str) -> None:
        """Install the identity used by decrypt_variable."""
        self._identity = parse_identity(identity)

    def load_identity_file(self, path: Union[str, Path]) -> None:
        """Read and install an identity from a file."""
        try:
            identity = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CryptoError(f"Unable to read identity file: {path}") from exc
        self.load_identity(identity)

    def forget_identity(self) -> None:
        self._identity = None

    def identity(self) -> x25519.X25519PrivateKey:
        """The loaded identity, reading identity_file lazily if needed."""
        if self._identity is None and self._identity_file is not None:
            logger.debug("Loading identity from %s", self._identity_file)
            self.load_identity_file(self._identity_file)
        if self._identity is None:
            raise CryptoError("No identity available for decryption")
        return self._identity

    def recipient(self, recipient: str) -> x25519.X25519PublicKey:
        """Parse (and cache) a recipient string."""
        if not isinstance(recipient, str):
            raise CryptoError("Invalid recipient: expected a string")
        key = recipient.strip()
        public_key = self._recipients.get(key)
        if public_key is None:
            public_key = parse_recipient(key)
            self._recipients[key] = public_key
        return public_key


# ── Envelope ─────────────────────────────────────────────────────────


def encrypt_variable(ctx: CryptoContext, plaintext: BytesLike, recipient: str) -> bytes:
    """Encrypt ``plaintext`` for ``recipient``.

    A bytearray plaintext is consumed: it is zeroed before returning,
    on success and on failure.

    Raises:
        CryptoError: Recipient does not parse or encryption fails.
    """
    try:
        public_key = ctx.recipient(recipient)
        recipient_public = _raw_public(public_key)

        ephemeral = x25519.X25519PrivateKey.generate()
        ephemeral_public = _raw_public(ephemeral.public_key())

        try:
            shared = ephemeral.exchange(public_key)
        except ValueError as exc:
            # Low-order point: exchange yields an all-zero secret
            raise CryptoError("Invalid recipient: unusable public key") from exc

        key = _derive_key(shared, ephemeral_public, recipient_public)
        nonce = os.urandom(NONCE_SIZE)
        header = MAGIC + recipient_key_id(public_key) + ephemeral_public + nonce

        return header + AESGCM(key).encrypt(nonce, plaintext, header)
    finally:
        if isinstance(plaintext, bytearray):
            wipe(plaintext)


def decrypt_variable(ctx: CryptoContext, ciphertext: BytesLike) -> bytes:
    """Decrypt an envelope with the context's identity.

    Raises:
        CryptoError: No identity, or the envelope is malformed, truncated,
            tampered, or sealed for another recipient.
    """
    data = bytes(ciphertext)
    if len(data) < HEADER_SIZE + TAG_SIZE or not data.startswith(MAGIC):
        raise CryptoError(_OPEN_FAILED)

    identity = ctx.identity()

    offset = len(MAGIC)
    key_id = data[offset:offset + KEY_ID_SIZE]
    offset += KEY_ID_SIZE
    ephemeral_public = data[offset:offset + KEY_SIZE]
    offset += KEY_SIZE
    nonce = data[offset:offset + NONCE_SIZE]
    header = data[:HEADER_SIZE]

    our_public = identity.public_key()
    if key_id != recipient_key_id(our_public):
        raise CryptoError(_OPEN_FAILED)

    try:
        shared = identity.exchange(x25519.X25519PublicKey.from_public_bytes(ephemeral_public))
        key = _derive_key(shared, ephemeral_public, _raw_public(our_public))
        return AESGCM(key).decrypt(nonce, data[HEADER_SIZE:], header)
    except (InvalidTag, ValueError):
        raise CryptoError(_OPEN_FAILED) from None


def ciphertext_matches_recipient(ctx: CryptoContext, ciphertext: BytesLike, recipient: str) -> bool:
    """True if ``ciphertext`` is a well-formed envelope sealed for ``recipient``.

    Only the header is inspected; no identity is needed.

    Raises:
        CryptoError: Recipient does not parse.
    """
    public_key = ctx.recipient(recipient)
    data = bytes(ciphertext)
    if len(data) < HEADER_SIZE + TAG_SIZE or not data.startswith(MAGIC):
        return False
    return data[len(MAGIC):len(MAGIC) + KEY_ID_SIZE] == recipient_key_id(public_key)
