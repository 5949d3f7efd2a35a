# Strongbox - Credential Record
#
# One account's credentials: a clear-text username and the password
# ciphertext. On disk a record is a single line:
#
#     <username utf-8> ':' <ciphertext bytes>
#
# Decoding splits on the FIRST colon only; everything after it is opaque
# ciphertext and may itself contain ':' bytes.

from dataclasses import dataclass
from typing import Tuple, Union

from ..core.exceptions import RecordFormatError
from .secret import BytesLike, SecretBox

DELIMITER = b":"


@dataclass(eq=True)
class UserPass:
    """Username plus encrypted password for one account."""
    username: str
    password: SecretBox     # ciphertext produced by envelope.encrypt_variable

    def close(self) -> None:
        """Release the password container."""
        self.password.close()

    def __enter__(self) -> "UserPass":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def encode_record(username: str, ciphertext: Union[SecretBox, BytesLike]) -> bytes:
    """Frame a username and ciphertext as one on-disk line."""
    if isinstance(ciphertext, SecretBox):
        ciphertext = ciphertext.expose_secret()
    return username.encode("utf-8") + DELIMITER + bytes(ciphertext)


def decode_record(line: bytes) -> Tuple[str, bytes]:
    """Split a stored line into (username, ciphertext).

    Raises:
        RecordFormatError: No delimiter, or the username is not UTF-8.
    """
    index = line.find(DELIMITER)
    if index < 0:
        raise RecordFormatError("Record has no ':' delimiter")

    try:
        username = line[:index].decode("utf-8")
    except UnicodeDecodeError:
        raise RecordFormatError("Record username is not valid UTF-8") from None

    return username, line[index + 1:]
