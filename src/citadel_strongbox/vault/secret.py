# Strongbox - Secret Container
#
# SecretBox owns a private bytearray and overwrites it with zeros when it
# is closed, garbage collected, or leaves a ``with`` block. Contents are
# only reachable through expose_secret(), which returns a read-only view
# of the same buffer (no copy).
#
# Limits: bytes objects handed to the constructor are immutable and
# cannot be wiped; only the box's own buffer (and a bytearray source) is.

import hmac
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def wipe(buffer: bytearray) -> None:
    """Overwrite a mutable buffer with zero bytes in place."""
    for i in range(len(buffer)):
        buffer[i] = 0


class SecretBox:
    """Opaque, zero-on-release holder for secret bytes.

    Example:
        with SecretBox(bytearray(b"hunter2")) as box:
            use(box.expose_secret())
        # buffer is zeroed here
    """

    __slots__ = ("_data", "_closed")

    def __init__(self, data: BytesLike):
        self._data = bytearray(data)
        self._closed = False
        # A mutable source would otherwise keep a second plaintext copy alive
        if isinstance(data, bytearray):
            wipe(data)

    def expose_secret(self) -> memoryview:
        """Read-only view of the contents. Do not keep it past close()."""
        if self._closed:
            raise ValueError("SecretBox is closed")
        return memoryview(self._data).toreadonly()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Zero the buffer. Safe to call more than once."""
        if getattr(self, "_closed", True):
            return
        wipe(self._data)
        self._closed = True

    def __enter__(self) -> "SecretBox":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        self.close()

    def __len__(self) -> int:
        return 0 if self._closed else len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBox):
            return NotImplemented
        if self._closed or other._closed:
            return False
        return hmac.compare_digest(self._data, other._data)

    __hash__ = None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "redacted"
        return f"SecretBox(<{state}>)"

    __str__ = __repr__

    # No copy path may produce an unmanaged duplicate of the contents

    def __copy__(self):
        raise TypeError("SecretBox cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("SecretBox cannot be copied")

    def __reduce_ex__(self, protocol):
        raise TypeError("SecretBox cannot be pickled")
