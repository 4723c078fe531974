"""Auth error taxonomy."""

from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    """Kinds of failure a session operation can complete with."""
    TRANSPORT = "transport"  # no response received
    INVALID_RESPONSE = "invalid_response"  # bad status, unparseable body or missing field
    DECODE = "decode"  # body did not decode into the expected shape
    NO_DATA = "no_data"  # empty body where one was required


DEFAULT_MESSAGES = {
    AuthErrorKind.TRANSPORT: "Could not connect to the server",
    AuthErrorKind.INVALID_RESPONSE: "Invalid Response",
    AuthErrorKind.DECODE: "Could not read the server response",
    AuthErrorKind.NO_DATA: "No data received",
}


class AuthError(Exception):
    """
    A failed session operation.

    ``message`` is human-readable and meant to be shown to the user as is.
    """

    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None, cause: Optional[BaseException] = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.cause = cause
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind.value!r}, message={self.message!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, AuthError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))
