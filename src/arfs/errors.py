"""Error types raised by the ArFS entity core."""
from dataclasses import dataclass
from typing import List


class ArFSError(Exception):
    """Base class for every error raised by this package."""


class InvalidIdentifier(ArFSError, ValueError):
    def __init__(self, value: object, what: str = "identifier"):
        self.value = value
        super().__init__(f"Invalid {what}: {value!r} is not a UUID")


class UnsupportedAuthMode(ArFSError):
    pass


class KeyImportFailure(ArFSError):
    pass


class UnsupportedCipher(ArFSError):
    pass


class MissingNonce(ArFSError):
    pass


class AuthenticationFailure(ArFSError):
    pass


class MissingDecryptionKey(ArFSError):
    pass


class RecordNotFound(ArFSError, KeyError):
    def __str__(self) -> str:
        return Exception.__str__(self)


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationFailure(ArFSError, ValueError):
    """Raised with the complete list of violated field constraints."""

    def __init__(self, violations: List[FieldViolation]):
        self.violations = list(violations)
        detail = "; ".join(str(v) for v in self.violations)
        super().__init__(f"Invalid entity ({len(self.violations)} violation(s)): {detail}")

    @property
    def fields(self) -> List[str]:
        return [v.field for v in self.violations]
