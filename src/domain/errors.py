"""Domain errors

Every failure surfaced by the subscription core carries a machine-readable
code, a kind from the taxonomy below, and a human-readable message.
"""

from enum import Enum
from libs.result import Error


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    INVALID_TRANSITION = "invalid_transition"
    LIMIT_EXCEEDED = "limit_exceeded"
    CONFLICT = "conflict"
    VALIDATION_FAILURE = "validation_failure"


class DomainError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION_FAILURE

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def to_error(self) -> Error:
        return Error(
            code=self.code,
            message=self.message,
            reason=self.kind.value,
            kind=self.kind.value,
        )


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class InvalidStateError(DomainError):
    kind = ErrorKind.INVALID_STATE


class InvalidTransitionError(DomainError):
    kind = ErrorKind.INVALID_TRANSITION


class LimitExceededError(DomainError):
    kind = ErrorKind.LIMIT_EXCEEDED


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT


class ValidationFailureError(DomainError):
    kind = ErrorKind.VALIDATION_FAILURE
