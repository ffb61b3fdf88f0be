"""Exceptions for the conditions the core raises instead of reporting as outcomes."""
from asr_compare.models import ErrorDescriptor, ErrorKind


class AsrCompareError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def describe(self) -> ErrorDescriptor:
        return ErrorDescriptor(kind=self.kind, message=str(self))


class ConfigurationError(AsrCompareError):
    """Backend catalog could not be loaded."""


class BackendNotFoundError(AsrCompareError):
    kind = ErrorKind.NOT_FOUND


class EmptyInputError(AsrCompareError):
    kind = ErrorKind.EMPTY_INPUT


class TranscriptionFailedError(AsrCompareError):
    """Single-backend path failed; carries the leg's ErrorDescriptor."""

    def __init__(self, error: ErrorDescriptor) -> None:
        super().__init__(error.message)
        self.error = error
        self.kind = error.kind
