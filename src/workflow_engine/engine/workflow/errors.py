from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    # Caller input was wrong; fix the request and try again.
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    # Stored data contradicts itself (a store bug or corruption, never the caller's fault).
    CONSISTENCY = "consistency"


@dataclass(slots=True, eq=False)
class WorkflowError(Exception):
    """Raised for every rejected workflow operation.

    Callers branch on `kind` rather than on exception subclasses.
    """

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message

    @property
    def is_client_error(self) -> bool:
        return self.kind is not ErrorKind.CONSISTENCY

    @classmethod
    def validation(cls, message: str) -> WorkflowError:
        return cls(kind=ErrorKind.VALIDATION, message=message)

    @classmethod
    def not_found(cls, message: str) -> WorkflowError:
        return cls(kind=ErrorKind.NOT_FOUND, message=message)

    @classmethod
    def consistency(cls, message: str) -> WorkflowError:
        return cls(kind=ErrorKind.CONSISTENCY, message=message)
