"""Standardized errors raised by the stream library.

User code raising inside a source or transform is never wrapped: those
exceptions propagate unchanged. The types here cover failures the library
detects itself (bad arguments and malformed zip or concatenation structures).
Uses Pydantic for the structured error payload.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Machine-readable classification of library errors."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    UNKNOWN = "UNKNOWN"


class StreamError(BaseModel):
    """Structured description of a library error.

    Attributes:
        operation: Factory or combinator that rejected its input
        message: Human-readable error message
        code: Machine-readable error code
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Stream Error",
            "examples": [{
                "operation": "batch",
                "message": "batch_size must be a positive integer, got 0",
                "code": "INVALID_ARGUMENT",
            }],
        },
    )

    operation: Annotated[str, Field(min_length=1, description="Operation that failed")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Error classification")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_usage_error(self) -> bool:
        """Whether the caller passed something the library cannot accept."""
        return self.code in (ErrorCode.INVALID_ARGUMENT, ErrorCode.INVALID_STRUCTURE)

    @classmethod
    def create(cls, operation: str, message: str, code: ErrorCode = ErrorCode.UNKNOWN) -> Self:
        """Factory method for construction."""
        return cls(operation=operation, message=message, code=code)

    def render(self) -> str:
        return f"{self.operation}: {self.message} [{self.code}]"

    __str__ = render


class StreamException(Exception):
    """Exception wrapping a StreamError for raising."""

    def __init__(self, error: StreamError) -> None:
        self.error = error
        super().__init__(error.render())

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(cls, operation: str, message: str, code: ErrorCode = ErrorCode.UNKNOWN) -> Self:
        """Create stream exception."""
        return cls(StreamError.create(operation, message, code))


class InvalidArgumentError(StreamException, ValueError):
    """A factory or combinator received an unusable argument."""

    @classmethod
    def for_operation(cls, operation: str, message: str) -> Self:
        return cls(StreamError.create(operation, message, ErrorCode.INVALID_ARGUMENT))


class InvalidStructureError(StreamException, TypeError):
    """A zip structure contained something other than iterators, sequences or mappings."""

    @classmethod
    def for_operation(cls, operation: str, message: str) -> Self:
        return cls(StreamError.create(operation, message, ErrorCode.INVALID_STRUCTURE))
