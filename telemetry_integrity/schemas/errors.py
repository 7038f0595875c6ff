"""
Schemas & Canonicalization
File: errors.py

Purpose: Error taxonomy for the telemetry integrity engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every operation in this library is deterministic and side-effect free,
so no error is retryable: retrying a pure function with the same input
never helps. A failed proof verification is NOT an error; it is the
boolean result False.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"

    # Encoding Errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Proof Errors
    MALFORMED_PROOF = "MALFORMED_PROOF"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class IntegrityError(BaseModel):
    """
    Base error model for structured error communication.

    Callers that persist or forward failures (for example an anchoring
    job reporting why a daily batch produced no root) can serialize this
    model instead of passing exception objects around.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "IntegrityException":
        """Convert this error model to a raised exception."""
        return IntegrityException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class IntegrityException(Exception):
    """
    Base exception for all telemetry integrity errors.

    This exception carries structured error information and can be
    converted to/from IntegrityError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "INTEGRITY_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> IntegrityError:
        """Convert this exception to an IntegrityError model."""
        return IntegrityError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(IntegrityException, ValueError):
    """Raised when a tree is requested over zero segments."""

    def __init__(
        self,
        message: str = "Cannot build Merkle tree from empty segments",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class IndexOutOfRangeError(IntegrityException, IndexError):
    """Raised when a proof is requested for a leaf the tree does not hold."""

    def __init__(
        self,
        leaf_index: int,
        leaf_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["leaf_index"] = leaf_index
        full_details["leaf_count"] = leaf_count
        super().__init__(
            message=f"Leaf index {leaf_index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )


class MalformedProofError(IntegrityException, ValueError):
    """Raised when a proof, leaf hash or root is not hash-shaped."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if position is not None:
            full_details["position"] = position
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
            retryable=False,
        )


class CanonicalizationError(IntegrityException, ValueError):
    """Raised when a segment cannot be canonically encoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class ConfigurationError(IntegrityException, ValueError):
    """Raised when configuration values are invalid."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )
