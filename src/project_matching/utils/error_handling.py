"""Error handling utilities and custom exceptions.

Provides the matching error taxonomy and structured logging helpers. Status
codes let request handlers that consume this library map errors directly.
"""
import logging
from typing import Optional, Dict, Any
from fastapi import status

logger = logging.getLogger(__name__)


# Custom Exception Classes
class MatchingError(Exception):
    """Base exception for all project matching errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "MATCHING_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(MatchingError):
    """Invalid query options."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field, **(details or {})},
            status_code=status.HTTP_400_BAD_REQUEST
        )


class DimensionMismatchError(MatchingError):
    """Two vectors of unequal length were compared."""

    def __init__(self, expected: int, actual: int, details: Optional[Dict] = None):
        super().__init__(
            message=f"Vector dimensions differ: {expected} != {actual}",
            error_code="DIMENSION_MISMATCH",
            details={"expected": expected, "actual": actual, **(details or {})},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class EmptyInputError(MatchingError):
    """An aggregate was requested over an empty sequence."""

    def __init__(self, message: str = "Cannot average an empty sequence of vectors"):
        super().__init__(
            message=message,
            error_code="EMPTY_INPUT",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class ItemNotFoundError(MatchingError):
    """The requested media item does not exist."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"Media item {item_id} not found",
            error_code="ITEM_NOT_FOUND",
            details={"item_id": item_id},
            status_code=status.HTTP_404_NOT_FOUND
        )


class ReferenceNotAnalyzedError(MatchingError):
    """A media item was used for matching before its analysis completed."""

    def __init__(self, item_id: str, analysis_status: Optional[str] = None, side: Optional[str] = None):
        label = f"{side} item" if side else "Item"
        super().__init__(
            message=f"{label} {item_id}: analysis is not complete",
            error_code="REFERENCE_NOT_ANALYZED",
            details={"item_id": item_id, "status": analysis_status, "side": side},
            status_code=status.HTTP_409_CONFLICT
        )


class AnalysisInProgressError(MatchingError):
    """An analysis is already running for the item."""

    def __init__(self, item_id: str):
        super().__init__(
            message=f"Analysis already running for media item {item_id}",
            error_code="ANALYSIS_IN_PROGRESS",
            details={"item_id": item_id},
            status_code=status.HTTP_409_CONFLICT
        )


class AnalysisFailure(MatchingError):
    """The analysis pipeline could not produce a complete result."""

    def __init__(self, message: str, stage: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            error_code="ANALYSIS_FAILED",
            details={"stage": stage, **(details or {})},
            status_code=status.HTTP_502_BAD_GATEWAY
        )
        self.stage = stage


class ExternalServiceError(MatchingError):
    """External provider (transcription, LLM, embeddings, download) errors."""

    def __init__(self, message: str, service: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            error_code="EXTERNAL_SERVICE_ERROR",
            details={"service": service, **(details or {})},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )
        self.service = service


# Logging Helpers
def log_error(
    error: Exception,
    context: Optional[str] = None,
    item_id: Optional[str] = None,
    extra: Optional[Dict] = None
):
    """
    Log error with context and structured data.

    Args:
        error: The exception to log
        context: Context description (e.g., "analysis", "recommendation")
        item_id: Optional media item ID for tracking
        extra: Additional context data
    """
    log_data = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context,
        "item_id": item_id,
        **(extra or {})
    }

    if isinstance(error, MatchingError):
        log_data["error_code"] = error.error_code
        log_data["details"] = error.details

    logger.error(
        f"Error in {context}: {str(error)}",
        extra=log_data,
        exc_info=error
    )


def log_warning(
    message: str,
    context: Optional[str] = None,
    extra: Optional[Dict] = None
):
    """
    Log warning with structured data.

    Args:
        message: Warning message
        context: Context description
        extra: Additional data
    """
    log_data = {
        "context": context,
        **(extra or {})
    }

    logger.warning(
        f"Warning in {context}: {message}" if context else message,
        extra=log_data
    )
