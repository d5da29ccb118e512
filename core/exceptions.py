"""Custom exception hierarchy for the annotation service."""

from __future__ import annotations

from typing import Any


class AnnotationServiceError(Exception):
    """Base exception for all annotation-service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(AnnotationServiceError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(AnnotationServiceError):
    """Raised when a request parameter or payload is missing or malformed."""
    pass


class NotFoundError(AnnotationServiceError):
    """Base class for lookups that found nothing."""
    pass


class BlobNotFoundError(NotFoundError):
    """Raised when an object does not exist in the store."""
    pass


class CasesExhaustedError(NotFoundError):
    """Raised when an annotator has no unannotated cases left."""
    pass


class CasePairingError(NotFoundError):
    """Raised when a case JSON has no image with the same base filename."""
    pass


class StorageError(AnnotationServiceError):
    """Raised when storage operations fail."""
    pass


class UploadVerificationError(StorageError):
    """Raised when a written object is missing right after the write."""
    pass


class LedgerError(StorageError):
    """Raised when an annotator ledger cannot be read or written."""
    pass
