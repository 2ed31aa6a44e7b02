"""Custom exception hierarchy for Deskspace."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Lookup errors
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    FOLDER_ITEM_NOT_FOUND = "FOLDER_ITEM_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    MAILING_LIST_NOT_FOUND = "MAILING_LIST_NOT_FOUND"
    VAULT_ITEM_NOT_FOUND = "VAULT_ITEM_NOT_FOUND"

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_NAME = "DUPLICATE_NAME"

    # Collaborators
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    ASSISTANT_UNAVAILABLE = "ASSISTANT_UNAVAILABLE"

    # Rate limiting
    RATE_LIMITED = "RATE_LIMITED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ServiceFailure(str, Enum):
    """Why a call to an external collaborator (storage, completion) failed."""

    NOT_CONFIGURED = "not_configured"
    UNREACHABLE = "unreachable"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


class DeskException(Exception):
    """Base for every error the API reports to clients.

    ``error_code`` is the stable machine-readable name, ``status_code`` the
    HTTP status, and ``details`` extra context such as the offending field.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class ValidationError(DeskException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DuplicateNameError(DeskException):
    """Another entity of the same kind already uses this name."""

    def __init__(self, entity: str, name: str):
        super().__init__(
            f"A {entity} with this name already exists",
            ErrorCode.DUPLICATE_NAME,
            status_code=400,
            details={"field": "name", "name": name}
        )


class NotFoundError(DeskException):
    """Base for entity lookups that did not resolve."""

    entity = "Entity"
    code = ErrorCode.INTERNAL_ERROR
    id_field = "id"

    def __init__(self, entity_id: str):
        super().__init__(
            f"{self.entity} not found: {entity_id}",
            self.code,
            status_code=404,
            details={self.id_field: entity_id}
        )


class FolderNotFoundError(NotFoundError):
    entity = "Folder"
    code = ErrorCode.FOLDER_NOT_FOUND
    id_field = "folder_id"


class FolderItemNotFoundError(NotFoundError):
    entity = "Folder item"
    code = ErrorCode.FOLDER_ITEM_NOT_FOUND
    id_field = "item_id"


class DocumentNotFoundError(NotFoundError):
    entity = "Document"
    code = ErrorCode.DOCUMENT_NOT_FOUND
    id_field = "document_id"


class MailingListNotFoundError(NotFoundError):
    entity = "Mailing list"
    code = ErrorCode.MAILING_LIST_NOT_FOUND
    id_field = "mailing_list_id"


class VaultItemNotFoundError(NotFoundError):
    entity = "Vault item"
    code = ErrorCode.VAULT_ITEM_NOT_FOUND
    id_field = "vault_item_id"


class ExternalServiceError(DeskException):
    """Object storage or the completion service failed or is not configured.

    ``category`` lets callers tell "not configured" apart from transient
    failures without parsing messages.
    """

    def __init__(
        self,
        service: str,
        message: str,
        category: ServiceFailure = ServiceFailure.OTHER,
        status_code: int = 500,
        error_code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
    ):
        super().__init__(
            message,
            error_code,
            status_code=status_code,
            details={"service": service, "category": category.value},
        )
        self.service = service
        self.category = category


class AssistantUnavailableError(ExternalServiceError):
    """The assistant cannot answer because the completion service failed.

    Distinct from an answer saying the data does not contain the
    information, which is a normal 200 response.
    """

    def __init__(self, message: str, category: ServiceFailure = ServiceFailure.OTHER):
        super().__init__(
            "completion",
            message,
            category=category,
            status_code=503,
            error_code=ErrorCode.ASSISTANT_UNAVAILABLE,
        )


@dataclass(frozen=True)
class PartialFailure:
    """A sub-operation that failed while its parent operation still succeeded.

    Reported inside results (per-query errors, per-document fetch failures),
    never raised.
    """

    name: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error}
