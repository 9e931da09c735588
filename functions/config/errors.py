"""RenoQuote error handling.

Custom exceptions and error codes for the estimate engine and project workflow.
"""

from typing import Optional, Dict, Any


# Error Codes
class ErrorCode:
    """Error code constants."""

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"
    NO_CONTRACTORS_SELECTED = "NO_CONTRACTORS_SELECTED"

    # Data Integrity Errors
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    PRICING_KEY_MISSING = "PRICING_KEY_MISSING"
    CONTRACTOR_NOT_FOUND = "CONTRACTOR_NOT_FOUND"

    # Quote Workflow Errors
    QUOTE_NOT_RECEIVED = "QUOTE_NOT_RECEIVED"
    QUOTE_ALREADY_FINALIZED = "QUOTE_ALREADY_FINALIZED"

    # Store Errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"

    # Generic
    INTERNAL_ERROR = "INTERNAL_ERROR"


class RenoQuoteError(Exception):
    """Base exception for RenoQuote errors.

    Provides structured error information for API responses.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API response."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(RenoQuoteError):
    """User-input validation error."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict] = None,
        code: str = ErrorCode.VALIDATION_ERROR
    ):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "field": field} if field else details
        )
        self.field = field


class TemplateNotFoundError(RenoQuoteError):
    """Raised when a template id is absent from the registry."""

    def __init__(self, template_id: str):
        super().__init__(
            code=ErrorCode.TEMPLATE_NOT_FOUND,
            message=f"Template '{template_id}' not found",
            details={"template_id": template_id}
        )
        self.template_id = template_id


class PricingDataError(RenoQuoteError):
    """A pricing table has no entry for a selected option."""

    def __init__(self, template_id: str, table: str, key: Any):
        super().__init__(
            code=ErrorCode.PRICING_KEY_MISSING,
            message=f"Pricing table '{table}' of template '{template_id}' has no entry for {key!r}",
            details={"template_id": template_id, "table": table, "key": key}
        )
        self.template_id = template_id
        self.table = table
        self.key = key


class StoreUnavailableError(RenoQuoteError):
    """Project record store could not be reached."""

    def __init__(self, operation: str, message: str, details: Optional[Dict] = None):
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message=message,
            details={**(details or {}), "operation": operation}
        )
        self.operation = operation


class QuoteStateError(RenoQuoteError):
    """Quote workflow precondition violation."""

    def __init__(self, code: str, message: str, contractor_id: str, details: Optional[Dict] = None):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "contractor_id": contractor_id}
        )
        self.contractor_id = contractor_id
