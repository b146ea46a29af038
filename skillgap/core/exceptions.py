from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

# --- Validation (422) ---

class ValidationError(AppException):
    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code=error_code,
            details=details
        )

class MissingFieldError(ValidationError):
    def __init__(self, field: str):
        super().__init__(
            message=f"Missing required field: {field}",
            error_code="MISSING_FIELD",
            details={"field": field}
        )

class InvalidEmailError(ValidationError):
    def __init__(self, email: str, domain: str):
        super().__init__(
            message=f"Email must belong to the {domain} domain",
            error_code="INVALID_EMAIL",
            details={"email": email, "domain": domain}
        )

class RatingOutOfRangeError(ValidationError):
    def __init__(self, skill: str, rating: Any):
        super().__init__(
            message=f"Rating for '{skill}' must be between 1 and 5 (got {rating})",
            error_code="RATING_OUT_OF_RANGE",
            details={"skill": skill, "rating": rating}
        )

class ExpectationOutOfRangeError(ValidationError):
    def __init__(self, skill: str, expectation: Any):
        super().__init__(
            message=f"Expectation for '{skill}' must be between 1 and 5 (got {expectation})",
            error_code="EXPECTATION_OUT_OF_RANGE",
            details={"skill": skill, "expectation": expectation}
        )

class GapInconsistentError(ValidationError):
    def __init__(self, skill: str, gap: Any, expected: Optional[int]):
        super().__init__(
            message=f"Gap for '{skill}' is inconsistent with the ratings (got {gap}, expected {expected})",
            error_code="GAP_INCONSISTENT",
            details={"skill": skill, "gap": gap, "expected": expected}
        )

class InvalidSchemaError(ValidationError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="INVALID_SCHEMA")

# --- Lookup / conflicts ---

class NotFoundError(AppException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )

class ConflictError(AppException):
    def __init__(self, message: str, error_code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code=error_code,
            details=details
        )

class SkillNotSelectedError(ConflictError):
    """Manager rating submitted for a skill the employee never self-assessed."""
    def __init__(self, skill: str):
        super().__init__(
            message=f"Skill '{skill}' has no matching self-assessment record",
            error_code="SKILL_NOT_SELECTED",
            details={"skill": skill}
        )

class DuplicateResponseError(ConflictError):
    def __init__(self):
        super().__init__(
            message="Employee response already exists",
            error_code="DUPLICATE_RESPONSE",
            details={"reason": "An assessment for this employee ID or email already exists"}
        )

class ReviewStateError(ConflictError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="REVIEW_STATE")

# --- Infrastructure (503 / 500) ---

class TransportError(AppException):
    def __init__(self, message: str = "Unable to reach the skills service"):
        super().__init__(
            message=message,
            status_code=503,
            error_code="TRANSPORT_ERROR"
        )

class StorageError(AppException):
    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            message=message,
            status_code=503,
            error_code="STORAGE_UNAVAILABLE"
        )

class TaxonomyError(AppException):
    """Raised when skill taxonomy data is inconsistent (e.g. a skill in two sections)."""
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=500,
            error_code="TAXONOMY_ERROR"
        )
