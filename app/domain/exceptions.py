"""Custom business exception classes.

Each exception maps to a specific HTTP status code and error code
for consistent API error responses.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, error_code: str = "INTERNAL_ERROR", status_code: int = 500):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(self.message)


class ResourceNotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str, resource_id: int | str):
        super().__init__(
            message=f"{resource} with id {resource_id} not found",
            error_code="RESOURCE_NOT_FOUND",
            status_code=404,
        )


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: dict | None = None):
        self.details = details or {}
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
        )


class ConflictError(AppError):
    """Raised when a write would clash with existing records."""

    def __init__(self, message: str, details: dict | None = None):
        self.details = details or {}
        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=409,
        )


class AuthenticationRequiredError(AppError):
    """Raised when checkout has neither a customer nor an account to create."""

    def __init__(self, message: str = "An account is required to subscribe"):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_REQUIRED",
            status_code=401,
        )


class DuplicateItemError(AppError):
    """Raised when a product is added twice to the same selection."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            message=f"Product {product_id} is already in the selection; update its quantity instead",
            error_code="DUPLICATE_ITEM",
            status_code=409,
        )


class InvalidQuantityError(AppError):
    """Raised when a non-positive quantity is supplied."""

    def __init__(self, quantity: int):
        self.quantity = quantity
        super().__init__(
            message=f"Quantity must be at least 1 (got {quantity})",
            error_code="INVALID_QUANTITY",
            status_code=400,
        )


class ProductNotCustomizableError(AppError):
    """Raised when a product cannot be chosen for the attached plan."""

    def __init__(self, product_id: int, reason: str):
        self.product_id = product_id
        super().__init__(
            message=f"Product {product_id} cannot be customised for this plan: {reason}",
            error_code="PRODUCT_NOT_CUSTOMIZABLE",
            status_code=422,
        )


class IncompleteCustomizationError(AppError):
    """Raised when checkout is attempted with a selection that breaks plan rules."""

    def __init__(self, violations: list[str]):
        self.violations = violations
        super().__init__(
            message="Your basket does not meet the plan's requirements yet",
            error_code="INCOMPLETE_CUSTOMIZATION",
            status_code=422,
        )


class SubmissionFailedError(AppError):
    """Raised when the checkout collaborator rejects or cannot receive a submission."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(
            message=message,
            error_code="SUBMISSION_FAILED",
            status_code=status_code,
        )
