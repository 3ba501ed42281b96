"""Consistent API response helpers.

Returns plain dicts (not Flask Response objects) because Flask-RESTX
handles JSON serialisation automatically.
"""


def success_response(data, status_code: int = 200):
    """Return a standardised success dict with HTTP status code.

    Args:
        data: Serialisable payload.
        status_code: HTTP status code (default 200).
    """
    return {"status": "success", "data": data}, status_code


def error_response(
    message: str,
    error_code: str = "INTERNAL_ERROR",
    status_code: int = 500,
    details=None,
):
    """Return a standardised error dict with HTTP status code.

    ``details`` carries rule violations or field errors when present.
    """
    body = {
        "status": "error",
        "error_code": error_code,
        "message": message,
    }
    if details:
        body["details"] = details
    return body, status_code


def app_error_response(err):
    """Build an error response from an ``AppError``, keeping its details."""
    details = getattr(err, "violations", None) or getattr(err, "details", None)
    return error_response(err.message, err.error_code, err.status_code, details=details)


def validation_error_response(err):
    """Build a 400 response from a pydantic ``ValidationError``."""
    return error_response(
        "Invalid input", "VALIDATION_ERROR", 400,
        details=err.errors(include_context=False, include_url=False),
    )
