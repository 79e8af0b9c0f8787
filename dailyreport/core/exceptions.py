"""
Application-wide exception hierarchy.

Services raise these types and never return error tuples. The error handlers
registered in ``dailyreport.utils.errors`` translate each one into the JSON
error envelope, so every endpoint reports the same failure the same way.

Usage:
    from dailyreport.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="DailyReport", resource_id=42)
    raise ValidationError("report_date must not be in the future",
                          details={"report_date": "future date"})
"""


class AppError(Exception):
    """Base class for every error in the closed taxonomy.

    Attributes:
        code: Stable machine-readable code (one of ``E.*``).
        status: HTTP status the error handler responds with.
        details: Optional field-level breakdown, keyed by field name.
    """

    code = "ERR_INTERNAL"
    status = 500

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppError):
    """Raised when a referenced report, visit, comment, customer or
    sales person does not exist.

    Args:
        resource: Human-readable entity name (e.g. "DailyReport").
        resource_id: The PK that was looked up.
    """

    code = "ERR_NOT_FOUND"
    status = 404

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ForbiddenError(AppError):
    """Raised when the resolver denies an operation or a status gate blocks it.

    The ``action`` selects the error code so a client can tell "you may not
    see this" apart from "this report is locked for editing".

    Args:
        action: One of ``access``, ``edit``, ``delete``, ``comment``.
        message: Human-readable explanation.
    """

    status = 403

    CODES = {
        "access": "ERR_FORBIDDEN_ACCESS",
        "edit": "ERR_FORBIDDEN_EDIT",
        "delete": "ERR_FORBIDDEN_DELETE",
        "comment": "ERR_FORBIDDEN_COMMENT",
    }

    def __init__(self, action: str, message: str) -> None:
        if action not in self.CODES:
            raise ValueError(f"unknown forbidden action {action!r}")
        self.action = action
        self.code = self.CODES[action]
        super().__init__(message)


class ValidationError(AppError):
    """Raised when well-formed input violates a business rule.

    Covers future report dates, submitted reports without visits, unknown
    customer ids and malformed payloads rejected by ``payloads``.

    Args:
        message: Human-readable explanation of what failed.
        details: Field name -> error description.
    """

    code = "ERR_VALIDATION"
    status = 422


class DuplicateEntryError(AppError):
    """Raised when an operation would violate a uniqueness rule.

    Args:
        resource: Model name.
        field: The unique field (or field pair) that would be duplicated.
        value: The conflicting value.
    """

    code = "ERR_DUPLICATE_ENTRY"
    status = 409

    def __init__(self, resource: str, field: str, value=None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        msg = f"{resource} with {field}={value!r} already exists"
        super().__init__(msg, details={field: "already exists"})


class ResourceInUseError(AppError):
    """Raised when a delete is blocked by rows that still reference the target."""

    code = "ERR_RESOURCE_IN_USE"
    status = 409

    def __init__(self, resource: str, resource_id: int, reference_count: int | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.reference_count = reference_count
        msg = f"{resource} id={resource_id} is still referenced"
        if reference_count is not None:
            msg += f" by {reference_count} record(s)"
        super().__init__(msg)


class UnauthorizedError(AppError):
    """Raised when a request carries no usable identity."""

    code = "ERR_UNAUTHORIZED"
    status = 401


class InternalError(AppError):
    """Raised when the storage layer fails unexpectedly.

    The message is always generic; the original exception is chained and
    logged, never returned to the caller.
    """

    code = "ERR_INTERNAL"
    status = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
