"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class ForbiddenError(AppError):
    """Raised when the current session may not see a resource."""

    def __init__(self, message="Acceso restringido."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class ApiError(Exception):
    """Raised by the API client for any non-2xx response."""

    def __init__(self, message, status, details=None):
        """Initialize the error."""
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details

    @property
    def is_unauthorized(self):
        return self.status == 401

    @property
    def is_forbidden(self):
        return self.status == 403

    @property
    def is_not_found(self):
        return self.status == 404
