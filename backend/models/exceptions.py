"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP exceptions
by centralized exception handlers in main.py, maintaining proper separation of concerns.

The authentication module (auth.py) also uses these domain exceptions to remain
HTTP-agnostic, allowing reuse in non-HTTP contexts (CLI tools, background tasks).

Enhanced with correlation IDs for Sentry integration and user error reporting.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    pass


class ValidationException(DomainException):
    """Raised when input validation fails."""

    pass


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    pass


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    pass


class AlreadyExistsException(DomainException):
    """Raised when trying to create a resource that already exists."""

    pass


class StorageException(DomainException):
    """Raised when the database rejects an operation for a non-domain reason."""

    def __init__(self, message: str = "Internal storage error"):
        super().__init__(message)


# Specific exceptions for domain entities


class UserNotFoundException(NotFoundException):
    """User not found."""

    pass


class AlreadyTakenException(AlreadyExistsException):
    """Email, username or category name is already in use."""

    pass


class PostNotFoundException(NotFoundException):
    """Post not found."""

    def __init__(self, post_id: int):
        super().__init__(f"Post with ID {post_id} not found")
        self.post_id = post_id


class CommentNotFoundException(NotFoundException):
    """Comment not found."""

    def __init__(self, comment_id: int):
        super().__init__(f"Comment with ID {comment_id} not found")
        self.comment_id = comment_id


class CategoryNotFoundException(NotFoundException):
    """Category not found."""

    pass


class NotificationNotFoundException(NotFoundException):
    """Notification not found."""

    def __init__(self, notification_id: int):
        super().__init__(f"Notification with ID {notification_id} not found")
        self.notification_id = notification_id


class ReportNotFoundException(NotFoundException):
    """Report not found."""

    def __init__(self, report_id: int):
        super().__init__(f"Report with ID {report_id} not found")
        self.report_id = report_id


class ReportAlreadyClosedException(ConflictException):
    """Raised when closing a report that is already closed."""

    def __init__(self, report_id: int):
        super().__init__(f"Report {report_id} is already closed")
        self.report_id = report_id


class DuplicateVoteException(ConflictException):
    """Concurrent request already recorded a vote for this target."""

    def __init__(self, message: str = "A vote for this target was recorded concurrently"):
        super().__init__(message)


# ============================================================================
# Authentication Exceptions
# ============================================================================


class InvalidPasswordException(AuthenticationException):
    """Password does not match the stored hash."""

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message)


class InvalidCredentialsException(AuthenticationException):
    """Invalid username or password."""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class SessionNotFoundException(AuthenticationException):
    """No session exists for the presented token."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class SessionExpiredException(AuthenticationException):
    """The session exists but its expiry has passed."""

    def __init__(self, message: str = "Session expired"):
        super().__init__(message)


# ============================================================================
# Rate Limiting Exceptions
# ============================================================================


class TooManyAttemptsException(DomainException):
    """Raised when a username has too many recent failed logins."""

    def __init__(
        self,
        message: str = "Too many failed login attempts. Please try again later.",
        retry_after: int | None = None,
    ):
        super().__init__(message)
        self.retry_after = retry_after
