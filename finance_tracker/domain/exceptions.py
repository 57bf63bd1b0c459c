"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class FinanceServiceError(DomainException):
    """Finance service is unreachable or returned a malformed response"""

    user_message = "Connection error"


class ServiceRejectedError(DomainException):
    """Finance service answered with success=false"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotAuthenticatedError(DomainException):
    """Operation requires a logged-in session"""

    pass
