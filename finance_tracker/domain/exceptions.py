"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class Unauthenticated(DomainException):
    """Request carries no usable credentials"""

    pass


class Forbidden(DomainException):
    """Authenticated user does not own the requested resource"""

    pass


class NotFound(DomainException):
    """Requested resource does not exist"""

    pass


class BadRequest(DomainException):
    """Request data violates a validation rule"""

    pass


class Conflict(DomainException):
    """Resource already exists (e.g. duplicate registration email)"""

    pass


class TokenError(DomainException):
    """Bearer token could not be verified"""

    pass


class InvalidToken(TokenError):
    """Token signature or claims are invalid"""

    pass


class TokenExpired(TokenError):
    """Token is past its expiry"""

    pass


class MalformedToken(TokenError):
    """Token is not a structurally valid JWT"""

    pass
