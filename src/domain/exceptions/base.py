"""Base domain exceptions and error categories."""


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent business rule violations or
    domain-specific error conditions.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundException(DomainException):
    """A referenced entity does not exist."""


class ForbiddenException(DomainException):
    """The caller may not act on the target entity."""


class InvalidStateException(DomainException):
    """The entity is not in a state that allows the operation."""


class ConflictException(DomainException):
    """The operation would violate a uniqueness invariant."""


class ValidationException(DomainException):
    """Input violates a domain constraint not covered by schema validation."""


class LimitExceededException(DomainException):
    """A charge would push the balance over the credit limit."""


class InsufficientContextException(DomainException):
    """The account state cannot cover the requested operation."""


class BlockedException(DomainException):
    """The account is blocked for new charges."""


class NoApplicableRuleException(DomainException):
    """No late-fee rule covers the computed days overdue."""
