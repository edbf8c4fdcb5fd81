"""Late-fee rule exceptions."""

from .base import NoApplicableRuleException, NotFoundException, ValidationException


class LateFeeRuleNotFoundException(NotFoundException):
    def __init__(self, rule_id: str):
        super().__init__(
            message=f"Late fee rule not found: {rule_id}",
            code="LATE_FEE_RULE_NOT_FOUND",
        )
        self.rule_id = rule_id


class InvalidLateFeeRuleException(ValidationException):
    """Raised when a rule has an empty or inverted overdue window or bad values."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_LATE_FEE_RULE",
        )


class NoLateFeeRuleMatchedException(NoApplicableRuleException):
    """Raised when no rule covers the account's days overdue."""

    def __init__(self, account_id: str, days_overdue: int):
        super().__init__(
            message=f"No late fee rule applies to account {account_id} at {days_overdue} days overdue",
            code="NO_APPLICABLE_RULE",
        )
        self.account_id = account_id
        self.days_overdue = days_overdue
