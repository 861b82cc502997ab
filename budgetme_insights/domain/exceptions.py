"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidLimitError(DomainException):
    """Display limit is negative"""

    pass
