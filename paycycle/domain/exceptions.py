"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Card cycle configuration is missing or out of range"""

    pass


class InvalidTransactionError(DomainException):
    """Transaction record is missing required fields or is inconsistent"""

    pass


class TextExtractionError(DomainException):
    """Text extraction service returned an error or is unavailable"""

    pass


class RecordNotFoundError(DomainException):
    """Requested card, category or transaction does not exist"""

    pass
