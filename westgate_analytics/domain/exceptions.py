"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RecordStoreError(DomainException):
    """Record store query failed or is unreachable"""

    pass


class InvalidRecordError(DomainException):
    """Raw loan row is missing required fields or has an unparseable timestamp"""

    pass


class InvalidThresholdError(DomainException, ValueError):
    """Threshold or sweep step outside its allowed range"""

    pass


class ThresholdWriteForbiddenError(DomainException):
    """Caller lacks the capability to commit thresholds"""

    pass
