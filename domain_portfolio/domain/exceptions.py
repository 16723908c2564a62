"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecordError(DomainException):
    """Holding, transaction or renewal record is malformed"""

    pass


class InvalidSettingsError(DomainException):
    """Monitoring settings update names an unknown key or value"""

    pass
