"""
Custom Exceptions - Application-specific error types
"""


class LifeDashException(Exception):
    """Base exception for all life dashboard errors"""
    pass


class HabitNotFoundError(LifeDashException):
    """Raised when a habit cannot be found"""
    pass


class InvalidHabitDataError(LifeDashException):
    """Raised when habit data validation fails"""
    pass


class DatabaseError(LifeDashException):
    """Raised when record store operations fail"""
    pass


class ConfigurationError(LifeDashException):
    """Raised when settings are missing or inconsistent"""
    pass
