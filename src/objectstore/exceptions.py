# src/objectstore/exceptions.py
"""
Custom exceptions for the objectstore library.

This module defines a small hierarchy of exception classes so applications
can tell configuration mistakes, bad call arguments and values that cannot
be written to a string-only tier apart from each other.

Errors raised by the tier services themselves are never wrapped; they reach
the caller unchanged.
"""


class ObjectStoreError(Exception):
    """Base class for all objectstore specific errors."""
    def __init__(self, message: str = "An unspecified error occurred in objectstore."):
        super().__init__(message)


class ConfigError(ObjectStoreError):
    """Raised for invalid store options or an unknown storage scope."""
    def __init__(self, message: str = "Configuration error."):
        super().__init__(message)


class InvalidArgumentError(ObjectStoreError):
    """Raised when a store operation receives an argument of the wrong type (e.g. a non-string key)."""
    def __init__(self, argument: str = "Unknown", message: str = "Invalid argument."):
        self.argument = argument
        super().__init__(f"{message} Argument: '{argument}'")


class SerializationError(ObjectStoreError):
    """
    Raised when a value cannot be represented as a string for an external tier.

    With ``jsons=False`` only string values may leave the process; anything
    else ends up here.
    """
    def __init__(self, key: str | None = None, message: str = "Serialization error."):
        self.key = key
        if key is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} Key: '{key}'")
