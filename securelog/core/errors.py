"""
SecureLog Errors

All exceptions raised by SecureLog derive from SecureLogError.
"""

from __future__ import annotations


class SecureLogError(Exception):
    """Base class for SecureLog errors."""


class InvalidInputError(SecureLogError, ValueError):
    """Raised when a function receives an argument it cannot work with."""


class PatternCatalogError(SecureLogError):
    """Raised when an external detector catalog cannot be loaded."""


class WorkerUnavailableError(SecureLogError):
    """Raised when a match request is sent to a worker that is not running."""
