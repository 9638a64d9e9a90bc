"""
Custom exception hierarchy for the disk inventory.

Anything deriving from InventoryError is fatal to a run, except FileHashError,
which the enrichment workers catch per record.
"""


class InventoryError(Exception):
    """Base exception for all disk inventory errors."""
    pass


class DatabaseError(InventoryError):
    """Raised when a store open, transaction or commit fails."""
    pass


class EnumerationError(InventoryError):
    """Raised when the filesystem walk cannot start or complete."""
    pass


class FileHashError(InventoryError):
    """Raised when file hashing fails."""
    pass


class PrivilegeError(InventoryError):
    """Raised when the process may not enumerate volumes."""
    pass


class ConfigError(InventoryError):
    """Raised when run options are invalid."""
    pass


class IntegrityError(InventoryError):
    """Raised when a store cannot be verified."""
    pass
