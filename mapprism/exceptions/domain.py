"""
Domain exceptions for business logic layer.

These exceptions are used in repositories and services to represent
business logic errors without coupling to HTTP status codes. Every exception
carries an ``ErrorKind`` tag; the API layer maps kinds to responses.
"""

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Classification of domain errors used by the API boundary."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    INTERNAL = "internal"


class MapprismError(Exception):
    """Base exception for all MapPrism-specific errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    @property
    def message(self) -> str:
        """Human readable message (first positional argument)."""
        return str(self.args[0]) if self.args else ""


# Base domain exceptions
class ValidationError(MapprismError):
    """Raised when a recipe definition or job request is invalid."""

    kind = ErrorKind.VALIDATION


class EntityNotFoundError(MapprismError):
    """Raised when an entity is not found in the database."""

    kind = ErrorKind.NOT_FOUND


class EntityAlreadyExistsError(MapprismError):
    """Raised when trying to create an entity that already exists."""

    kind = ErrorKind.CONFLICT


class AuthenticationError(MapprismError):
    """Raised when authentication fails."""

    kind = ErrorKind.AUTHENTICATION


# Recipe exceptions
class RecipeNotFoundError(EntityNotFoundError):
    """Raised when a recipe is not found."""

    def __init__(self, recipe_id: int):
        super().__init__(f"Recipe with id {recipe_id} not found")


class RecipeAlreadyExistsError(EntityAlreadyExistsError):
    """Raised when a recipe with the same name and version already exists."""

    def __init__(self, name: str, version: str):
        super().__init__(f"Recipe '{name}' version '{version}' already exists")


# Job exceptions
class JobNotFoundError(EntityNotFoundError):
    """Raised when a job is not found."""

    def __init__(self, job_id: int):
        super().__init__(f"Job with id {job_id} not found")


# Configuration errors
class ConfigurationError(MapprismError):
    """Raised when there's a configuration problem."""


# Database errors
class DatabaseError(MapprismError):
    """Raised when there's a database operation error."""

    kind = ErrorKind.DATABASE


class MigrationError(DatabaseError):
    """Raised when database migration fails."""
