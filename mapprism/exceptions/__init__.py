"""
Exceptions for MapPrism.

Domain exceptions live in :mod:`mapprism.exceptions.domain`; HTTP exceptions
for the API layer live in :mod:`mapprism.exceptions.http`.
"""

from .domain import (
    AuthenticationError,
    ConfigurationError,
    DatabaseError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    ErrorKind,
    JobNotFoundError,
    MapprismError,
    MigrationError,
    RecipeAlreadyExistsError,
    RecipeNotFoundError,
    ValidationError,
)
from .http import BAD_REQUEST, INTERNAL_SERVER_ERROR, CustomHTTPException

__all__ = [
    "BAD_REQUEST",
    "INTERNAL_SERVER_ERROR",
    "AuthenticationError",
    "ConfigurationError",
    "CustomHTTPException",
    "DatabaseError",
    "EntityAlreadyExistsError",
    "EntityNotFoundError",
    "ErrorKind",
    "JobNotFoundError",
    "MapprismError",
    "MigrationError",
    "RecipeAlreadyExistsError",
    "RecipeNotFoundError",
    "ValidationError",
]
