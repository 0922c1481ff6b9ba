"""
Security utilities for the MapPrism API.

Every route except the health probe requires a static bearer token equal to
the configured ``api_token``.
"""

import secrets
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mapprism.api.dependencies import SettingsDep
from mapprism.exceptions.domain import AuthenticationError
from mapprism.exceptions.http import INTERNAL_SERVER_ERROR
from mapprism.utils.logger import logger

bearer_scheme = HTTPBearer(auto_error=False, description="Static API token")


def verify_api_token(
    settings: SettingsDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> None:
    """Check the ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: If the header is missing or the token is wrong.
        HTTPException: 500 if no token is configured on the server.
    """
    if credentials is None:
        raise AuthenticationError("Missing or invalid Authorization header")

    if not settings.api_token:
        logger.error("api_token is not configured; rejecting authenticated request")
        raise INTERNAL_SERVER_ERROR.with_context("Server configuration error")

    if not secrets.compare_digest(credentials.credentials, settings.api_token):
        raise AuthenticationError("Invalid token")
