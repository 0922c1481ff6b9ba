"""
HTTP exceptions for API layer.

These exceptions are used ONLY in API routers and dependencies to return
proper HTTP responses. They should NOT be used in services or repositories.
"""

from typing import Self

from fastapi import HTTPException, status


class CustomHTTPException(HTTPException):
    """Base HTTP exception with context support."""

    def with_context(self, detail: str) -> Self:
        """
        Return a copy of the exception with a different detail message.

        Args:
            detail: Additional information about the error

        Returns:
            A new HTTPException with updated details
        """
        return type(self)(status_code=self.status_code, detail=detail, headers=self.headers)


BAD_REQUEST = CustomHTTPException(
    status_code=status.HTTP_400_BAD_REQUEST,
    detail="Invalid request parameters",
)

INTERNAL_SERVER_ERROR = CustomHTTPException(
    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    detail="Internal server error",
)
