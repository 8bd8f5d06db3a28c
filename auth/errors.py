"""
Error taxonomy for the register / login flows.

Every error is terminal for the request. Each class carries the HTTP status
and the fixed user-facing message rendered into the response envelope; the
underlying exception text is only ever logged.
"""

from __future__ import annotations

from fastapi import status


class AuthError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MalformedRequest(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class UserNotFound(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "User not found"


class InvalidCredentials(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class HashingFailure(AuthError):
    message = "Failed to hash password"


class FileWriteFailure(AuthError):
    message = "Failed to save photo"


class StoreError(AuthError):
    message = "Database error"


class StoreUnavailable(StoreError):
    pass


class DuplicateUsername(StoreError):
    message = "Failed to create user"
