"""
Helpers for turning supabase-py failures into API errors.

Every backend failure is surfaced to the client with the backend's own message,
the way the web client shows it in a toast.
"""

from fastapi import HTTPException


def backend_message(exc: Exception) -> str:
    """Human readable message of a supabase-py (postgrest, auth, storage) error"""
    message = getattr(exc, "message", None)
    if message:
        return str(message)
    return str(exc) or exc.__class__.__name__


def backend_error(exc: Exception, status_code: int = 500) -> HTTPException:
    if isinstance(exc, HTTPException):
        return exc
    return HTTPException(status_code=status_code, detail=backend_message(exc))
