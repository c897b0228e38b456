# belajarshafa/core/exceptions.py
from typing import Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors raised by the service layer.

    Each subclass carries the HTTP status it maps to; the handler registered
    in ``belajarshafa.main`` turns it into ``{"detail": ...}``.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
