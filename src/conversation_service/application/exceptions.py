from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ValidationError(AppError):
    pass


class InvalidRangeError(AppError):
    """Start of a time window is after its end, or the window is too wide."""


class UnsupportedScopeError(AppError):
    """Migration requested for a product it is not implemented for."""


class MigrationsDisabledError(AppError):
    pass
