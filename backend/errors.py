# file: backend/errors.py


class AirQualityError(Exception):
    """Base class for errors raised by the measurement service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AirQualityError):
    """Rejected input: enum mismatch, non-finite value, missing field or duplicate measurement."""


class NotFoundError(AirQualityError):
    """Unknown measurement id or station reference."""


class StoreError(AirQualityError):
    """The database could not complete the operation."""
