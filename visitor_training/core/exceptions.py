from typing import Optional


class TrainingServiceError(Exception):
    """
    Base class for every error the training service reports to a caller.

    Each subclass carries the HTTP status it maps to and a short public
    label; `details` is the human readable explanation.
    """

    status_code: int = 500
    error: str = "Internal error"

    def __init__(self, details: str, error: Optional[str] = None):
        super().__init__(details)
        self.details = details
        if error is not None:
            self.error = error

    def to_dict(self) -> dict:
        return {"error": self.error, "details": self.details}


class InvalidInput(TrainingServiceError):
    """Bad name or form field. Recovered locally and shown inline."""

    status_code = 400
    error = "Invalid input"

    def __init__(self, details: str, field_errors: Optional[dict] = None, error: Optional[str] = None):
        super().__init__(details, error=error)
        self.field_errors = field_errors or {}


class StoreUnavailable(TrainingServiceError):
    """The record store could not be reached or rejected the operation."""

    status_code = 500
    error = "Database error"


# The record store reports backend failures and outages the same way.
StoreError = StoreUnavailable


class ConfigurationError(TrainingServiceError):
    """Required store credentials are missing."""

    status_code = 500
    error = "Server configuration error"
