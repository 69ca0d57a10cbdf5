"""
Exception types for the runway forecasting package.

Data-quality problems never raise; they surface as the empty ForecastResult.
Only bad call arguments and collaborator (DB) failures raise.
"""

from typing import Optional


class ForecastError(Exception):
    """Base class for forecasting errors."""


class InvalidForecastRequest(ForecastError, ValueError):
    """Raised when a forecast is requested with invalid arguments."""


class CollaboratorError(ForecastError):
    """
    A reading source, tank source or persistence sink failed.

    The original exception is chained as __cause__.
    """

    def __init__(self, tank_id: Optional[str], operation: str, message: str = ""):
        self.tank_id = tank_id
        self.operation = operation
        detail = f": {message}" if message else ""
        super().__init__(f"{operation} failed for tank {tank_id}{detail}")
