"""Repository layer for data access."""

from .readings_repository import ReadingsRepository
from .tank_repository import TankRepository

__all__ = [
    "ReadingsRepository",
    "TankRepository",
]
