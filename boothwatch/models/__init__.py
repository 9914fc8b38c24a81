from boothwatch.models.booth import Booth
from boothwatch.models.health_log import HealthLog

__all__ = [
    "Booth",
    "HealthLog",
]
