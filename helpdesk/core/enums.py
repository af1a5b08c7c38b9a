"""
Closed value sets of the helpdesk domain and the shared clock.
"""
from datetime import datetime, timezone
from enum import Enum


class Role(str, Enum):
    USER = "user"
    TECHNICIAN = "technician"


class EstadoTicket(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class Prioridad(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
