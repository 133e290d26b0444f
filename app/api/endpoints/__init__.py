"""API endpoints package."""

from . import health
from . import requirements
from . import proposal

__all__ = ["health", "requirements", "proposal"]
