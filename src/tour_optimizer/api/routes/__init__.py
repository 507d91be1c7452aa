"""Route group exports."""

from . import health, tours

__all__ = ["health", "tours"]
