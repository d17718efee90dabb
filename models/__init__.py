# models/__init__.py
from models.base import Base
from models.watchlist import Watchlist
from models.event import Event, Severity

__all__ = [
    "Base",
    "Watchlist",
    "Event",
    "Severity",
]
