"""Storage module."""

from .seed import DEMO_MAINTENANCE, DEMO_PRODUCTION, seed_demo_data
from .storage import IStorage, Storage

__all__ = [
    "IStorage",
    "Storage",
    "DEMO_PRODUCTION",
    "DEMO_MAINTENANCE",
    "seed_demo_data",
]
