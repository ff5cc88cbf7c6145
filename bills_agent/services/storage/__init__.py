"""
Storage Services Package

Provides the abstract storage interface and its concrete implementation.
Currently a local JSON file, but designed to be swappable.
"""

from bills_agent.services.storage.interface import (
    BillStorageInterface,
    NotFoundError,
    StorageError,
)
from bills_agent.services.storage.json_file import JsonFileBillStorage

__all__ = [
    # Interfaces
    "BillStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # JSON file implementation
    "JsonFileBillStorage",
]
