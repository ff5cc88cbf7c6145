"""Services package."""

from bills_agent.services.storage import (
    BillStorageInterface,
    JsonFileBillStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Storage services
    "BillStorageInterface",
    "JsonFileBillStorage",
    "NotFoundError",
    "StorageError",
]
