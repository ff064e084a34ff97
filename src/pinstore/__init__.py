from .exceptions import (
    ConfigurationError,
    DatabaseUnavailableError,
    InvalidRequestError,
    NotFoundError,
    PersistenceError,
    PinStoreError,
    SerializationError,
    UpstreamError,
)
from .main import create_app

__all__ = [
    "create_app",
    # Errors
    "PinStoreError",
    "ConfigurationError",
    "InvalidRequestError",
    "NotFoundError",
    "UpstreamError",
    "DatabaseUnavailableError",
    "PersistenceError",
    "SerializationError",
]
