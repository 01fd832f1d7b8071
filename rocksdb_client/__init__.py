"""Client for a key-value storage server speaking JSON over HTTP."""
__version__ = "1.0.0"

from .client import StoreClient
from .config import ClientConfig
from .exceptions import ApplicationError, CommunicationFailure, InvalidArgument, StoreClientError

__all__ = [
    "StoreClient",
    "ClientConfig",
    "StoreClientError",
    "InvalidArgument",
    "CommunicationFailure",
    "ApplicationError",
]
