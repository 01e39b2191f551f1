from .client import CookieDescriptor, EtherpadClient
from .config_types import ClientConfig
from .dummy import DummyClient
from .envelope import Failure, FailureKind, ResponseCode, Success
from .errors import (
    ConfigError,
    EtherpadClientError,
    InvalidApiKeyError,
    InvalidBaseUrlError,
    MissingApiKeyError,
    UnableToRetrieveVersionError,
    UnsupportedApiVersionError,
    VersionError,
)
from .factory import ClientFactory, is_testing
from .security import NetworkPolicy, is_url_blocked

__all__ = [
    "ClientConfig",
    "ClientFactory",
    "CookieDescriptor",
    "DummyClient",
    "EtherpadClient",
    "Failure",
    "FailureKind",
    "ResponseCode",
    "Success",
    "NetworkPolicy",
    "is_testing",
    "is_url_blocked",
    "EtherpadClientError",
    "ConfigError",
    "MissingApiKeyError",
    "InvalidBaseUrlError",
    "VersionError",
    "UnsupportedApiVersionError",
    "UnableToRetrieveVersionError",
    "InvalidApiKeyError",
]
