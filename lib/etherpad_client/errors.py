from __future__ import annotations


class EtherpadClientError(Exception):
    """Base client error. Raised only while a client is being constructed."""

    code = "error_client"

    def __init__(self, message: str | None = None, details: str | None = None):
        super().__init__(message or self.code)
        self.details = details


class ConfigError(EtherpadClientError):
    """Settings are unusable before any request is made."""


class MissingApiKeyError(ConfigError):
    code = "error_config_has_no_api_key"


class InvalidBaseUrlError(ConfigError):
    code = "error_config_has_no_valid_baseurl"


class VersionError(EtherpadClientError):
    """API version negotiation failed."""


class UnsupportedApiVersionError(VersionError):
    code = "error_wrong_api_version"


class UnableToRetrieveVersionError(VersionError):
    code = "error_could_not_get_api_version"


class InvalidApiKeyError(EtherpadClientError):
    code = "error_invalid_api_key"
