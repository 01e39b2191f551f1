from __future__ import annotations

import dataclasses
import logging
import os
import threading
from typing import Any

from .client import EtherpadClient
from .config_types import ClientConfig
from .dummy import DummyClient

logger = logging.getLogger(__name__)

ENV_TESTING = "ETHERPAD_TESTING"


def is_testing(settings: ClientConfig) -> bool:
    """True when no server is configured or a test run is flagged in the environment."""
    if not (settings.base_url or "").strip():
        return True
    return (os.getenv(ENV_TESTING) or "").strip().lower() in {"1", "true", "yes", "on"}


class ClientFactory:
    """Builds the one client an application uses and hands it out afterwards.

    Create a factory at startup and pass it where a client is needed. The first
    :meth:`get_instance` call decides the api key and url; later arguments are
    ignored.
    """

    def __init__(self, settings: ClientConfig, *, testing: bool | None = None, **client_kwargs: Any):
        self._settings = settings
        self._testing = testing
        self._client_kwargs = client_kwargs
        self._client: EtherpadClient | None = None
        self._lock = threading.Lock()

    @property
    def testing(self) -> bool:
        if self._testing is not None:
            return self._testing
        return is_testing(self._settings)

    def get_instance(self, apikey: str | None = None, base_url: str | None = None) -> EtherpadClient:
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is None:
                self._client = self._build(apikey, base_url)
        return self._client

    def _build(self, apikey: str | None, base_url: str | None) -> EtherpadClient:
        cfg = dataclasses.replace(
            self._settings,
            apikey=self._settings.apikey if apikey is None else apikey,
            base_url=base_url or self._settings.base_url,
        )
        if self.testing:
            logger.info("test mode: using the dummy etherpad client")
            return DummyClient(cfg, **self._client_kwargs)
        return EtherpadClient(cfg, **self._client_kwargs)
