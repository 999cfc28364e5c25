import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from sbb_legs import MalformedResponseError, TransitRequestError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://transport.opendata.ch/v1"
DEFAULT_PAGE = 0


class ConfigError(ValueError):
    """An environment variable holds an unusable value"""


@dataclass(frozen=True)
class ProviderConfig:
    base_url: str = DEFAULT_BASE_URL
    page: int = DEFAULT_PAGE
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ProviderConfig":
        """Read TRANSIT_API_URL and TRANSIT_API_TIMEOUT, falling back to defaults"""
        environ = os.environ if environ is None else environ

        base_url = environ.get("TRANSIT_API_URL") or DEFAULT_BASE_URL

        timeout = None
        raw_timeout = environ.get("TRANSIT_API_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(f"TRANSIT_API_TIMEOUT must be a number of seconds, got {raw_timeout!r}")
            if timeout <= 0:
                raise ConfigError(f"TRANSIT_API_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(base_url=base_url.rstrip("/"), timeout=timeout)


class TransitProvider(ABC):
    @abstractmethod
    def get_connections(self, origin: str, destination: str, limit: int = 1) -> Dict[str, Any]:
        """Return the raw connections document for a route"""
        pass

    def close(self) -> None:
        """Release network resources held by the provider"""
        pass


class SwissConnectionsProvider(TransitProvider):
    """Provider for the transport.opendata.ch /connections API"""

    def __init__(self, config: Optional[ProviderConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ProviderConfig()
        # Only a session created here is ours to close
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def get_connections(self, origin: str, destination: str, limit: int = 1) -> Dict[str, Any]:
        url = f"{self.config.base_url}/connections"
        params = {
            'from': origin,
            'to': destination,
            'page': self.config.page,
            'limit': limit
        }

        try:
            logger.info(f"Fetching connections: {origin} -> {destination} (limit={limit})")
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch connections from {url}: {e}")
            raise TransitRequestError(f"Could not fetch connections {origin} -> {destination}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Response was not JSON. Status: {response.status_code}. Text preview: {response.text[:200]}")
            raise MalformedResponseError(f"Transit API returned a non-JSON body: {e}") from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Payload: {json.dumps(data, indent=2, ensure_ascii=False)}")

        return data
