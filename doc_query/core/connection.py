"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager owns the driver client for one database and hands out
collection handles; it is the store handle injected into repositories.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel

from doc_query.core.enums import StoreBackend
from doc_query.core.exceptions import AdapterError, ConnectionError  # noqa: A004

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for document store connections."""

    driver: str = StoreBackend.MONGODB.value
    url: str = "mongodb://localhost:27017"
    database: str
    app_name: str | None = None
    timeout_ms: int = 30000
    extra: dict[str, Any] = {}

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> ConnectionConfig:
        """Build a config whose database name is the last path segment of `url`.

        Raises:
            ConnectionError: If the URL carries no database name.
        """
        database = urlsplit(url).path.strip("/").split("/")[-1]
        if not database:
            raise ConnectionError(f"No database name in connection URL: {url}")
        return cls(url=url, database=database, **kwargs)


# Adapter module mapping: driver name -> (module_path, adapter_class)
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    StoreBackend.MONGODB.value: ("doc_query.adapters.mongodb", "MongoAdapter"),
}


def _load_adapter(driver: str) -> Any:
    """Load an adapter by driver name."""
    driver_lower = driver.lower()
    if driver_lower not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported store driver: {driver}")

    module_path, cls_name = _ADAPTER_MAP[driver_lower]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Synchronous store handle built on a StoreAdapter.

    The driver client is created on first use and shared by every
    collection handle this manager returns.
    """

    def __init__(self, config: ConnectionConfig, adapter: Any | None = None) -> None:
        self.config = config
        self._adapter = adapter if adapter is not None else _load_adapter(config.driver)
        self._client: Any = None
        self._database: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def database(self) -> Any:
        """The driver's database object, connecting on first access."""
        if self._database is None:
            self.connect()
        return self._database

    def connect(self) -> Any:
        """Create the driver client if it does not exist yet."""
        if self._client is None:
            logger.debug("Connecting to %s database '%s'", self.config.driver, self.config.database)
            self._client = self._adapter.create_client(self.config)
            self._database = self._adapter.get_database(self._client, self.config)
        return self._client

    def collection(self, name: str) -> Any:
        """Return a CollectionHandle for `name`."""
        return self._adapter.get_collection(self.database, name)

    def command(self, options: dict[str, Any]) -> dict[str, Any]:
        """Run a database command."""
        return self._adapter.command(self.database, options)

    def close(self) -> None:
        """Close the driver client."""
        if self._client is not None:
            self._adapter.close_client(self._client)
            self._client = None
            self._database = None

    def __enter__(self) -> ConnectionManager:
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
