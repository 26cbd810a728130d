"""Environment-driven settings using Pydantic Settings."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from doc_query.core.connection import ConnectionConfig
from doc_query.core.exceptions import ConnectionError  # noqa: A004
from doc_query.core.functions import FunctionRegistry

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """DocQuery settings loaded from environment variables.

    `MONGOHQ_URL` is honoured for compatibility with existing deployments;
    `DOC_QUERY_URL` takes the same role.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOC_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DOC_QUERY_URL", "MONGOHQ_URL"),
        description="Store connection URL, database name as the last path segment",
    )
    database: str | None = Field(
        default=None,
        description="Database name, overrides the one in the URL",
    )
    functions_dir: Path = Field(
        default=Path("mongo_functions"),
        description="Directory holding server-side JavaScript functions",
    )
    log_level: str = Field(default="WARNING", description="Level for the doc_query logger")

    def connection_config(self) -> ConnectionConfig:
        """Build a ConnectionConfig from these settings.

        Raises:
            ConnectionError: If no URL is configured.
        """
        if not self.url:
            raise ConnectionError("No MONGOHQ_URL specified")
        if self.database:
            return ConnectionConfig(url=self.url, database=self.database)
        return ConnectionConfig.from_url(self.url)

    def function_registry(self) -> FunctionRegistry:
        """FunctionRegistry over `functions_dir`."""
        return FunctionRegistry(self.functions_dir)


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the doc_query logger.

    Call once at application startup to see DocQuery's messages.
    """
    package_logger = logging.getLogger("doc_query")
    if not any(isinstance(h, logging.StreamHandler) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)
    return package_logger
