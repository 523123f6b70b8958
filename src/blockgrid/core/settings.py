"""Runtime configuration and logging for BlockGrid (Pydantic Settings v2).

Sources, highest precedence first:
- real environment variables;
- `.env` files in the working directory (.env, .env.local, .env.<env>).

Variables
---------
BLOCKGRID_ENV
    ``dev`` | ``test`` | ``prod``.
LOG_LEVEL
    Level applied to the ``blockgrid`` logger tree.
BLOCKGRID_ALLOW_IMPLICIT_CREATE
    Admit unknown, non-placeholder block ids as new blocks on update.
BLOCKGRID_CORS_ORIGINS
    JSON list of origins the API accepts (``["*"]`` by default).
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ROOT_LOGGER = "blockgrid"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class Settings(BaseSettings):
    """Typed BlockGrid configuration.

    Attributes
    ----------
    environment : EnvName
        Deployment flavour; `BLOCKGRID_ENV`.
    log_level : LogLevelName
        `LOG_LEVEL`.
    allow_implicit_create : bool
        When ``False``, an update that references a block id the task does not
        own fails with ``NotFoundError`` instead of creating the block.
    cors_origins : list[str]
        Origins allowed by the API's CORS middleware.
    """

    environment: EnvName = Field(default="dev", alias="BLOCKGRID_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    allow_implicit_create: bool = Field(default=True, alias="BLOCKGRID_ALLOW_IMPLICIT_CREATE")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], alias="BLOCKGRID_CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Numeric `logging` level for `log_level`."""
        return logging.getLevelNamesMapping()[self.log_level]


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Build the `Settings` once per process.

    Call `load_settings.cache_clear()` after changing `os.environ` (tests do).
    """
    os.environ.setdefault("BLOCKGRID_ENV", "dev")
    return Settings()


settings: Settings = load_settings()


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger inside the ``blockgrid`` tree.

    The single stream handler lives on the ``blockgrid`` root; module loggers
    (``blockgrid.layout.normalizer`` ...) propagate to it. Every call re-applies
    the current `LOG_LEVEL`, so a cleared settings cache takes effect on the
    next lookup.
    """
    root = _root_logger()
    root.setLevel(load_settings().log_level_numeric())
    if name == ROOT_LOGGER:
        return root
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


__all__ = ["EnvName", "Settings", "get_logger", "load_settings", "settings"]
