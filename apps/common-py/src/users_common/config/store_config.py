"""Configuration management for the document store."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_env_file_path() -> str:
    """Get the path to the .env file.

    Checks for ENV_FILE environment variable first, then defaults to
    .env in the common-py project directory (apps/common-py/.env).

    Returns:
        Path to the .env file
    """
    env_file = os.getenv("ENV_FILE")
    if env_file:
        return env_file

    # This file is in apps/common-py/src/users_common/config/store_config.py
    common_py_dir = Path(__file__).parent.parent.parent.parent
    return str(common_py_dir / ".env")


class StoreConfig(BaseSettings):
    """Document store settings from environment variables."""

    store_backend: Literal["cosmos", "memory"] = "cosmos"

    # Cosmos DB
    azure_cosmosdb_endpoint: str | None = None
    azure_cosmosdb_key: str | None = None
    cosmos_db: str = "userdb"
    cosmos_users_container: str = "users"

    model_config = SettingsConfigDict(
        env_file=_get_env_file_path(),
        case_sensitive=False,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_emulator(self) -> bool:
        """Whether the endpoint points at a local Cosmos DB emulator."""
        return bool(self.azure_cosmosdb_endpoint) and "localhost" in self.azure_cosmosdb_endpoint.lower()


def get_store_config() -> StoreConfig:
    """Get document store configuration.

    Returns:
        StoreConfig instance
    """
    return StoreConfig()
