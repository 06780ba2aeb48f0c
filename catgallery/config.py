"""Gallery configuration, read from the environment (and an optional .env file)."""

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _resolve_db_url(data_dir: str) -> str:
    os.makedirs(data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(data_dir, 'catgallery.db')}"


def _ensure_sqlite_parent(url: str) -> str:
    # Ensure parent dir exists for sqlite paths
    if url.startswith("sqlite:///"):
        db_path = url[len("sqlite:///"):]
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
    return url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    api_base_url: str = Field(
        "https://api.thecatapi.com/",
        validation_alias=AliasChoices("api_base_url", "CAT_API_BASE_URL"),
    )
    image_size: str = Field("full", validation_alias=AliasChoices("image_size", "CAT_API_IMAGE_SIZE"))
    http_timeout: float = 20.0
    connectivity_timeout: float = 1.5
    offline: bool = Field(False, validation_alias=AliasChoices("offline", "CATGALLERY_OFFLINE"))
    data_dir: str = "data"
    # None falls back to a sqlite file under data_dir, resolved at startup so
    # that importing the app never touches the filesystem
    database_url: str | None = Field(
        None,
        validation_alias=AliasChoices("database_url", "SQLALCHEMY_DATABASE_URL", "DB_URL"),
    )
    log_level: str = "INFO"

    @property
    def renders_dir(self) -> str:
        return os.path.join(self.data_dir, "renders")

    def resolved_database_url(self) -> str:
        if self.database_url:
            return _ensure_sqlite_parent(self.database_url)
        return _resolve_db_url(self.data_dir)
