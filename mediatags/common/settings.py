# mediatags/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, AliasChoices, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from mediatags.common.strings.splitters import csv_to_list


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


DEFAULT_PALETTE = [
    "#3880ff", "#10dc60", "#ffce00", "#f04141", "#7044ff",
    "#36dcd8", "#5260ff", "#50c878", "#ffc409", "#eb445a",
]


class APIConfig(BaseModel):
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:8100"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "PATCH", "DELETE", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)


class DBConfig(BaseModel):
    driver: str = "sqlite"
    name: str = "mediatags.db"
    echo: bool = False

    # Optional single URL (if set, it takes precedence)
    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "database_url", "url"),
    )

    @computed_field  # type: ignore[misc]
    @property
    def effective_url(self) -> str:
        if self.url:
            return self.url
        return f"{self.driver}:///{self.name}"


class StorageConfig(BaseModel):
    backend: Literal["memory", "sqlalchemy"] = "sqlalchemy"

    # Record keys owned by the engine
    tags_key: str = "tags"
    media_tags_key: str = "media_tags"
    counter_key: str = "tag_counter"


class TagConfig(BaseModel):
    palette: List[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE))
    default_actor: str = "user"
    seed_defaults: bool = False
    most_used_limit: int = Field(10, ge=1, le=500)

    @field_validator("palette", mode="before")
    @classmethod
    def _split_csv(cls, v):
        out = csv_to_list(v)
        if not out:
            raise ValueError("palette needs at least one color")
        return out

    @field_validator("seed_defaults", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "mediatags"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    db: DBConfig = DBConfig()
    storage: StorageConfig = StorageConfig()
    tags: TagConfig = TagConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        return self.db.effective_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from mediatags.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
