"""libdocs settings.

Each value comes from the first source that sets it:
  1. Environment variables, e.g. LIBDOCS__CACHE__TTL_SECONDS=600
  2. libdocs.yaml in the working directory, then in the platform config dir
  3. The defaults below

No config file is required.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("libdocs")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "cache.db")


def _find_config_file() -> str | None:
    """Return the path of the first libdocs.yaml found, or None."""
    candidates = [
        Path("libdocs.yaml"),
        Path(platformdirs.user_config_dir("libdocs")) / "libdocs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 3000
    auth_enabled: bool = False
    auth_key: str = ""


class RegistrySettings(BaseModel):
    url: str = "https://registry.npmjs.org"
    package_page_url: str = "https://www.npmjs.com/package"
    readme_branch: str = "master"


class FetcherSettings(BaseModel):
    # Applies to every outbound request
    timeout_seconds: float = Field(default=5.0, gt=0)
    max_redirects: int = Field(default=3, ge=0)
    user_agent: str = "libdocs/1.0"
    ssrf_private_ip_check: bool = True


class CacheSettings(BaseModel):
    backend: Literal["memory", "sqlite"] = "memory"
    ttl_seconds: int = Field(default=3600, ge=0)
    db_path: str = _DEFAULT_DB_PATH


class DocsSettings(BaseModel):
    default_tokens: int = 5000


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: LIBDOCS__SERVER__PORT=9090
        env_prefix="LIBDOCS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    registry: RegistrySettings = RegistrySettings()
    fetcher: FetcherSettings = FetcherSettings()
    cache: CacheSettings = CacheSettings()
    docs: DocsSettings = DocsSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # no dotenv or secrets-dir source
        )
