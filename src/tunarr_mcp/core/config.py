"""Settings for the tool server.

Values are resolved from, highest priority first: keyword arguments,
environment variables, the ``.env`` file, the ``settings:`` section of
``$CONFIG_PATH/config.yml``, then the defaults declared below.

A ``config.yml`` might look like::

    settings:
      tunarr:
        host: http://tunarr.lan:8000
      mcp:
        transport: streamable-http
        bind: 0.0.0.0
        port: 8080
      log_level: DEBUG
"""

import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource

Transport = Literal["stdio", "sse", "streamable-http"]

DEFAULT_CONFIG_DIR = "/config"

# Environment from .env is visible to CONFIG_PATH lookups too
load_dotenv()


def config_file() -> Path:
    """Location of ``config.yml``, driven by ``CONFIG_PATH``."""
    return Path(os.getenv("CONFIG_PATH", DEFAULT_CONFIG_DIR)) / "config.yml"


class YamlSettingsSource(PydanticBaseSettingsSource):
    """
    Settings source backed by the ``settings:`` section of a YAML file.

    Nested sections map onto flat field names joined with ``_``, so
    ``tunarr.host`` in YAML fills ``tunarr_host`` just like the
    ``TUNARR_HOST`` environment variable does.
    """

    def __init__(self, settings_cls: type[BaseSettings], path: Path):
        super().__init__(settings_cls)
        self.path = path
        self.values = self._read(path)

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            document = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            # Logging is not configured yet; stderr keeps stdio transport clean
            print(f"[config] Failed to load YAML config {path}: {e}", file=sys.stderr)
            return {}
        if not isinstance(document, dict):
            print(f"[config] Ignoring {path}: top level is not a mapping", file=sys.stderr)
            return {}

        section = document.get("settings") or {}
        flat: dict[str, Any] = {}
        pending: list[tuple[str, Any]] = [("", section)]
        while pending:
            prefix, node = pending.pop()
            if isinstance(node, dict):
                pending.extend((f"{prefix}_{key}" if prefix else str(key), value) for key, value in node.items())
            elif prefix:
                flat[prefix] = node
        return flat

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        value = self.values.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {name: value for name, value in self.values.items() if name in self.settings_cls.model_fields}


class TunarrSettings(BaseModel):
    """Where the Tunarr API lives."""

    host: str = Field(default="http://localhost:8000")
    timeout: float = Field(default=30.0)


class McpSettings(BaseModel):
    """How the tool server is exposed."""

    transport: Transport = Field(default="stdio")
    bind: Optional[str] = Field(default=None)
    port: Optional[int] = Field(default=None)
    path: Optional[str] = Field(default=None)


class Settings(BaseSettings):
    """Flat settings, one field per environment variable."""

    # Tunarr
    tunarr_host: str = Field(default="http://localhost:8000")
    tunarr_timeout: float = Field(default=30.0, gt=0)

    # Tool server
    mcp_transport: Transport = Field(default="stdio")
    mcp_bind: Optional[str] = Field(default=None)
    mcp_port: Optional[int] = Field(default=None, ge=1, le=65535)
    mcp_path: Optional[str] = Field(default=None)

    # Logging and files
    log_level: str = Field(default="INFO")
    log_path: Optional[Path] = Field(default=None)
    config_path: Path = Field(default=Path(DEFAULT_CONFIG_DIR))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert config.yml between the .env file and secret files."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls, config_file()),
            file_secret_settings,
        )

    @field_validator("tunarr_host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("config_path", "log_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        return Path(v).expanduser() if isinstance(v, str) and v else v

    @property
    def tunarr(self) -> TunarrSettings:
        return TunarrSettings(host=self.tunarr_host, timeout=self.tunarr_timeout)

    @property
    def mcp(self) -> McpSettings:
        return McpSettings(
            transport=self.mcp_transport,
            bind=self.mcp_bind,
            port=self.mcp_port,
            path=self.mcp_path,
        )


def log_settings(settings: Settings) -> None:
    """Log the effective configuration, one section at a time."""
    from loguru import logger

    sections: dict[str, dict[str, Any]] = {
        "Tunarr": {
            "Host": settings.tunarr_host,
            "Timeout": f"{settings.tunarr_timeout}s",
        },
        "Tool server": {"Transport": settings.mcp_transport},
        "Application": {
            "Config file": config_file(),
            "Log path": settings.log_path or "(stderr only)",
            "Log level": settings.log_level,
        },
    }
    if settings.mcp_transport != "stdio":
        sections["Tool server"]["Listen"] = f"{settings.mcp_bind}:{settings.mcp_port}"
        sections["Tool server"]["Path"] = settings.mcp_path or "(default)"

    rule = "-" * 48
    logger.info(rule)
    logger.info("tunarr-mcp configuration")
    for title, values in sections.items():
        logger.info(f"[{title}]")
        width = max(len(key) for key in values)
        for key, value in values.items():
            logger.info(f"  {key.ljust(width)}  {value}")
    logger.info(rule)


@lru_cache
def get_settings() -> Settings:
    """Settings resolved once per process."""
    return Settings()
