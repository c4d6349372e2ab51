"""Service configuration loaded from an env file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

_JWT_KEY_VARS = ("JWT_ACCESS_SECRET_KEY", "JWT_REFRESH_SECRET_KEY", "JWT_API_SECRET_KEY")
_KAFKA_VARS = ("KAFKA_URL", "KAFKA_API_KEY", "KAFKA_API_SECRET")


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded."""


@dataclass(frozen=True)
class AppConfig:
    name: str = ""
    url: str = ""
    stage: str = ""


@dataclass(frozen=True)
class DbConfig:
    url: str = ""


@dataclass(frozen=True)
class JwtConfig:
    access_secret_key: str = field(default_factory=str)
    refresh_secret_key: str = field(default_factory=str)
    api_secret_key: str = field(default_factory=str)
    access_duration: int = 0
    refresh_duration: int = 0
    api_duration: int = 0


@dataclass(frozen=True)
class KafkaConfig:
    url: str = ""
    api_key: str = field(default_factory=str)
    secret: str = field(default_factory=str)


@dataclass(frozen=True)
class GrpcConfig:
    auth_url: str = ""
    player_url: str = ""
    item_url: str = ""
    inventory_url: str = ""
    payment_url: str = ""


@dataclass(frozen=True)
class PaginateConfig:
    item_next_page_base_url: str = ""
    inventory_next_page_base_url: str = ""


@dataclass(frozen=True)
class Config:
    app: AppConfig = field(default_factory=AppConfig)
    db: DbConfig = field(default_factory=DbConfig)
    jwt: JwtConfig = field(default_factory=JwtConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    grpc: GrpcConfig = field(default_factory=GrpcConfig)
    paginate: PaginateConfig = field(default_factory=PaginateConfig)


def _env(name: str) -> str:
    return os.environ.get(name, "")


def _duration(name: str, what: str) -> int:
    text = _env(name)
    if not _INT_PATTERN.fullmatch(text):
        raise ConfigError(f"Error parse {what} duration")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ConfigError(f"Error parse {what} duration")
    return value


def load_config(path) -> Config:
    """Load the env file at ``path`` into the environment and build a Config."""
    env_path = Path(path)
    if not env_path.is_file():
        raise ConfigError("Error loading env files.")
    load_dotenv(env_path, override=False)

    return Config(
        app=AppConfig(
            name=_env("APP_NAME"),
            url=_env("APP_URL"),
            stage=_env("APP_STAGE"),
        ),
        db=DbConfig(url=_env("DB_URL")),
        jwt=JwtConfig(
            *(_env(name) for name in _JWT_KEY_VARS),
            access_duration=_duration("JWT_ACCESS_DURATION", "access"),
            refresh_duration=_duration("JWT_REFRESH_DURATION", "refresh"),
        ),
        kafka=KafkaConfig(*(_env(name) for name in _KAFKA_VARS)),
        grpc=GrpcConfig(
            auth_url=_env("GRPC_AUTH_URL"),
            player_url=_env("GRPC_PLAYER_URL"),
            item_url=_env("GRPC_ITEM_URL"),
            inventory_url=_env("GRPC_INVENTORY_URL"),
            payment_url=_env("GRPC_PAYMENT_URL"),
        ),
        paginate=PaginateConfig(
            item_next_page_base_url=_env("PAGINATE_ITEM_NEXT_PAGE_BASED_URL"),
            inventory_next_page_base_url=_env("PAGINATE_INVENTORY_NEXT_PAGE_BASED_URL"),
        ),
    )