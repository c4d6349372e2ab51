"""Per-service wiring of repository, use case and handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ServiceName(str, Enum):
    AUTH = "auth"
    PLAYER = "player"
    ITEM = "item"
    INVENTORY = "inventory"
    PAYMENT = "payment"

    @property
    def database_name(self) -> str:
        """Name of the database this service keeps its data in."""
        return f"{self.value}_db"

    @property
    def has_queue(self) -> bool:
        """Whether the service consumes a message queue."""
        return self in _QUEUED


_QUEUED = frozenset({ServiceName.PLAYER, ServiceName.INVENTORY, ServiceName.PAYMENT})


@dataclass(frozen=True)
class Repository:
    client: Any
    db_name: str

    def database(self):
        """Return the service's database handle."""
        return self.client.get_database(self.db_name)


@dataclass(frozen=True)
class Usecase:
    repository: Repository


@dataclass(frozen=True)
class HttpHandler:
    config: Any
    usecase: Usecase


@dataclass(frozen=True)
class QueueHandler:
    config: Any
    usecase: Usecase


@dataclass(frozen=True)
class Service:
    name: ServiceName
    repository: Repository
    usecase: Usecase
    http_handler: HttpHandler
    queue_handler: Optional[QueueHandler] = None


@dataclass(frozen=True)
class MiddlewareRepository:
    pass


@dataclass(frozen=True)
class MiddlewareUsecase:
    repository: MiddlewareRepository


@dataclass(frozen=True)
class MiddlewareHandler:
    config: Any
    usecase: MiddlewareUsecase


def build_service(name, config, client) -> Service:
    """Wire up the named service; an unknown name raises ValueError."""
    service = ServiceName(name)
    repository = Repository(client=client, db_name=service.database_name)
    usecase = Usecase(repository)
    queue = QueueHandler(config, usecase) if service.has_queue else None
    return Service(
        name=service,
        repository=repository,
        usecase=usecase,
        http_handler=HttpHandler(config, usecase),
        queue_handler=queue,
    )


def build_middleware(config) -> MiddlewareHandler:
    """Wire up the shared middleware handler."""
    return MiddlewareHandler(config, MiddlewareUsecase(MiddlewareRepository()))