"""Closed value sets used by the Coolify API.

These live in the domain layer so that entity models, input models and the
CLI share one source of truth. Matching is exact and case-sensitive:
pydantic rejects any value outside the declared members.
"""

from __future__ import annotations

from enum import Enum


class DatabaseType(str, Enum):
    """Database engines Coolify can provision."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MARIADB = "mariadb"
    MONGODB = "mongodb"
    REDIS = "redis"
    CLICKHOUSE = "clickhouse"
    DRAGONFLY = "dragonfly"
    KEYDB = "keydb"

    @classmethod
    def values(cls) -> list[str]:
        """Wire values in declaration order (used for help text)."""

        return [member.value for member in cls]


class DeploymentStatus(str, Enum):
    WAITING = "waiting"
    RUNNING = "running"
    FAILED = "failed"
    DONE = "done"
    CANCELLED = "cancelled"

    def is_terminal(self) -> bool:
        """True once the deployment will not change state anymore."""

        return self in (DeploymentStatus.FAILED, DeploymentStatus.DONE, DeploymentStatus.CANCELLED)


class BuildPack(str, Enum):
    """How Coolify builds an application image."""

    NIXPACKS = "nixpacks"
    DOCKERFILE = "dockerfile"
    DOCKERIMAGE = "dockerimage"
    STATIC = "static"


class ResourceType(str, Enum):
    """Deployable resource kinds accepted by the generic `/deploy` endpoint."""

    APPLICATION = "application"
    DATABASE = "database"
    SERVICE = "service"
