"""Wire entities of the Coolify API (Pydantic v2).

Why Pydantic here:
- One declarative schema per entity is validated at the response boundary,
  so a contract break fails in one place instead of as a scattered
  `None` dereference.
- The API speaks camelCase; attributes are snake_case. Every model accepts
  either spelling and dumps camelCase with `by_alias=True`.

Notes:
- uuids and timestamps are server-assigned and kept as opaque strings.
- Unknown extra fields are ignored; optional fields default to `None`.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from core.domain.enums import BuildPack, DatabaseType, DeploymentStatus

T = TypeVar("T")


class WireModel(BaseModel):
    """Base for everything decoded from the API."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict:
        """JSON-compatible dict with camelCase keys."""

        return self.model_dump(mode="json", by_alias=True)


class ListEnvelope(WireModel, Generic[T]):
    """`{"data": [...]}` wrapper returned by every list endpoint."""

    data: list[T] = Field(..., description="Items of the collection, in server order.")


class DataEnvelope(WireModel, Generic[T]):
    """`{"data": {...}}` wrapper used by a few single-value endpoints."""

    data: T
    message: StrictStr | None = None


class ApiErrorBody(WireModel):
    """Error envelope sent with non-2xx responses."""

    message: StrictStr = Field(..., description="Human readable error message.")
    code: StrictStr | None = Field(default=None, description="Optional machine readable error code.")

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_str(cls, value: object) -> object:
        # Some endpoints send numeric codes.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class HealthResponse(WireModel):
    status: StrictStr
    version: StrictStr | None = None


class VersionResponse(WireModel):
    version: StrictStr


class TeamMember(WireModel):
    id: StrictStr
    email: StrictStr
    name: StrictStr | None = None
    role: StrictStr


class Team(WireModel):
    id: StrictStr
    name: StrictStr
    members: list[TeamMember] | None = None


class Project(WireModel):
    """A Coolify project: the top-level grouping of environments."""

    uuid: StrictStr = Field(..., description="Server-assigned identifier.")
    name: StrictStr
    description: StrictStr | None = None
    team_id: StrictStr
    created_at: StrictStr
    updated_at: StrictStr


class Environment(WireModel):
    """An environment inside a project, addressed by (project uuid, name)."""

    name: StrictStr
    project_uuid: StrictStr
    is_production: StrictBool | None = None
    created_at: StrictStr


class Server(WireModel):
    """A target host that runs deployments."""

    uuid: StrictStr
    name: StrictStr
    ip: StrictStr
    port: StrictInt | None = None
    status: StrictStr
    is_cloud: StrictBool | None = None
    is_local: StrictBool | None = None
    team_id: StrictStr
    created_at: StrictStr
    updated_at: StrictStr


class ServerValidation(WireModel):
    valid: StrictBool
    message: StrictStr


class Application(WireModel):
    uuid: StrictStr
    name: StrictStr
    repository: StrictStr | None = None
    branch: StrictStr | None = None
    project_uuid: StrictStr
    environment_name: StrictStr
    status: StrictStr
    build_pack: BuildPack | None = Field(
        default=None,
        description="Build strategy; closed set (nixpacks, dockerfile, dockerimage, static).",
    )
    dockerfile: StrictStr | None = None
    docker_image: StrictStr | None = None
    team_id: StrictStr
    created_at: StrictStr
    updated_at: StrictStr


class ApplicationLogs(WireModel):
    logs: StrictStr = ""


class Database(WireModel):
    uuid: StrictStr
    name: StrictStr
    type: DatabaseType
    version: StrictStr | None = None
    project_uuid: StrictStr
    environment_name: StrictStr
    status: StrictStr
    team_id: StrictStr
    created_at: StrictStr
    updated_at: StrictStr


class Service(WireModel):
    uuid: StrictStr
    name: StrictStr
    type: StrictStr
    version: StrictStr | None = None
    project_uuid: StrictStr
    environment_name: StrictStr
    status: StrictStr
    team_id: StrictStr
    created_at: StrictStr
    updated_at: StrictStr


class Deployment(WireModel):
    """Tracked execution of one deploy/start/stop/restart action.

    Exactly one of `application_uuid`, `database_uuid` and `service_uuid`
    identifies the resource the deployment belongs to.
    """

    uuid: StrictStr
    application_uuid: StrictStr | None = None
    database_uuid: StrictStr | None = None
    service_uuid: StrictStr | None = None
    status: DeploymentStatus
    commit: StrictStr | None = None
    branch: StrictStr | None = None
    build_id: StrictInt | None = None
    created_at: StrictStr
    updated_at: StrictStr
    finished_at: StrictStr | None = None

    @model_validator(mode="after")
    def _single_target(self) -> "Deployment":
        targets = [t for t in (self.application_uuid, self.database_uuid, self.service_uuid) if t]
        if len(targets) != 1:
            raise ValueError(
                "exactly one of applicationUuid, databaseUuid, serviceUuid must be set"
            )
        return self

    @property
    def resource_uuid(self) -> str:
        return self.application_uuid or self.database_uuid or self.service_uuid or ""


class EnvironmentVariable(WireModel):
    uuid: StrictStr
    key: StrictStr
    value: StrictStr | None = None
    is_build_secret: StrictBool | None = None
    is_preview: StrictBool | None = None
    is_secret: StrictBool | None = None
    resource_uuid: StrictStr


class BackupConfig(WireModel):
    """Scheduled backup configuration attached to a database."""

    uuid: StrictStr
    enabled: StrictBool
    schedule: StrictStr | None = None
    retention_days: StrictInt | None = None
    database_uuid: StrictStr
    database_name: StrictStr


class BackupExecution(WireModel):
    """One run of a backup schedule."""

    uuid: StrictStr
    backup_id: StrictStr
    status: StrictStr
    size: StrictFloat | None = Field(default=None, description="Backup size in bytes, once finished.")
    created_at: StrictStr
    finished_at: StrictStr | None = None


class SSHKey(WireModel):
    uuid: StrictStr
    name: StrictStr
    public_key: StrictStr
    private_key: StrictStr | None = None
    team_id: StrictStr
    created_at: StrictStr


class GitHubApp(WireModel):
    id: StrictInt
    name: StrictStr
    app_id: StrictStr
    installation_id: StrictStr
    team_id: StrictStr
    created_at: StrictStr


class CloudToken(WireModel):
    uuid: StrictStr
    name: StrictStr
    provider: StrictStr
    is_valid: StrictBool
    team_id: StrictStr
    created_at: StrictStr


class Resource(WireModel):
    """Umbrella view over applications, databases and services."""

    uuid: StrictStr
    type: StrictStr
    name: StrictStr
    status: StrictStr
    project_uuid: StrictStr | None = None
    environment_name: StrictStr | None = None
