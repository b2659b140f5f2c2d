"""Typed async client for the Coolify REST API.

One method per endpoint. Each method is a thin composition of:
- local validation of create/update inputs (fails before any request),
- URL templating,
- `RequestExecutor.execute` with the response schema,
- unwrapping of `{"data": [...]}` list envelopes.

There is no business logic here and no state beyond the read-only base URL
and token fixed at construction.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from adapters.http_client import RequestExecutor
from core.config import AppSettings
from core.domain.enums import DatabaseType
from core.domain.inputs import (
    CreateApplicationInput,
    CreateBackupInput,
    CreateDatabaseInput,
    CreateDeploymentInput,
    CreateEnvironmentInput,
    CreateEnvironmentVariableInput,
    CreateProjectInput,
    CreatePublicApplicationInput,
    CreateServerInput,
    CreateServiceInput,
    CreateSSHKeyInput,
    UpdateApplicationInput,
    UpdateEnvironmentVariableInput,
    UpdateProjectInput,
    UpdateResourceInput,
    UpdateServerInput,
)
from core.domain.models import (
    Application,
    ApplicationLogs,
    BackupConfig,
    BackupExecution,
    CloudToken,
    Database,
    DataEnvelope,
    Deployment,
    Environment,
    EnvironmentVariable,
    GitHubApp,
    HealthResponse,
    ListEnvelope,
    Project,
    Resource,
    Server,
    ServerValidation,
    Service,
    SSHKey,
    Team,
    VersionResponse,
)
from core.errors import ConfigurationError
from core.validation import validate

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

InputData = Union[BaseModel, Mapping[str, Any]]


def _seg(value: str) -> str:
    """Quote one path segment (uuids are opaque, environment names are free text)."""

    return quote(str(value), safe="")


def _payload(schema: type[BaseModel], data: InputData, *, partial: bool = False) -> dict[str, Any]:
    """Validate `data` against `schema` and dump it for the wire.

    Create payloads drop unset optionals; update payloads keep only the
    fields the caller explicitly set.
    """

    model = validate(schema, data)
    if partial:
        return model.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


class CoolifyClient:
    """Async client bound to one Coolify instance.

    Args:
        base_url: Instance URL; a single trailing slash is stripped.
        token: API token (sent as `Authorization: Bearer <token>`).
        user_agent: Optional User-Agent override.
        timeout_seconds: Optional transport timeout; `None` means no timeout.
        transport: Optional httpx transport (tests inject `httpx.MockTransport`).

    Raises:
        ConfigurationError: when `base_url` or `token` is empty.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        user_agent: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = base_url or ""
        if base_url.endswith("/"):
            base_url = base_url[:-1]
        if not base_url:
            raise ConfigurationError("COOLIFY_URL is required")
        if not token:
            raise ConfigurationError("COOLIFY_TOKEN is required")

        self.base_url = base_url
        self._executor = RequestExecutor(
            base_url,
            token,
            user_agent=user_agent,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"CoolifyClient(base_url={self.base_url!r})"

    async def _list(self, path: str, schema: type[M]) -> list[M]:
        envelope = await self._executor.execute("GET", path, response_schema=ListEnvelope[schema])
        return envelope.data

    async def _get(self, path: str, schema: type[M]) -> M:
        return await self._executor.execute("GET", path, response_schema=schema)

    async def _send(self, method: str, path: str, body: dict[str, Any] | None, schema: type[M]) -> M:
        return await self._executor.execute(method, path, body, schema)

    async def _delete(self, path: str) -> None:
        await self._executor.execute("DELETE", path)

    # System ---------------------------------------------------------------

    async def health(self) -> HealthResponse:
        return await self._get("/health", HealthResponse)

    async def version(self) -> VersionResponse:
        return await self._get("/version", VersionResponse)

    # Teams ----------------------------------------------------------------

    async def get_teams(self) -> list[Team]:
        return await self._list("/teams", Team)

    async def get_current_team(self) -> Team:
        return await self._get("/teams/current", Team)

    # Projects -------------------------------------------------------------

    async def get_projects(self) -> list[Project]:
        return await self._list("/projects", Project)

    async def get_project(self, uuid: str) -> Project:
        return await self._get(f"/projects/{_seg(uuid)}", Project)

    async def create_project(self, data: InputData) -> Project:
        body = _payload(CreateProjectInput, data)
        return await self._send("POST", "/projects", body, Project)

    async def update_project(self, uuid: str, data: InputData) -> Project:
        body = _payload(UpdateProjectInput, data, partial=True)
        return await self._send("PATCH", f"/projects/{_seg(uuid)}", body, Project)

    async def delete_project(self, uuid: str) -> None:
        await self._delete(f"/projects/{_seg(uuid)}")

    # Environments ---------------------------------------------------------

    async def get_environments(self, project_uuid: str) -> list[Environment]:
        return await self._list(f"/projects/{_seg(project_uuid)}/environments", Environment)

    async def create_environment(self, project_uuid: str, data: InputData) -> Environment:
        body = _payload(CreateEnvironmentInput, data)
        return await self._send("POST", f"/projects/{_seg(project_uuid)}/environments", body, Environment)

    async def delete_environment(self, project_uuid: str, name: str) -> None:
        await self._delete(f"/projects/{_seg(project_uuid)}/environments/{_seg(name)}")

    # Servers --------------------------------------------------------------

    async def get_servers(self) -> list[Server]:
        return await self._list("/servers", Server)

    async def get_server(self, uuid: str) -> Server:
        return await self._get(f"/servers/{_seg(uuid)}", Server)

    async def create_server(self, data: InputData) -> Server:
        body = _payload(CreateServerInput, data)
        return await self._send("POST", "/servers", body, Server)

    async def update_server(self, uuid: str, data: InputData) -> Server:
        body = _payload(UpdateServerInput, data, partial=True)
        return await self._send("PATCH", f"/servers/{_seg(uuid)}", body, Server)

    async def delete_server(self, uuid: str) -> None:
        await self._delete(f"/servers/{_seg(uuid)}")

    async def validate_server(self, uuid: str) -> ServerValidation:
        return await self._get(f"/servers/{_seg(uuid)}/validate", ServerValidation)

    # Applications ---------------------------------------------------------

    async def get_applications(self) -> list[Application]:
        return await self._list("/applications", Application)

    async def get_application(self, uuid: str) -> Application:
        return await self._get(f"/applications/{_seg(uuid)}", Application)

    async def create_application(self, data: InputData) -> Application:
        body = _payload(CreateApplicationInput, data)
        return await self._send("POST", "/applications", body, Application)

    async def create_application_from_public_repo(self, data: InputData) -> Application:
        body = _payload(CreatePublicApplicationInput, data)
        return await self._send("POST", "/applications/public", body, Application)

    async def update_application(self, uuid: str, data: InputData) -> Application:
        body = _payload(UpdateApplicationInput, data, partial=True)
        return await self._send("PATCH", f"/applications/{_seg(uuid)}", body, Application)

    async def delete_application(self, uuid: str) -> None:
        await self._delete(f"/applications/{_seg(uuid)}")

    async def start_application(self, uuid: str) -> Deployment:
        return await self._send("POST", f"/applications/{_seg(uuid)}/start", None, Deployment)

    async def stop_application(self, uuid: str) -> Deployment:
        return await self._send("POST", f"/applications/{_seg(uuid)}/stop", None, Deployment)

    async def restart_application(self, uuid: str) -> Deployment:
        return await self._send("POST", f"/applications/{_seg(uuid)}/restart", None, Deployment)

    async def get_application_logs(self, uuid: str) -> str:
        envelope = await self._get(f"/applications/{_seg(uuid)}/logs", DataEnvelope[ApplicationLogs])
        return envelope.data.logs

    async def get_application_env_vars(self, uuid: str) -> list[EnvironmentVariable]:
        return await self._list(f"/applications/{_seg(uuid)}/envs", EnvironmentVariable)

    async def create_application_env_var(self, app_uuid: str, data: InputData) -> EnvironmentVariable:
        body = _payload(CreateEnvironmentVariableInput, data)
        return await self._send("POST", f"/applications/{_seg(app_uuid)}/envs", body, EnvironmentVariable)

    async def update_application_env_var(
        self, app_uuid: str, env_uuid: str, data: InputData
    ) -> EnvironmentVariable:
        body = _payload(UpdateEnvironmentVariableInput, data, partial=True)
        path = f"/applications/{_seg(app_uuid)}/envs/{_seg(env_uuid)}"
        return await self._send("PATCH", path, body, EnvironmentVariable)

    async def delete_application_env_var(self, app_uuid: str, env_uuid: str) -> None:
        await self._delete(f"/applications/{_seg(app_uuid)}/envs/{_seg(env_uuid)}")

    # Databases ------------------------------------------------------------

    async def get_databases(self) -> list[Database]:
        return await self._list("/databases", Database)

    async def get_database(self, uuid: str) -> Database:
        return await self._get(f"/databases/{_seg(uuid)}", Database)

    async def create_database(self, database_type: DatabaseType | str, data: InputData) -> Database:
        """Create a database; the engine goes in the path (`/databases/<type>`)."""

        db_type = validate(DatabaseType, database_type)
        body = _payload(CreateDatabaseInput, data)
        return await self._send("POST", f"/databases/{db_type.value}", body, Database)

    async def update_database(self, uuid: str, data: InputData) -> Database:
        body = _payload(UpdateResourceInput, data, partial=True)
        return await self._send("PATCH", f"/databases/{_seg(uuid)}", body, Database)

    async def delete_database(self, uuid: str) -> None:
        await self._delete(f"/databases/{_seg(uuid)}")

    async def start_database(self, uuid: str) -> Database:
        return await self._send("POST", f"/databases/{_seg(uuid)}/start", None, Database)

    async def stop_database(self, uuid: str) -> Database:
        return await self._send("POST", f"/databases/{_seg(uuid)}/stop", None, Database)

    async def restart_database(self, uuid: str) -> Database:
        return await self._send("POST", f"/databases/{_seg(uuid)}/restart", None, Database)

    async def get_database_backups(self, uuid: str) -> list[BackupConfig]:
        return await self._list(f"/databases/{_seg(uuid)}/backups", BackupConfig)

    async def create_database_backup(self, uuid: str, data: InputData) -> BackupConfig:
        body = _payload(CreateBackupInput, data)
        return await self._send("POST", f"/databases/{_seg(uuid)}/backups", body, BackupConfig)

    async def get_backup_executions(self, database_uuid: str, backup_uuid: str) -> list[BackupExecution]:
        path = f"/databases/{_seg(database_uuid)}/backups/{_seg(backup_uuid)}/executions"
        return await self._list(path, BackupExecution)

    # Services -------------------------------------------------------------

    async def get_services(self) -> list[Service]:
        return await self._list("/services", Service)

    async def get_service(self, uuid: str) -> Service:
        return await self._get(f"/services/{_seg(uuid)}", Service)

    async def create_service(self, data: InputData) -> Service:
        body = _payload(CreateServiceInput, data)
        return await self._send("POST", "/services", body, Service)

    async def update_service(self, uuid: str, data: InputData) -> Service:
        body = _payload(UpdateResourceInput, data, partial=True)
        return await self._send("PATCH", f"/services/{_seg(uuid)}", body, Service)

    async def delete_service(self, uuid: str) -> None:
        await self._delete(f"/services/{_seg(uuid)}")

    async def start_service(self, uuid: str) -> Service:
        return await self._send("POST", f"/services/{_seg(uuid)}/start", None, Service)

    async def stop_service(self, uuid: str) -> Service:
        return await self._send("POST", f"/services/{_seg(uuid)}/stop", None, Service)

    async def restart_service(self, uuid: str) -> Service:
        return await self._send("POST", f"/services/{_seg(uuid)}/restart", None, Service)

    async def get_service_env_vars(self, uuid: str) -> list[EnvironmentVariable]:
        return await self._list(f"/services/{_seg(uuid)}/envs", EnvironmentVariable)

    async def create_service_env_var(self, service_uuid: str, data: InputData) -> EnvironmentVariable:
        body = _payload(CreateEnvironmentVariableInput, data)
        return await self._send("POST", f"/services/{_seg(service_uuid)}/envs", body, EnvironmentVariable)

    # Deployments ----------------------------------------------------------

    async def get_deployments(self) -> list[Deployment]:
        return await self._list("/deployments", Deployment)

    async def get_deployment(self, uuid: str) -> Deployment:
        return await self._get(f"/deployments/{_seg(uuid)}", Deployment)

    async def get_application_deployments(self, application_uuid: str) -> list[Deployment]:
        return await self._list(f"/deployments/applications/{_seg(application_uuid)}", Deployment)

    async def cancel_deployment(self, uuid: str) -> Deployment:
        return await self._send("POST", f"/deployments/{_seg(uuid)}/cancel", None, Deployment)

    async def deploy(self, data: InputData) -> Deployment:
        """Trigger a deployment; the server dispatches on `resourceType`."""

        body = _payload(CreateDeploymentInput, data)
        return await self._send("POST", "/deploy", body, Deployment)

    # Resources, security & integrations -----------------------------------

    async def get_resources(self) -> list[Resource]:
        return await self._list("/resources", Resource)

    async def get_ssh_keys(self) -> list[SSHKey]:
        return await self._list("/security/keys", SSHKey)

    async def create_ssh_key(self, data: InputData) -> SSHKey:
        body = _payload(CreateSSHKeyInput, data)
        return await self._send("POST", "/security/keys", body, SSHKey)

    async def delete_ssh_key(self, uuid: str) -> None:
        await self._delete(f"/security/keys/{_seg(uuid)}")

    async def get_github_apps(self) -> list[GitHubApp]:
        return await self._list("/github-apps", GitHubApp)

    async def get_cloud_tokens(self) -> list[CloudToken]:
        return await self._list("/cloud-tokens", CloudToken)


def create_client(
    base_url: str | None = None,
    token: str | None = None,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CoolifyClient:
    """Build a client from explicit values, falling back to `AppSettings`.

    Raises:
        ConfigurationError: when the URL or the token cannot be resolved.
    """

    if not base_url or not token:
        settings = settings or AppSettings()
    url = base_url or (settings.url if settings else None)
    api_token = token or (settings.token if settings else None)
    if not url or not api_token:
        raise ConfigurationError(
            "COOLIFY_URL and COOLIFY_TOKEN must be set either via parameters or environment variables"
        )

    logger.debug("Using Coolify instance at %s", url)
    return CoolifyClient(
        url,
        api_token,
        user_agent=settings.user_agent if settings else None,
        timeout_seconds=settings.http_timeout_seconds if settings else None,
        transport=transport,
    )
