"""Command dispatcher: one CLI verb per `CoolifyClient` method.

Commands hold no logic beyond argument plumbing and rendering. Error
handling is centralised in `_execute`, which maps client errors to exit
codes:

- 1: configuration error (missing URL/token)
- 2: input validation error
- 3: remote API error (HTTP, response contract or transport)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.coolify_client import CoolifyClient, create_client
from cli.ui_components import print_entities, print_entity, print_violations
from core.domain.enums import DatabaseType, ResourceType
from core.errors import ApiError, ConfigurationError, SchemaValidationError

T = TypeVar("T")

EXIT_CONFIG = 1
EXIT_VALIDATION = 2
EXIT_API = 3

PROJECT_COLUMNS = ("uuid", "name", "description")
ENVIRONMENT_COLUMNS = ("name", "projectUuid", "isProduction", "createdAt")
SERVER_COLUMNS = ("uuid", "name", "ip", "port", "status")
APPLICATION_COLUMNS = ("uuid", "name", "status", "buildPack", "environmentName")
DATABASE_COLUMNS = ("uuid", "name", "type", "status", "environmentName")
SERVICE_COLUMNS = ("uuid", "name", "type", "status", "environmentName")
DEPLOYMENT_COLUMNS = ("uuid", "status", "commit", "createdAt", "finishedAt")
ENV_VAR_COLUMNS = ("uuid", "key", "value", "isSecret", "isBuildSecret")
BACKUP_COLUMNS = ("uuid", "enabled", "schedule", "retentionDays")
BACKUP_EXECUTION_COLUMNS = ("uuid", "status", "size", "createdAt", "finishedAt")
RESOURCE_COLUMNS = ("uuid", "type", "name", "status")
TEAM_COLUMNS = ("id", "name")
SSH_KEY_COLUMNS = ("uuid", "name", "createdAt")
GITHUB_APP_COLUMNS = ("id", "name", "appId", "installationId")
CLOUD_TOKEN_COLUMNS = ("uuid", "name", "provider", "isValid")

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Coolify CLI - manage Coolify PaaS instances.",
)

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every HTTP request to stderr"),
) -> None:
    configure_logging(verbose)


def _build_client() -> CoolifyClient:
    return create_client()


def _execute(call: Callable[[CoolifyClient], Awaitable[T]]) -> T:
    """Run one client call and translate failures into exit codes."""

    try:
        client = _build_client()
    except ConfigurationError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_CONFIG) from exc

    try:
        return asyncio.run(call(client))
    except SchemaValidationError as exc:
        print_violations(_err_console, exc.violations)
        raise typer.Exit(code=EXIT_VALIDATION) from exc
    except ApiError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(exc.message)}")
        if exc.status_code:
            _err_console.print(f"Status: {exc.status_code}")
        raise typer.Exit(code=EXIT_API) from exc


# System ---------------------------------------------------------------


@app.command("health", help="Check API health.")
def health() -> None:
    print_entity(_console, _execute(lambda client: client.health()))


@app.command("version", help="Get the Coolify version.")
def version() -> None:
    print_entity(_console, _execute(lambda client: client.version()))


@app.command("teams", help="List teams.")
def teams() -> None:
    print_entities(_console, "Teams", TEAM_COLUMNS, _execute(lambda client: client.get_teams()))


@app.command("team", help="Show the current team.")
def team() -> None:
    print_entity(_console, _execute(lambda client: client.get_current_team()))


# Projects & environments ----------------------------------------------


@app.command("projects", help="List all projects.")
def projects() -> None:
    print_entities(_console, "Projects", PROJECT_COLUMNS, _execute(lambda client: client.get_projects()))


app.command("project-list", hidden=True)(projects)


@app.command("project", help="Get project details.")
def project(uuid: str = typer.Argument(..., help="Project UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.get_project(uuid)))


@app.command("project-create", help="Create a project.")
def project_create(
    name: str = typer.Argument(..., help="Project name"),
    description: str | None = typer.Argument(None, help="Optional description"),
) -> None:
    data = {"name": name, "description": description}
    print_entity(_console, _execute(lambda client: client.create_project(data)))


@app.command("project-update", help="Rename a project or change its description.")
def project_update(
    uuid: str = typer.Argument(..., help="Project UUID"),
    name: str | None = typer.Option(None, "--name", help="New name"),
    description: str | None = typer.Option(None, "--description", help="New description"),
) -> None:
    data = {k: v for k, v in {"name": name, "description": description}.items() if v is not None}
    print_entity(_console, _execute(lambda client: client.update_project(uuid, data)))


@app.command("project-delete", help="Delete a project.")
def project_delete(uuid: str = typer.Argument(..., help="Project UUID")) -> None:
    _execute(lambda client: client.delete_project(uuid))
    _console.print(f"Project {escape(uuid)} deleted")


@app.command("environments", help="List the environments of a project.")
def environments(project_uuid: str = typer.Argument(..., help="Project UUID")) -> None:
    rows = _execute(lambda client: client.get_environments(project_uuid))
    print_entities(_console, "Environments", ENVIRONMENT_COLUMNS, rows)


app.command("env-list", hidden=True)(environments)


@app.command("environment-create", help="Create an environment in a project.")
def environment_create(
    project_uuid: str = typer.Argument(..., help="Project UUID"),
    name: str = typer.Argument(..., help="Environment name"),
    production: bool = typer.Option(False, "--production", help="Mark as production"),
) -> None:
    data = {"name": name, "isProduction": production}
    print_entity(_console, _execute(lambda client: client.create_environment(project_uuid, data)))


@app.command("environment-delete", help="Delete an environment from a project.")
def environment_delete(
    project_uuid: str = typer.Argument(..., help="Project UUID"),
    name: str = typer.Argument(..., help="Environment name"),
) -> None:
    _execute(lambda client: client.delete_environment(project_uuid, name))
    _console.print(f"Environment {escape(name)} deleted")


# Servers --------------------------------------------------------------


@app.command("servers", help="List all servers.")
def servers() -> None:
    print_entities(_console, "Servers", SERVER_COLUMNS, _execute(lambda client: client.get_servers()))


app.command("server-list", hidden=True)(servers)


@app.command("server", help="Get server details.")
def server(uuid: str = typer.Argument(..., help="Server UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.get_server(uuid)))


@app.command("server-create", help="Register a server.")
def server_create(
    name: str = typer.Argument(..., help="Server name"),
    ip: str = typer.Argument(..., help="IPv4 or IPv6 address"),
    port: int | None = typer.Option(None, "--port", help="SSH port (1-65535)"),
) -> None:
    data = {"name": name, "ip": ip, "port": port}
    print_entity(_console, _execute(lambda client: client.create_server(data)))


@app.command("server-delete", help="Delete a server.")
def server_delete(uuid: str = typer.Argument(..., help="Server UUID")) -> None:
    _execute(lambda client: client.delete_server(uuid))
    _console.print(f"Server {escape(uuid)} deleted")


@app.command("server-validate", help="Validate the connection to a server.")
def server_validate(uuid: str = typer.Argument(..., help="Server UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.validate_server(uuid)))


# Applications ---------------------------------------------------------


@app.command("apps", help="List all applications.")
def apps() -> None:
    rows = _execute(lambda client: client.get_applications())
    print_entities(_console, "Applications", APPLICATION_COLUMNS, rows)


app.command("applications", hidden=True)(apps)
app.command("app-list", hidden=True)(apps)


@app.command("app", help="Get application details.")
def application(uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.get_application(uuid)))


app.command("application", hidden=True)(application)


@app.command("app-create", help="Create an application.")
def app_create(
    project_uuid: str = typer.Argument(..., help="Project UUID"),
    environment_name: str = typer.Argument(..., help="Environment name"),
    name: str = typer.Argument(..., help="Application name"),
    build_pack: str | None = typer.Argument(None, help="nixpacks | dockerfile | dockerimage | static"),
    repository: str | None = typer.Option(None, "--repository", help="Git repository URL"),
    branch: str | None = typer.Option(None, "--branch", help="Git branch"),
) -> None:
    data = {
        "projectUuid": project_uuid,
        "environmentName": environment_name,
        "name": name,
        "buildPack": build_pack,
        "repository": repository,
        "branch": branch,
    }
    print_entity(_console, _execute(lambda client: client.create_application(data)))


@app.command("app-delete", help="Delete an application.")
def app_delete(uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    _execute(lambda client: client.delete_application(uuid))
    _console.print(f"Application {escape(uuid)} deleted")


@app.command("start", help="Start an application.")
def start(uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.start_application(uuid)))


@app.command("stop", help="Stop an application.")
def stop(uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.stop_application(uuid)))


@app.command("restart", help="Restart an application.")
def restart(uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.restart_application(uuid)))


@app.command("deploy", help="Deploy a resource (type: application | database | service).")
def deploy(
    uuid: str = typer.Argument(..., help="Resource UUID"),
    resource_type: str = typer.Argument(ResourceType.APPLICATION.value, help="application | database | service"),
    force: bool = typer.Option(False, "--force", help="Force a rebuild without cache"),
) -> None:
    data = {"resourceUuid": uuid, "resourceType": resource_type, "forceRebuild": force or None}
    print_entity(_console, _execute(lambda client: client.deploy(data)))


@app.command("logs", help="Get application logs.")
def logs(uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    text = _execute(lambda client: client.get_application_logs(uuid))
    _console.print(escape(text) if text else "No logs available")


@app.command("app-envs", help="List application environment variables.")
def app_envs(app_uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    rows = _execute(lambda client: client.get_application_env_vars(app_uuid))
    print_entities(_console, "Environment variables", ENV_VAR_COLUMNS, rows)


app.command("app-env-list", hidden=True)(app_envs)


@app.command("app-env-set", help="Create an application environment variable.")
def app_env_set(
    app_uuid: str = typer.Argument(..., help="Application UUID"),
    key: str = typer.Argument(..., help="Variable name"),
    value: str = typer.Argument(..., help="Variable value"),
    secret: bool = typer.Option(False, "--secret", help="Hide the value in the dashboard"),
    build_secret: bool = typer.Option(False, "--build-secret", help="Expose at build time only"),
    preview: bool = typer.Option(False, "--preview", help="Apply to preview deployments"),
) -> None:
    data = {
        "key": key,
        "value": value,
        "isSecret": secret or None,
        "isBuildSecret": build_secret or None,
        "isPreview": preview or None,
    }
    print_entity(_console, _execute(lambda client: client.create_application_env_var(app_uuid, data)))


@app.command("app-env-delete", help="Delete an application environment variable.")
def app_env_delete(
    app_uuid: str = typer.Argument(..., help="Application UUID"),
    env_uuid: str = typer.Argument(..., help="Environment variable UUID"),
) -> None:
    _execute(lambda client: client.delete_application_env_var(app_uuid, env_uuid))
    _console.print(f"Environment variable {escape(env_uuid)} deleted")


@app.command("app-deployments", help="List the deployments of an application.")
def app_deployments(app_uuid: str = typer.Argument(..., help="Application UUID")) -> None:
    rows = _execute(lambda client: client.get_application_deployments(app_uuid))
    print_entities(_console, "Deployments", DEPLOYMENT_COLUMNS, rows)


# Databases ------------------------------------------------------------


@app.command("databases", help="List all databases.")
def databases() -> None:
    rows = _execute(lambda client: client.get_databases())
    print_entities(_console, "Databases", DATABASE_COLUMNS, rows)


app.command("database-list", hidden=True)(databases)


@app.command("database", help="Get database details.")
def database(uuid: str = typer.Argument(..., help="Database UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.get_database(uuid)))


@app.command("db-create", help=f"Create a database. Types: {', '.join(DatabaseType.values())}.")
def db_create(
    database_type: str = typer.Argument(..., metavar="TYPE", help="Database engine"),
    server_uuid: str = typer.Argument(..., help="Server UUID"),
    project_uuid: str = typer.Argument(..., help="Project UUID"),
    environment_name: str = typer.Argument(..., help="Environment name"),
    name: str = typer.Argument(..., help="Database name"),
) -> None:
    data = {
        "serverUuid": server_uuid,
        "projectUuid": project_uuid,
        "environmentName": environment_name,
        "name": name,
    }
    print_entity(_console, _execute(lambda client: client.create_database(database_type, data)))


@app.command("db-delete", help="Delete a database.")
def db_delete(uuid: str = typer.Argument(..., help="Database UUID")) -> None:
    _execute(lambda client: client.delete_database(uuid))
    _console.print(f"Database {escape(uuid)} deleted")


@app.command("db-start", help="Start a database.")
def db_start(uuid: str = typer.Argument(..., help="Database UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.start_database(uuid)))


@app.command("db-stop", help="Stop a database.")
def db_stop(uuid: str = typer.Argument(..., help="Database UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.stop_database(uuid)))


@app.command("db-restart", help="Restart a database.")
def db_restart(uuid: str = typer.Argument(..., help="Database UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.restart_database(uuid)))


@app.command("db-backups", help="List the backup schedules of a database.")
def db_backups(uuid: str = typer.Argument(..., help="Database UUID")) -> None:
    rows = _execute(lambda client: client.get_database_backups(uuid))
    print_entities(_console, "Backups", BACKUP_COLUMNS, rows)


@app.command("db-backup-executions", help="List the runs of a backup schedule.")
def db_backup_executions(
    uuid: str = typer.Argument(..., help="Database UUID"),
    backup_uuid: str = typer.Argument(..., help="Backup UUID"),
) -> None:
    rows = _execute(lambda client: client.get_backup_executions(uuid, backup_uuid))
    print_entities(_console, "Backup executions", BACKUP_EXECUTION_COLUMNS, rows)


# Services -------------------------------------------------------------


@app.command("services", help="List all services.")
def services() -> None:
    rows = _execute(lambda client: client.get_services())
    print_entities(_console, "Services", SERVICE_COLUMNS, rows)


app.command("service-list", hidden=True)(services)


@app.command("service", help="Get service details.")
def service(uuid: str = typer.Argument(..., help="Service UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.get_service(uuid)))


@app.command("service-create", help="Create a service from a template.")
def service_create(
    project_uuid: str = typer.Argument(..., help="Project UUID"),
    environment_name: str = typer.Argument(..., help="Environment name"),
    name: str = typer.Argument(..., help="Service name"),
    service_type: str = typer.Argument(..., metavar="TYPE", help="Service template, e.g. plausible"),
) -> None:
    data = {
        "projectUuid": project_uuid,
        "environmentName": environment_name,
        "name": name,
        "type": service_type,
    }
    print_entity(_console, _execute(lambda client: client.create_service(data)))


@app.command("service-delete", help="Delete a service.")
def service_delete(uuid: str = typer.Argument(..., help="Service UUID")) -> None:
    _execute(lambda client: client.delete_service(uuid))
    _console.print(f"Service {escape(uuid)} deleted")


@app.command("service-start", help="Start a service.")
def service_start(uuid: str = typer.Argument(..., help="Service UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.start_service(uuid)))


@app.command("service-stop", help="Stop a service.")
def service_stop(uuid: str = typer.Argument(..., help="Service UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.stop_service(uuid)))


@app.command("service-restart", help="Restart a service.")
def service_restart(uuid: str = typer.Argument(..., help="Service UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.restart_service(uuid)))


@app.command("service-envs", help="List service environment variables.")
def service_envs(uuid: str = typer.Argument(..., help="Service UUID")) -> None:
    rows = _execute(lambda client: client.get_service_env_vars(uuid))
    print_entities(_console, "Environment variables", ENV_VAR_COLUMNS, rows)


# Deployments & resources ----------------------------------------------


@app.command("deployments", help="List all deployments.")
def deployments() -> None:
    rows = _execute(lambda client: client.get_deployments())
    print_entities(_console, "Deployments", DEPLOYMENT_COLUMNS, rows)


app.command("deployment-list", hidden=True)(deployments)


@app.command("deployment", help="Get deployment details.")
def deployment(uuid: str = typer.Argument(..., help="Deployment UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.get_deployment(uuid)))


@app.command("deployment-cancel", help="Cancel a deployment.")
def deployment_cancel(uuid: str = typer.Argument(..., help="Deployment UUID")) -> None:
    print_entity(_console, _execute(lambda client: client.cancel_deployment(uuid)))


@app.command("resources", help="List all resources (applications, databases, services).")
def resources() -> None:
    rows = _execute(lambda client: client.get_resources())
    print_entities(_console, "Resources", RESOURCE_COLUMNS, rows)


# Security & integrations ----------------------------------------------


@app.command("ssh-keys", help="List SSH keys.")
def ssh_keys() -> None:
    rows = _execute(lambda client: client.get_ssh_keys())
    print_entities(_console, "SSH keys", SSH_KEY_COLUMNS, rows)


@app.command("github-apps", help="List GitHub apps.")
def github_apps() -> None:
    rows = _execute(lambda client: client.get_github_apps())
    print_entities(_console, "GitHub apps", GITHUB_APP_COLUMNS, rows)


@app.command("cloud-tokens", help="List cloud provider tokens.")
def cloud_tokens() -> None:
    rows = _execute(lambda client: client.get_cloud_tokens())
    print_entities(_console, "Cloud tokens", CLOUD_TOKEN_COLUMNS, rows)
