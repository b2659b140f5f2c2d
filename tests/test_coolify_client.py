from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.coolify_client import CoolifyClient, create_client
from conftest import (
    application_payload,
    database_payload,
    deployment_payload,
    project_payload,
    respond,
    server_payload,
    service_payload,
)
from core.config import AppSettings
from core.domain.enums import DatabaseType, ResourceType
from core.domain.inputs import CreateProjectInput
from core.domain.models import Deployment, Project
from core.errors import ApiError, ConfigurationError, SchemaValidationError


def test_get_projects_returns_envelope_items_in_order(make_client):
    first, second = project_payload(uuid="p-1", name="alpha"), project_payload(uuid="p-2", name="beta")
    client, transport = make_client(respond(200, {"data": [first, second]}))

    projects = asyncio.run(client.get_projects())

    assert [p.uuid for p in projects] == ["p-1", "p-2"]
    assert all(isinstance(p, Project) for p in projects)
    assert transport.last.url.path == "/api/v1/projects"


def test_get_project_not_found_raises_api_error(make_client):
    client, _ = make_client(respond(404, {"message": "not found"}))

    with pytest.raises(ApiError) as exc:
        asyncio.run(client.get_project("missing"))

    assert exc.value.status_code == 404
    assert exc.value.message == "not found"


def test_delete_project_handles_no_content(make_client):
    client, transport = make_client(lambda request: httpx.Response(204))

    assert asyncio.run(client.delete_project("p-1")) is None
    assert transport.last.method == "DELETE"
    assert transport.last.url.path == "/api/v1/projects/p-1"


def test_create_application_with_invalid_build_pack_never_hits_the_network(make_client):
    client, transport = make_client(respond(201, application_payload()))

    with pytest.raises(SchemaValidationError) as exc:
        asyncio.run(
            client.create_application(
                {"projectUuid": "p-1", "environmentName": "production", "name": "web", "buildPack": "invalid-value"}
            )
        )

    assert [v.path for v in exc.value.violations] == ["buildPack"]
    assert len(transport.requests) == 0


def test_create_project_posts_validated_payload(make_client):
    client, transport = make_client(respond(201, project_payload(name="gamma")))

    project = asyncio.run(client.create_project(CreateProjectInput(name="gamma")))

    assert project.name == "gamma"
    assert transport.last.method == "POST"
    assert transport.last_json() == {"name": "gamma"}


def test_update_project_sends_only_fields_that_were_set(make_client):
    client, transport = make_client(respond(200, project_payload(description=None)))

    asyncio.run(client.update_project("p-1", {"description": None}))

    assert transport.last.method == "PATCH"
    assert transport.last.url.path == "/api/v1/projects/p-1"
    assert transport.last_json() == {"description": None}


def test_create_server_rejects_bad_port_before_sending(make_client):
    client, transport = make_client(respond(201, server_payload()))

    with pytest.raises(SchemaValidationError):
        asyncio.run(client.create_server({"name": "edge", "ip": "10.0.0.5", "port": 0}))

    assert transport.requests == []


def test_create_server_serialises_ip_as_string(make_client):
    client, transport = make_client(respond(201, server_payload()))

    asyncio.run(client.create_server({"name": "edge", "ip": "10.0.0.5", "port": 22}))

    assert transport.last_json() == {"name": "edge", "ip": "10.0.0.5", "port": 22}


def test_create_database_puts_type_in_path(make_client):
    client, transport = make_client(respond(201, database_payload(type="redis")))

    database = asyncio.run(
        client.create_database(
            "redis",
            {"serverUuid": "s-1", "projectUuid": "p-1", "environmentName": "production", "name": "cache"},
        )
    )

    assert database.type is DatabaseType.REDIS
    assert transport.last.url.path == "/api/v1/databases/redis"
    assert "type" not in transport.last_json()


def test_create_database_rejects_unknown_type_before_sending(make_client):
    client, transport = make_client(respond(201, database_payload()))

    with pytest.raises(SchemaValidationError):
        asyncio.run(
            client.create_database(
                "Postgresql",
                {"serverUuid": "s-1", "projectUuid": "p-1", "environmentName": "production", "name": "db"},
            )
        )

    assert transport.requests == []


def test_deploy_posts_to_generic_endpoint(make_client):
    client, transport = make_client(respond(200, deployment_payload(applicationUuid=None, databaseUuid="d-1")))

    deployment = asyncio.run(
        client.deploy({"resourceUuid": "d-1", "resourceType": ResourceType.DATABASE, "forceRebuild": True})
    )

    assert isinstance(deployment, Deployment)
    assert deployment.resource_uuid == "d-1"
    assert transport.last.url.path == "/api/v1/deploy"
    assert transport.last_json() == {"resourceUuid": "d-1", "resourceType": "database", "forceRebuild": True}


def test_deploy_rejects_unknown_resource_type(make_client):
    client, transport = make_client(respond(200, deployment_payload()))

    with pytest.raises(SchemaValidationError):
        asyncio.run(client.deploy({"resourceUuid": "x", "resourceType": "cluster"}))

    assert transport.requests == []


@pytest.mark.parametrize("action", ["start", "stop", "restart"])
def test_application_actions_return_deployments(make_client, action):
    client, transport = make_client(respond(200, deployment_payload(status="running")))

    deployment = asyncio.run(getattr(client, f"{action}_application")("a-1"))

    assert deployment.status.value == "running"
    assert transport.last.method == "POST"
    assert transport.last.url.path == f"/api/v1/applications/a-1/{action}"
    assert transport.last.content == b""


def test_service_actions_return_the_service(make_client):
    client, transport = make_client(respond(200, service_payload(status="stopped")))

    service = asyncio.run(client.stop_service("sv-1"))

    assert service.status == "stopped"
    assert transport.last.url.path == "/api/v1/services/sv-1/stop"


def test_cancel_deployment(make_client):
    client, transport = make_client(respond(200, deployment_payload(status="cancelled")))

    deployment = asyncio.run(client.cancel_deployment("dep-1"))

    assert deployment.status.value == "cancelled"
    assert transport.last.url.path == "/api/v1/deployments/dep-1/cancel"


def test_environment_name_is_quoted_in_nested_path(make_client):
    client, transport = make_client(lambda request: httpx.Response(204))

    asyncio.run(client.delete_environment("p-1", "staging env"))

    assert transport.last.url.raw_path == b"/api/v1/projects/p-1/environments/staging%20env"


def test_application_logs_are_unwrapped(make_client):
    client, transport = make_client(respond(200, {"data": {"logs": "line 1\nline 2"}}))

    logs = asyncio.run(client.get_application_logs("a-1"))

    assert logs == "line 1\nline 2"
    assert transport.last.url.path == "/api/v1/applications/a-1/logs"


def test_backup_executions_use_nested_path(make_client):
    execution = {"uuid": "e-1", "backupId": "b-1", "status": "success", "size": 1024, "createdAt": "now"}
    client, transport = make_client(respond(200, {"data": [execution]}))

    executions = asyncio.run(client.get_backup_executions("d-1", "b-1"))

    assert executions[0].size == 1024
    assert transport.last.url.path == "/api/v1/databases/d-1/backups/b-1/executions"


def test_env_var_update_is_partial(make_client):
    env_var = {"uuid": "e-1", "key": "DEBUG", "value": "0", "resourceUuid": "a-1"}
    client, transport = make_client(respond(200, env_var))

    asyncio.run(client.update_application_env_var("a-1", "e-1", {"value": "0"}))

    assert transport.last.url.path == "/api/v1/applications/a-1/envs/e-1"
    assert transport.last_json() == {"value": "0"}


def test_list_response_contract_break_is_an_api_error(make_client):
    client, _ = make_client(respond(200, {"data": [database_payload(type="oracle")]}))

    with pytest.raises(ApiError) as exc:
        asyncio.run(client.get_databases())

    assert exc.value.status_code is None
    assert [v.path for v in exc.value.violations] == ["data.0.type"]


def test_trailing_slash_is_stripped_once():
    client = CoolifyClient("https://coolify.test/", "tok")

    assert client.base_url == "https://coolify.test"


@pytest.mark.parametrize("base_url, token", [("", "tok"), ("https://coolify.test", ""), ("/", "tok")])
def test_missing_configuration_fails_at_construction(base_url, token):
    with pytest.raises(ConfigurationError):
        CoolifyClient(base_url, token)


def test_create_client_reads_settings():
    settings = AppSettings(_env_file=None, url="https://from-settings.test", token="abc")

    client = create_client(settings=settings)

    assert client.base_url == "https://from-settings.test"


def test_create_client_reads_process_environment(monkeypatch):
    monkeypatch.setenv("COOLIFY_URL", "https://env.test/")
    monkeypatch.setenv("COOLIFY_TOKEN", "env-token")

    client = create_client(settings=AppSettings(_env_file=None))

    assert client.base_url == "https://env.test"


def test_create_client_without_url_or_token_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("COOLIFY_URL", raising=False)
    monkeypatch.delenv("COOLIFY_TOKEN", raising=False)

    with pytest.raises(ConfigurationError):
        create_client(settings=AppSettings(_env_file=None))


def test_resources_list_path(make_client):
    resource = {"uuid": "a-1", "type": "application", "name": "web", "status": "running"}
    client, transport = make_client(respond(200, {"data": [resource]}))

    resources = asyncio.run(client.get_resources())

    assert resources[0].name == "web"
    assert transport.last.url.path == "/api/v1/resources"


def test_ssh_key_create_and_delete(make_client):
    key = {"uuid": "k-1", "name": "deploy", "publicKey": "ssh-ed25519 AAA", "teamId": "t-1", "createdAt": "now"}
    client, transport = make_client(respond(201, key))

    created = asyncio.run(
        client.create_ssh_key({"name": "deploy", "privateKey": "-----BEGIN-----", "publicKey": "ssh-ed25519 AAA"})
    )

    assert created.uuid == "k-1"
    assert transport.last.url.path == "/api/v1/security/keys"
    assert transport.last_json()["privateKey"] == "-----BEGIN-----"


def test_ssh_key_requires_private_key(make_client):
    client, transport = make_client(respond(201, {}))

    with pytest.raises(SchemaValidationError) as exc:
        asyncio.run(client.create_ssh_key({"name": "deploy", "publicKey": "ssh-ed25519 AAA"}))

    assert [v.path for v in exc.value.violations] == ["privateKey"]
    assert transport.requests == []


def test_teams_and_current_team(make_client):
    team = {"id": "t-1", "name": "root", "members": [{"id": "u-1", "email": "ops@acme.test", "role": "owner"}]}
    client, transport = make_client(respond(200, {"data": [team]}))

    teams = asyncio.run(client.get_teams())

    assert teams[0].members[0].role == "owner"
    assert transport.last.url.path == "/api/v1/teams"

    client, transport = make_client(respond(200, {"id": "t-1", "name": "root"}))

    current = asyncio.run(client.get_current_team())

    assert current.name == "root"
    assert current.members is None
    assert transport.last.url.path == "/api/v1/teams/current"


def test_update_server_patches_only_given_fields(make_client):
    client, transport = make_client(respond(200, server_payload(port=2222)))

    server = asyncio.run(client.update_server("s-1", {"port": 2222}))

    assert server.port == 2222
    assert transport.last.method == "PATCH"
    assert transport.last.url.path == "/api/v1/servers/s-1"
    assert transport.last_json() == {"port": 2222}


def test_service_env_vars_list_and_create(make_client):
    env_var = {"uuid": "e-1", "key": "SECRET_KEY", "value": "s3cr3t", "isSecret": True, "resourceUuid": "sv-1"}
    client, transport = make_client(respond(200, {"data": [env_var]}))

    env_vars = asyncio.run(client.get_service_env_vars("sv-1"))

    assert env_vars[0].is_secret is True
    assert transport.last.url.path == "/api/v1/services/sv-1/envs"

    client, transport = make_client(respond(201, env_var))

    asyncio.run(client.create_service_env_var("sv-1", {"key": "SECRET_KEY", "value": "s3cr3t", "isSecret": True}))

    assert transport.last.method == "POST"
    assert transport.last.url.path == "/api/v1/services/sv-1/envs"
    assert transport.last_json() == {"key": "SECRET_KEY", "value": "s3cr3t", "isSecret": True}


def test_create_database_backup(make_client):
    backup = {
        "uuid": "b-1",
        "enabled": True,
        "schedule": "0 3 * * *",
        "retentionDays": 7,
        "databaseUuid": "d-1",
        "databaseName": "main-db",
    }
    client, transport = make_client(respond(201, backup))

    created = asyncio.run(
        client.create_database_backup("d-1", {"enabled": True, "schedule": "0 3 * * *", "retentionDays": 7})
    )

    assert created.retention_days == 7
    assert transport.last.url.path == "/api/v1/databases/d-1/backups"
    assert transport.last_json() == {"enabled": True, "schedule": "0 3 * * *", "retentionDays": 7}


def test_github_apps_path_and_schema(make_client):
    github_app = {
        "id": 1,
        "name": "acme-bot",
        "appId": "123",
        "installationId": "456",
        "teamId": "t-1",
        "createdAt": "now",
    }
    client, transport = make_client(respond(200, {"data": [github_app]}))

    apps = asyncio.run(client.get_github_apps())

    assert apps[0].app_id == "123"
    assert transport.last.url.path == "/api/v1/github-apps"


def test_github_app_numeric_app_id_is_a_contract_break(make_client):
    github_app = {"id": 1, "name": "acme-bot", "appId": 123, "installationId": "456", "teamId": "t-1", "createdAt": "now"}
    client, _ = make_client(respond(200, {"data": [github_app]}))

    with pytest.raises(ApiError) as exc:
        asyncio.run(client.get_github_apps())

    assert [v.path for v in exc.value.violations] == ["data.0.appId"]


def test_cloud_tokens_path_and_schema(make_client):
    token = {"uuid": "ct-1", "name": "hetzner", "provider": "hetzner", "isValid": True, "teamId": "t-1", "createdAt": "now"}
    client, transport = make_client(respond(200, {"data": [token]}))

    tokens = asyncio.run(client.get_cloud_tokens())

    assert tokens[0].is_valid is True
    assert transport.last.url.path == "/api/v1/cloud-tokens"
