"""Create/update payloads, validated locally before any request is sent.

Rules:
- Names must be non-empty, server IPs must be valid literals, ports must be
  in 1..65535, enums are closed.
- Unknown keys are rejected so that typos fail fast instead of being
  silently dropped by the server.
- `Update*` models have only optional fields; the client sends just the
  fields that were explicitly set.
"""

from __future__ import annotations

import ipaddress
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, StrictBool, StrictInt, StrictStr
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from core.domain.enums import BuildPack, ResourceType


def _ip_literal(value: str) -> str:
    ipaddress.ip_address(value)
    return value


# Textual IPv4/IPv6 literal; integers and packed bytes are rejected.
IpLiteral = Annotated[StrictStr, AfterValidator(_ip_literal)]


class InputModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class CreateProjectInput(InputModel):
    name: StrictStr = Field(..., min_length=1, description="Project name.")
    description: StrictStr | None = None


class UpdateProjectInput(InputModel):
    name: StrictStr | None = Field(default=None, min_length=1)
    description: StrictStr | None = None


class CreateEnvironmentInput(InputModel):
    name: StrictStr = Field(..., min_length=1, description="Environment name, unique within the project.")
    is_production: StrictBool | None = None


class CreateServerInput(InputModel):
    name: StrictStr = Field(..., min_length=1)
    ip: IpLiteral = Field(..., description="IPv4 or IPv6 literal of the host.")
    port: StrictInt | None = Field(default=None, ge=1, le=65535, description="SSH port.")


class UpdateServerInput(InputModel):
    name: StrictStr | None = Field(default=None, min_length=1)
    ip: IpLiteral | None = None
    port: StrictInt | None = Field(default=None, ge=1, le=65535)


class CreateApplicationInput(InputModel):
    project_uuid: StrictStr
    environment_name: StrictStr
    name: StrictStr = Field(..., min_length=1)
    build_pack: BuildPack | None = None
    repository: StrictStr | None = None
    branch: StrictStr | None = None


class UpdateApplicationInput(InputModel):
    project_uuid: StrictStr | None = None
    environment_name: StrictStr | None = None
    name: StrictStr | None = Field(default=None, min_length=1)
    build_pack: BuildPack | None = None
    repository: StrictStr | None = None
    branch: StrictStr | None = None


class CreatePublicApplicationInput(InputModel):
    """Application built from a public git repository (no GitHub App needed)."""

    project_uuid: StrictStr
    environment_name: StrictStr
    name: StrictStr = Field(..., min_length=1)
    repository: StrictStr = Field(..., min_length=1)
    branch: StrictStr | None = None


class CreateDatabaseInput(InputModel):
    server_uuid: StrictStr
    project_uuid: StrictStr
    environment_name: StrictStr
    name: StrictStr = Field(..., min_length=1)
    description: StrictStr | None = None


class UpdateResourceInput(InputModel):
    """Rename/describe a database or a service."""

    name: StrictStr | None = Field(default=None, min_length=1)
    description: StrictStr | None = None


class CreateServiceInput(InputModel):
    project_uuid: StrictStr
    environment_name: StrictStr
    name: StrictStr = Field(..., min_length=1)
    type: StrictStr = Field(..., min_length=1, description="Service template identifier, e.g. 'plausible'.")


class CreateDeploymentInput(InputModel):
    resource_uuid: StrictStr
    resource_type: ResourceType
    force_rebuild: StrictBool | None = None


class CreateEnvironmentVariableInput(InputModel):
    key: StrictStr = Field(..., min_length=1)
    value: StrictStr
    is_secret: StrictBool | None = None
    is_build_secret: StrictBool | None = None
    is_preview: StrictBool | None = None


class UpdateEnvironmentVariableInput(InputModel):
    key: StrictStr | None = Field(default=None, min_length=1)
    value: StrictStr | None = None
    is_secret: StrictBool | None = None
    is_build_secret: StrictBool | None = None
    is_preview: StrictBool | None = None


class CreateBackupInput(InputModel):
    enabled: StrictBool
    schedule: StrictStr | None = Field(default=None, description="Cron expression.")
    retention_days: StrictInt | None = Field(default=None, ge=0)


class CreateSSHKeyInput(InputModel):
    name: StrictStr = Field(..., min_length=1)
    private_key: StrictStr = Field(..., min_length=1)
    public_key: StrictStr = Field(..., min_length=1)
