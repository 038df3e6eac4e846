"""
Typed model of a CircleCI orb definition.

These nodes are built once by the parser and never mutated afterwards.
Freezing is shallow: attributes cannot be reassigned, but the dict and list
values they hold are plain containers and must be treated as read-only.
Each node can serialize itself back to the YAML shape it was parsed from
via ``to_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _compact(d: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in d.items() if v is not None}


class ParameterType(str, Enum):
    """Parameter types supported by CircleCI."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    ENUM = "enum"
    ENV_VAR_NAME = "env_var_name"
    STEPS = "steps"
    EXECUTOR = "executor"


@dataclass(frozen=True)
class Parameter:
    """Typed input declaration of a command, job or executor."""

    type: ParameterType = ParameterType.STRING
    description: str | None = None

    # Dynamically typed, matches ``type``. None means no default.
    default: Any = None

    # Allowed values, only meaningful for ``ParameterType.ENUM``
    enum: list[str] | None = None

    @property
    def required(self) -> bool:
        """A parameter without a default must be supplied by the caller."""
        return self.default is None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "type": self.type.value,
                "description": self.description,
                "default": self.default,
                "enum": list(self.enum) if self.enum is not None else None,
            }
        )


# --- Steps -----------------------------------------------------------------


class Step:
    """Base class for all steps."""

    def to_dict(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class SimpleStep(Step):
    """Bare step name, e.g. ``checkout`` or a parameterless command."""

    name: str

    def to_dict(self) -> str:
        return self.name


@dataclass(frozen=True)
class RunConfig:
    """Full form of a ``run`` step."""

    command: str
    name: str | None = None
    working_directory: str | None = None
    environment: dict[str, str] = field(default_factory=dict)
    shell: str | None = None
    background: bool | None = None
    no_output_timeout: str | None = None
    when: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "command": self.command,
                "name": self.name,
                "working_directory": self.working_directory,
                "environment": dict(self.environment) or None,
                "shell": self.shell,
                "background": self.background,
                "no_output_timeout": self.no_output_timeout,
                "when": self.when,
            }
        )


@dataclass(frozen=True)
class RunStep(Step):
    """Shell command, either a bare string or a RunConfig."""

    run: str | RunConfig

    @property
    def command(self) -> str:
        return self.run if isinstance(self.run, str) else self.run.command

    def to_dict(self) -> dict[str, Any]:
        return {"run": self.run if isinstance(self.run, str) else self.run.to_dict()}


@dataclass(frozen=True)
class CheckoutStep(Step):
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"checkout": _compact({"path": self.path})}


@dataclass(frozen=True)
class RestoreCacheStep(Step):
    key: str | None = None
    keys: list[str] | None = None
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"restore_cache": _compact({"key": self.key, "keys": self.keys, "name": self.name})}


@dataclass(frozen=True)
class SaveCacheStep(Step):
    key: str
    paths: list[str] = field(default_factory=list)
    name: str | None = None
    when: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"save_cache": _compact({"key": self.key, "paths": list(self.paths), "name": self.name, "when": self.when})}


@dataclass(frozen=True)
class ConditionalStep(Step):
    """Shared shape of ``when`` and ``unless``."""

    condition: Any
    steps: list[Step] = field(default_factory=list)

    keyword = ""

    def to_dict(self) -> dict[str, Any]:
        return {self.keyword: {"condition": self.condition, "steps": [s.to_dict() for s in self.steps]}}


@dataclass(frozen=True)
class WhenStep(ConditionalStep):
    keyword = "when"


@dataclass(frozen=True)
class UnlessStep(ConditionalStep):
    keyword = "unless"


@dataclass(frozen=True)
class PersistToWorkspaceStep(Step):
    root: str
    paths: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"persist_to_workspace": {"root": self.root, "paths": list(self.paths)}}


@dataclass(frozen=True)
class AttachWorkspaceStep(Step):
    at: str

    def to_dict(self) -> dict[str, Any]:
        return {"attach_workspace": {"at": self.at}}


@dataclass(frozen=True)
class StoreTestResultsStep(Step):
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"store_test_results": {"path": self.path}}


@dataclass(frozen=True)
class StoreArtifactsStep(Step):
    path: str
    destination: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"store_artifacts": _compact({"path": self.path, "destination": self.destination})}


@dataclass(frozen=True)
class AddSshKeysStep(Step):
    fingerprints: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"add_ssh_keys": {"fingerprints": list(self.fingerprints)}}


@dataclass(frozen=True)
class SetupRemoteDockerStep(Step):
    version: str | None = None
    docker_layer_caching: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"setup_remote_docker": _compact({"version": self.version, "docker_layer_caching": self.docker_layer_caching})}


@dataclass(frozen=True)
class CommandInvocation(Step):
    """Invocation of a local or imported command, e.g. ``node/install: {...}``.

    Catch-all for any mapping step that is not a recognized structured step.
    """

    entries: dict[str, Any]

    @property
    def name(self) -> str:
        return next(iter(self.entries))

    @property
    def arguments(self) -> dict[str, Any]:
        value = self.entries[self.name]
        return dict(value) if isinstance(value, dict) else {}

    def to_dict(self) -> dict[str, Any]:
        return dict(self.entries)


# --- Execution environment -------------------------------------------------


@dataclass(frozen=True)
class ExecutorName:
    """Executor referenced by name only."""

    name: str

    def to_dict(self) -> str:
        return self.name


@dataclass(frozen=True)
class ExecutorWithParams:
    """Executor reference with parameter overrides."""

    name: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, **self.parameters}


ExecutorRef = ExecutorName | ExecutorWithParams


@dataclass(frozen=True)
class DockerAuth:
    username: str
    password: str

    def to_dict(self) -> dict[str, Any]:
        return {"username": self.username, "password": self.password}


@dataclass(frozen=True)
class AwsAuth:
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    oidc_role_arn: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "aws_access_key_id": self.aws_access_key_id,
                "aws_secret_access_key": self.aws_secret_access_key,
                "oidc_role_arn": self.oidc_role_arn,
            }
        )


@dataclass(frozen=True)
class DockerImageFull:
    """Docker image with auth and container overrides."""

    image: str
    auth: DockerAuth | None = None
    aws_auth: AwsAuth | None = None
    name: str | None = None
    entrypoint: list[str] | None = None
    command: list[str] | None = None
    user: str | None = None
    environment: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "image": self.image,
                "auth": self.auth.to_dict() if self.auth else None,
                "aws_auth": self.aws_auth.to_dict() if self.aws_auth else None,
                "name": self.name,
                "entrypoint": self.entrypoint,
                "command": self.command,
                "user": self.user,
                "environment": dict(self.environment) or None,
            }
        )


DockerImage = str | DockerImageFull


def image_name(image: DockerImage) -> str:
    """Image reference of either docker image shape."""
    return image if isinstance(image, str) else image.image


@dataclass(frozen=True)
class MachineImage:
    image: str
    docker_layer_caching: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"image": self.image, "docker_layer_caching": self.docker_layer_caching})


MachineConfig = bool | MachineImage


@dataclass(frozen=True)
class MacOsConfig:
    xcode: str

    def to_dict(self) -> dict[str, Any]:
        return {"xcode": self.xcode}


@dataclass(frozen=True)
class ExecutorConfig:
    """Execution environment shared by jobs and executors.

    Flattened into the job or executor mapping in YAML.
    """

    docker: list[DockerImage] | None = None
    machine: MachineConfig | None = None
    macos: MacOsConfig | None = None
    resource_class: str | None = None
    working_directory: str | None = None
    environment: dict[str, str] = field(default_factory=dict)
    shell: str | None = None

    @property
    def docker_images(self) -> list[str]:
        return [image_name(image) for image in self.docker or []]

    def to_dict(self) -> dict[str, Any]:
        machine: Any = self.machine
        if isinstance(machine, MachineImage):
            machine = machine.to_dict()
        return _compact(
            {
                "docker": [image if isinstance(image, str) else image.to_dict() for image in self.docker] if self.docker is not None else None,
                "machine": machine,
                "macos": self.macos.to_dict() if self.macos else None,
                "resource_class": self.resource_class,
                "working_directory": self.working_directory,
                "environment": dict(self.environment) or None,
                "shell": self.shell,
            }
        )


# --- Entities --------------------------------------------------------------


def _parameters_to_dict(parameters: dict[str, Parameter]) -> dict[str, Any]:
    return {name: param.to_dict() for name, param in parameters.items()}


def _steps_to_list(steps: list[Step]) -> list[Any] | None:
    return [step.to_dict() for step in steps] if steps else None


@dataclass(frozen=True)
class Command:
    """Reusable sequence of steps."""

    description: str | None = None
    parameters: dict[str, Parameter] = field(default_factory=dict)
    steps: list[Step] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "description": self.description,
                "parameters": _parameters_to_dict(self.parameters) or None,
                "steps": _steps_to_list(self.steps),
            }
        )


@dataclass(frozen=True)
class Job:
    """Steps bound to an execution environment."""

    description: str | None = None
    executor: ExecutorRef | None = None
    config: ExecutorConfig = field(default_factory=ExecutorConfig)
    parameters: dict[str, Parameter] = field(default_factory=dict)
    steps: list[Step] = field(default_factory=list)
    parallelism: int | None = None
    circleci_ip_ranges: bool | None = None

    @property
    def executor_name(self) -> str | None:
        return self.executor.name if self.executor is not None else None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "description": self.description,
                "executor": self.executor.to_dict() if self.executor is not None else None,
                **self.config.to_dict(),
                "parameters": _parameters_to_dict(self.parameters) or None,
                "steps": _steps_to_list(self.steps),
                "parallelism": self.parallelism,
                "circleci_ip_ranges": self.circleci_ip_ranges,
            }
        )


@dataclass(frozen=True)
class Executor:
    """Where jobs run. Executors have no steps."""

    description: str | None = None
    config: ExecutorConfig = field(default_factory=ExecutorConfig)
    parameters: dict[str, Parameter] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "description": self.description,
                **self.config.to_dict(),
                "parameters": _parameters_to_dict(self.parameters) or None,
            }
        )


@dataclass(frozen=True)
class DisplayInfo:
    home_url: str | None = None
    source_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({"home_url": self.home_url, "source_url": self.source_url})


@dataclass(frozen=True)
class OrbDefinition:
    """Root of a parsed orb."""

    version: str = ""
    description: str | None = None
    display: DisplayInfo | None = None
    orbs: dict[str, str] = field(default_factory=dict)
    commands: dict[str, Command] = field(default_factory=dict)
    jobs: dict[str, Job] = field(default_factory=dict)
    executors: dict[str, Executor] = field(default_factory=dict)

    @property
    def entity_count(self) -> int:
        return len(self.commands) + len(self.jobs) + len(self.executors)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the packed (single document) orb shape."""
        return _compact(
            {
                "version": self.version,
                "description": self.description,
                "display": self.display.to_dict() if self.display else None,
                "orbs": dict(self.orbs) or None,
                "commands": {name: cmd.to_dict() for name, cmd in self.commands.items()} or None,
                "jobs": {name: job.to_dict() for name, job in self.jobs.items()} or None,
                "executors": {name: ex.to_dict() for name, ex in self.executors.items()} or None,
            }
        )
