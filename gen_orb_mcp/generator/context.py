"""
Template context for code generation.

Lowers a parsed OrbDefinition into flat, template-ready records: names are
derived, parameters are pre-rendered and each entity gets its resource URI
and a JSON snapshot that the generated server embeds verbatim.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ..parser.nodes import Command, Executor, ExecutorConfig, Job, OrbDefinition, Parameter
from ..utils import to_pascal_case, to_snake_case
from .config import GeneratorConfig
from .errors import SerializationError


def _to_json(value: Any, indent: int | None = None) -> str:
    try:
        return json.dumps(value, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e


@dataclass
class ParameterContext:
    name: str
    param_type: str
    description: str | None
    # Default value rendered as JSON, None when the parameter has no default
    default: str | None
    required: bool
    enum_values: list[str] | None

    @classmethod
    def from_parameter(cls, name: str, param: Parameter) -> ParameterContext:
        default = None if param.default is None else _to_json(param.default)
        return cls(
            name=name,
            param_type=param.type.value,
            description=param.description,
            default=default,
            required=default is None,
            enum_values=list(param.enum) if param.enum is not None else None,
        )


@dataclass
class ExecutorConfigContext:
    docker_images: list[str] = field(default_factory=list)
    resource_class: str | None = None
    working_directory: str | None = None
    # Ordered (key, value) pairs
    environment: list[tuple[str, str]] = field(default_factory=list)
    shell: str | None = None

    @classmethod
    def from_config(cls, config: ExecutorConfig) -> ExecutorConfigContext:
        return cls(
            docker_images=config.docker_images,
            resource_class=config.resource_class,
            working_directory=config.working_directory,
            environment=list(config.environment.items()),
            shell=config.shell,
        )


def _parameters_snapshot(parameters: dict[str, Parameter]) -> list[dict[str, Any]]:
    snapshot = []
    for name, param in parameters.items():
        entry: dict[str, Any] = {
            "name": name,
            "type": param.type.value,
            "description": param.description,
            "default": param.default,
            "required": param.required,
        }
        if param.enum is not None:
            entry["enum_values"] = list(param.enum)
        snapshot.append(entry)
    return snapshot


def _resource_uri(scheme: str, category: str, name: str) -> str:
    return f"{scheme}://{category}/{name}"


@dataclass
class CommandContext:
    name: str
    description: str | None
    parameters: list[ParameterContext]
    uri: str
    json_content: str

    @classmethod
    def from_command(cls, name: str, cmd: Command, scheme: str = "orb") -> CommandContext:
        snapshot = {
            "name": name,
            "description": cmd.description,
            "parameters": _parameters_snapshot(cmd.parameters),
            "steps_count": len(cmd.steps),
        }
        return cls(
            name=name,
            description=cmd.description,
            parameters=[ParameterContext.from_parameter(pname, p) for pname, p in cmd.parameters.items()],
            uri=_resource_uri(scheme, "commands", name),
            json_content=_to_json(snapshot, indent=2),
        )


@dataclass
class JobContext:
    name: str
    description: str | None
    parameters: list[ParameterContext]
    executor: str | None
    config: ExecutorConfigContext
    uri: str
    json_content: str

    @classmethod
    def from_job(cls, name: str, job: Job, scheme: str = "orb") -> JobContext:
        snapshot = {
            "name": name,
            "description": job.description,
            "executor": job.executor_name,
            "parameters": _parameters_snapshot(job.parameters),
            "steps_count": len(job.steps),
            "docker_images": job.config.docker_images,
            "resource_class": job.config.resource_class,
        }
        return cls(
            name=name,
            description=job.description,
            parameters=[ParameterContext.from_parameter(pname, p) for pname, p in job.parameters.items()],
            executor=job.executor_name,
            config=ExecutorConfigContext.from_config(job.config),
            uri=_resource_uri(scheme, "jobs", name),
            json_content=_to_json(snapshot, indent=2),
        )


@dataclass
class ExecutorContext:
    name: str
    description: str | None
    parameters: list[ParameterContext]
    config: ExecutorConfigContext
    uri: str
    json_content: str

    @classmethod
    def from_executor(cls, name: str, executor: Executor, scheme: str = "orb") -> ExecutorContext:
        snapshot = {
            "name": name,
            "description": executor.description,
            "parameters": _parameters_snapshot(executor.parameters),
            "docker_images": executor.config.docker_images,
            "resource_class": executor.config.resource_class,
            "working_directory": executor.config.working_directory,
        }
        return cls(
            name=name,
            description=executor.description,
            parameters=[ParameterContext.from_parameter(pname, p) for pname, p in executor.parameters.items()],
            config=ExecutorConfigContext.from_config(executor.config),
            uri=_resource_uri(scheme, "executors", name),
            json_content=_to_json(snapshot, indent=2),
        )


@dataclass
class GeneratorContext:
    """Root context passed to every template."""

    # Orb name as given, e.g. "my-toolkit"
    orb_name: str
    # Python package name, e.g. "my_toolkit_mcp"
    package_name: str
    # Catalogue class name, e.g. "MyToolkitMcp"
    class_name: str
    version: str
    description: str | None
    uri_scheme: str
    commands: list[CommandContext]
    jobs: list[JobContext]
    executors: list[ExecutorContext]
    has_resources: bool

    @classmethod
    def from_orb(cls, orb: OrbDefinition, orb_name: str, version: str, config: GeneratorConfig | None = None) -> GeneratorContext:
        """
        Build the context for an orb.

        Args:
            orb: The parsed orb definition
            orb_name: Name of the orb, seeds package and class names
            version: Version of the generated server package
            config: Generator configuration (defaults apply when omitted)

        Returns:
            GeneratorContext ready for rendering

        Raises:
            SerializationError: If a parameter default cannot be rendered as JSON
        """
        config = config or GeneratorConfig()
        scheme = config.uri_scheme

        commands = [CommandContext.from_command(name, cmd, scheme) for name, cmd in orb.commands.items()]
        jobs = [JobContext.from_job(name, job, scheme) for name, job in orb.jobs.items()]
        executors = [ExecutorContext.from_executor(name, ex, scheme) for name, ex in orb.executors.items()]

        return cls(
            orb_name=orb_name,
            package_name=to_snake_case(orb_name).replace("-", "_") + config.package_suffix,
            class_name=to_pascal_case(orb_name) + config.class_suffix,
            version=version,
            description=orb.description,
            uri_scheme=scheme,
            commands=commands,
            jobs=jobs,
            executors=executors,
            has_resources=bool(commands or jobs or executors),
        )

    @property
    def resource_uris(self) -> list[str]:
        return [entity.uri for entity in [*self.commands, *self.jobs, *self.executors]]
