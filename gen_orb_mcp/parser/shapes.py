"""
Builds typed orb nodes from loaded YAML data.

Several orb fields accept more than one shape for the same value (a step
can be a bare name or a mapping, a docker image can be a string or a
record, ...). Each union is resolved by trying its shapes in a fixed order
and keeping the first one that fits structurally:

- step: string -> SimpleStep; one-key mapping with a structured step key
  -> that step; any other non-empty mapping -> CommandInvocation
- run: string -> bare command; mapping with ``command`` -> RunConfig
- executor reference: string -> ExecutorName; mapping with ``name`` ->
  ExecutorWithParams
- docker image: string -> bare image; mapping with ``image`` -> DockerImageFull
- machine: bool -> flag; mapping with ``image`` -> MachineImage

Only key presence and value types are inspected, never content. Unknown
keys are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .nodes import (
    AddSshKeysStep,
    AttachWorkspaceStep,
    AwsAuth,
    CheckoutStep,
    Command,
    CommandInvocation,
    DisplayInfo,
    DockerAuth,
    DockerImage,
    DockerImageFull,
    Executor,
    ExecutorConfig,
    ExecutorName,
    ExecutorRef,
    ExecutorWithParams,
    Job,
    MachineConfig,
    MachineImage,
    MacOsConfig,
    OrbDefinition,
    Parameter,
    ParameterType,
    PersistToWorkspaceStep,
    RestoreCacheStep,
    RunConfig,
    RunStep,
    SaveCacheStep,
    SetupRemoteDockerStep,
    SimpleStep,
    Step,
    StoreArtifactsStep,
    StoreTestResultsStep,
    UnlessStep,
    WhenStep,
)

logger = logging.getLogger(__name__)


class ShapeMismatch(Exception):
    """Raised when a value does not fit the shape being built.

    The message names the location of the value inside the document.
    """

    pass


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return {dict: "mapping", list: "sequence", str: "string", bool: "boolean", int: "integer", float: "float"}.get(type(value), type(value).__name__)


# --- Scalar readers ----------------------------------------------------------


def _mapping(value: Any, where: str, allow_null: bool = False) -> dict[str, Any]:
    if value is None and allow_null:
        return {}
    if not isinstance(value, dict):
        raise ShapeMismatch(f"{where}: expected a mapping, got {_type_name(value)}")
    for key in value:
        if not isinstance(key, str):
            raise ShapeMismatch(f"{where}: mapping keys must be strings, got {_type_name(key)}")
    return value


def _opt_str(data: dict[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ShapeMismatch(f"{where}.{key}: expected a string, got {_type_name(value)}")
    return value


def _req_str(data: dict[str, Any], key: str, where: str) -> str:
    if key not in data:
        raise ShapeMismatch(f"{where}: missing required field '{key}'")
    value = _opt_str(data, key, where)
    if value is None:
        raise ShapeMismatch(f"{where}.{key}: expected a string, got null")
    return value


def _opt_bool(data: dict[str, Any], key: str, where: str) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ShapeMismatch(f"{where}.{key}: expected a boolean, got {_type_name(value)}")
    return value


def _opt_int(data: dict[str, Any], key: str, where: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ShapeMismatch(f"{where}.{key}: expected a non-negative integer, got {_type_name(value)}")
    return value


def _scalar_text(value: Any, where: str) -> str:
    """Stringify a YAML scalar. Numbers are common for versions and env values."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ShapeMismatch(f"{where}: expected a scalar, got {_type_name(value)}")


def _str_list(data: dict[str, Any], key: str, where: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ShapeMismatch(f"{where}.{key}: expected a sequence, got {_type_name(value)}")
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise ShapeMismatch(f"{where}.{key}[{i}]: expected a string, got {_type_name(item)}")
    return list(value)


def _environment(data: dict[str, Any], key: str, where: str) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    env = _mapping(value, f"{where}.{key}")
    return {name: _scalar_text(item, f"{where}.{key}.{name}") for name, item in env.items()}


# --- Parameters ---------------------------------------------------------------


def build_parameter(value: Any, where: str) -> Parameter:
    data = _mapping(value, where)
    raw_type = _req_str(data, "type", where)
    try:
        param_type = ParameterType(raw_type)
    except ValueError:
        choices = ", ".join(t.value for t in ParameterType)
        raise ShapeMismatch(f"{where}.type: unknown parameter type '{raw_type}' (expected one of {choices})") from None
    enum_values = data.get("enum")
    if enum_values is not None:
        if not isinstance(enum_values, list):
            raise ShapeMismatch(f"{where}.enum: expected a sequence, got {_type_name(enum_values)}")
        enum_values = [_scalar_text(item, f"{where}.enum[{i}]") for i, item in enumerate(enum_values)]
    return Parameter(
        type=param_type,
        description=_opt_str(data, "description", where),
        default=data.get("default"),
        enum=enum_values,
    )


def _parameters(data: dict[str, Any], where: str) -> dict[str, Parameter]:
    value = data.get("parameters")
    if value is None:
        return {}
    params = _mapping(value, f"{where}.parameters")
    return {name: build_parameter(param, f"{where}.parameters.{name}") for name, param in params.items()}


# --- Steps --------------------------------------------------------------------


def _build_run(value: Any, where: str) -> RunStep:
    if isinstance(value, str):
        return RunStep(value)
    data = _mapping(value, where)
    return RunStep(
        RunConfig(
            command=_req_str(data, "command", where),
            name=_opt_str(data, "name", where),
            working_directory=_opt_str(data, "working_directory", where),
            environment=_environment(data, "environment", where),
            shell=_opt_str(data, "shell", where),
            background=_opt_bool(data, "background", where),
            no_output_timeout=_opt_no_output_timeout(data, where),
            when=_opt_str(data, "when", where),
        )
    )


def _opt_no_output_timeout(data: dict[str, Any], where: str) -> str | None:
    value = data.get("no_output_timeout")
    return None if value is None else _scalar_text(value, f"{where}.no_output_timeout")


def _build_checkout(value: Any, where: str) -> CheckoutStep:
    data = _mapping(value, where, allow_null=True)
    return CheckoutStep(path=_opt_str(data, "path", where))


def _build_restore_cache(value: Any, where: str) -> RestoreCacheStep:
    data = _mapping(value, where, allow_null=True)
    return RestoreCacheStep(
        key=_opt_str(data, "key", where),
        keys=_str_list(data, "keys", where),
        name=_opt_str(data, "name", where),
    )


def _build_save_cache(value: Any, where: str) -> SaveCacheStep:
    data = _mapping(value, where)
    return SaveCacheStep(
        key=_req_str(data, "key", where),
        paths=_str_list(data, "paths", where) or [],
        name=_opt_str(data, "name", where),
        when=_opt_str(data, "when", where),
    )


def _build_conditional(step_class: type[WhenStep] | type[UnlessStep]) -> Callable[[Any, str], Step]:
    def build(value: Any, where: str) -> Step:
        data = _mapping(value, where)
        if "condition" not in data:
            raise ShapeMismatch(f"{where}: missing required field 'condition'")
        return step_class(condition=data["condition"], steps=build_steps(data.get("steps"), f"{where}.steps"))

    return build


def _build_persist_to_workspace(value: Any, where: str) -> PersistToWorkspaceStep:
    data = _mapping(value, where)
    return PersistToWorkspaceStep(root=_req_str(data, "root", where), paths=_str_list(data, "paths", where) or [])


def _build_attach_workspace(value: Any, where: str) -> AttachWorkspaceStep:
    data = _mapping(value, where)
    return AttachWorkspaceStep(at=_req_str(data, "at", where))


def _build_store_test_results(value: Any, where: str) -> StoreTestResultsStep:
    data = _mapping(value, where)
    return StoreTestResultsStep(path=_req_str(data, "path", where))


def _build_store_artifacts(value: Any, where: str) -> StoreArtifactsStep:
    data = _mapping(value, where)
    return StoreArtifactsStep(path=_req_str(data, "path", where), destination=_opt_str(data, "destination", where))


def _build_add_ssh_keys(value: Any, where: str) -> AddSshKeysStep:
    data = _mapping(value, where, allow_null=True)
    return AddSshKeysStep(fingerprints=_str_list(data, "fingerprints", where) or [])


def _build_setup_remote_docker(value: Any, where: str) -> SetupRemoteDockerStep:
    data = _mapping(value, where, allow_null=True)
    version = data.get("version")
    return SetupRemoteDockerStep(
        version=None if version is None else _scalar_text(version, f"{where}.version"),
        docker_layer_caching=_opt_bool(data, "docker_layer_caching", where),
    )


STRUCTURED_STEPS: dict[str, Callable[[Any, str], Step]] = {
    "run": _build_run,
    "checkout": _build_checkout,
    "restore_cache": _build_restore_cache,
    "save_cache": _build_save_cache,
    "when": _build_conditional(WhenStep),
    "unless": _build_conditional(UnlessStep),
    "persist_to_workspace": _build_persist_to_workspace,
    "attach_workspace": _build_attach_workspace,
    "store_test_results": _build_store_test_results,
    "store_artifacts": _build_store_artifacts,
    "add_ssh_keys": _build_add_ssh_keys,
    "setup_remote_docker": _build_setup_remote_docker,
}


def build_step(value: Any, where: str) -> Step:
    """Resolve one step value to its variant."""
    if isinstance(value, str):
        return SimpleStep(value)

    if isinstance(value, dict) and value:
        entries = _mapping(value, where)
        if len(entries) == 1:
            key, body = next(iter(entries.items()))
            builder = STRUCTURED_STEPS.get(key)
            if builder is not None:
                try:
                    return builder(body, f"{where}.{key}")
                except ShapeMismatch as e:
                    logger.debug("%s does not fit the '%s' step shape (%s), treating it as a command invocation", where, key, e)
        return CommandInvocation(dict(entries))

    raise ShapeMismatch(f"{where}: expected a step name or a non-empty mapping, got {_type_name(value)}")


def build_steps(value: Any, where: str) -> list[Step]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ShapeMismatch(f"{where}: expected a sequence, got {_type_name(value)}")
    return [build_step(item, f"{where}[{i}]") for i, item in enumerate(value)]


# --- Execution environment ----------------------------------------------------


def build_executor_ref(value: Any, where: str) -> ExecutorRef:
    if isinstance(value, str):
        return ExecutorName(value)
    data = _mapping(value, where)
    name = _req_str(data, "name", where)
    return ExecutorWithParams(name=name, parameters={k: v for k, v in data.items() if k != "name"})


def _build_docker_auth(value: Any, where: str) -> DockerAuth | None:
    if value is None:
        return None
    data = _mapping(value, where)
    return DockerAuth(username=_req_str(data, "username", where), password=_req_str(data, "password", where))


def _build_aws_auth(value: Any, where: str) -> AwsAuth | None:
    if value is None:
        return None
    data = _mapping(value, where)
    return AwsAuth(
        aws_access_key_id=_opt_str(data, "aws_access_key_id", where),
        aws_secret_access_key=_opt_str(data, "aws_secret_access_key", where),
        oidc_role_arn=_opt_str(data, "oidc_role_arn", where),
    )


def build_docker_image(value: Any, where: str) -> DockerImage:
    if isinstance(value, str):
        return value
    data = _mapping(value, where)
    return DockerImageFull(
        image=_req_str(data, "image", where),
        auth=_build_docker_auth(data.get("auth"), f"{where}.auth"),
        aws_auth=_build_aws_auth(data.get("aws_auth"), f"{where}.aws_auth"),
        name=_opt_str(data, "name", where),
        entrypoint=_str_list(data, "entrypoint", where),
        command=_str_list(data, "command", where),
        user=_opt_str(data, "user", where),
        environment=_environment(data, "environment", where),
    )


def _build_machine(value: Any, where: str) -> MachineConfig | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    data = _mapping(value, where)
    return MachineImage(image=_req_str(data, "image", where), docker_layer_caching=_opt_bool(data, "docker_layer_caching", where))


def _build_macos(value: Any, where: str) -> MacOsConfig | None:
    if value is None:
        return None
    data = _mapping(value, where)
    if "xcode" not in data or data["xcode"] is None:
        raise ShapeMismatch(f"{where}: missing required field 'xcode'")
    return MacOsConfig(xcode=_scalar_text(data["xcode"], f"{where}.xcode"))


def build_executor_config(data: dict[str, Any], where: str) -> ExecutorConfig:
    """Read the execution environment keys flattened into a job or executor."""
    docker = data.get("docker")
    if docker is not None:
        if not isinstance(docker, list):
            raise ShapeMismatch(f"{where}.docker: expected a sequence, got {_type_name(docker)}")
        docker = [build_docker_image(image, f"{where}.docker[{i}]") for i, image in enumerate(docker)]
    return ExecutorConfig(
        docker=docker,
        machine=_build_machine(data.get("machine"), f"{where}.machine"),
        macos=_build_macos(data.get("macos"), f"{where}.macos"),
        resource_class=_opt_str(data, "resource_class", where),
        working_directory=_opt_str(data, "working_directory", where),
        environment=_environment(data, "environment", where),
        shell=_opt_str(data, "shell", where),
    )


# --- Entities -----------------------------------------------------------------


def build_command(value: Any, where: str) -> Command:
    data = _mapping(value, where, allow_null=True)
    return Command(
        description=_opt_str(data, "description", where),
        parameters=_parameters(data, where),
        steps=build_steps(data.get("steps"), f"{where}.steps"),
    )


def build_job(value: Any, where: str) -> Job:
    data = _mapping(value, where, allow_null=True)
    executor = data.get("executor")
    return Job(
        description=_opt_str(data, "description", where),
        executor=None if executor is None else build_executor_ref(executor, f"{where}.executor"),
        config=build_executor_config(data, where),
        parameters=_parameters(data, where),
        steps=build_steps(data.get("steps"), f"{where}.steps"),
        parallelism=_opt_int(data, "parallelism", where),
        circleci_ip_ranges=_opt_bool(data, "circleci_ip_ranges", where),
    )


def build_executor(value: Any, where: str) -> Executor:
    data = _mapping(value, where, allow_null=True)
    return Executor(
        description=_opt_str(data, "description", where),
        config=build_executor_config(data, where),
        parameters=_parameters(data, where),
    )


ENTITY_BUILDERS: dict[str, Callable[[Any, str], Any]] = {
    "commands": build_command,
    "jobs": build_job,
    "executors": build_executor,
}


def build_entities(data: dict[str, Any], category: str) -> dict[str, Any]:
    value = data.get(category)
    if value is None:
        return {}
    entities = _mapping(value, category)
    builder = ENTITY_BUILDERS[category]
    return {name: builder(body, f"{category}.{name}") for name, body in entities.items()}


def _build_display(value: Any) -> DisplayInfo | None:
    if value is None:
        return None
    data = _mapping(value, "display")
    return DisplayInfo(home_url=_opt_str(data, "home_url", "display"), source_url=_opt_str(data, "source_url", "display"))


def _build_orbs(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    orbs = _mapping(value, "orbs")
    for name, ref in orbs.items():
        if not isinstance(ref, str):
            raise ShapeMismatch(f"orbs.{name}: expected an orb reference string, got {_type_name(ref)}")
    return dict(orbs)


def build_definition(value: Any) -> OrbDefinition:
    """Build an OrbDefinition from a loaded packed document (or an ``@orb.yml``).

    An unquoted numeric version is read by YAML as a number, so ``2.10``
    becomes ``"2.1"``. Quote versions to keep them verbatim.
    """
    data = _mapping(value, "<root>", allow_null=True)
    version = data.get("version")
    version_text = "" if version is None else _scalar_text(version, "version")
    if version is not None and not isinstance(version, str):
        logger.debug("Orb version %r is not a string, read as %r", version, version_text)
    return OrbDefinition(
        version=version_text,
        description=_opt_str(data, "description", "<root>"),
        display=_build_display(data.get("display")),
        orbs=_build_orbs(data.get("orbs")),
        commands=build_entities(data, "commands"),
        jobs=build_entities(data, "jobs"),
        executors=build_entities(data, "executors"),
    )
