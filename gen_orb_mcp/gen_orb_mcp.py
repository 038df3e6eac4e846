import json
import logging
from pathlib import Path

import click
import yaml

from . import __version__
from .cli_utils import VersionResolutionError, derive_orb_name, resolve_version
from .generator import CodeGenerator, GeneratorConfig, GeneratorError
from .parser import OrbParser, ParseError

logger = logging.getLogger(__name__)


def _parse_orb(orb_path):
    try:
        return OrbParser.parse(orb_path)
    except ParseError as e:
        raise click.ClickException(str(e)) from e


def _load_config(config_path):
    if config_path is None:
        return GeneratorConfig()
    try:
        with open(config_path) as f:
            return GeneratorConfig.from_dict(json.load(f))
    except (OSError, ValueError) as e:
        raise click.ClickException(f"failed to load config '{config_path}': {e}") from e


@click.group()
@click.version_option(__version__, prog_name="gen-orb-mcp")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose):
    """Generate MCP servers from CircleCI orb definitions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--orb-path",
    "-p",
    required=True,
    type=click.Path(exists=True, path_type=Path),
    help="Packed orb file, unpacked orb directory or its @orb.yml",
)
@click.option("--output", "-o", default="./dist", type=click.Path(file_okay=False, path_type=Path))
@click.option("--name", "-n", default=None, type=str, help="Orb name (derived from the path by default)")
@click.option("--version", "-V", "version", default=None, type=str, help="Version of the generated package")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing generated project")
@click.option("--format-code", is_flag=True, default=False, help="Run the formatter on generated files")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def generate(orb_path, output, name, version, force, format_code, config):
    """Generate an MCP server project from an orb."""
    orb = _parse_orb(orb_path)
    config = _load_config(config)

    if name is None:
        name = derive_orb_name(orb_path)
    try:
        version = resolve_version(output, version, force)
    except VersionResolutionError as e:
        raise click.ClickException(str(e)) from e

    codegen = CodeGenerator(config)
    try:
        server = codegen.generate(orb, name, version)
        if format_code or config.formatter.enabled:
            server.format(output)
        else:
            server.write_to(output)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Generated MCP server in {output}")
    click.echo(f"  package:   {server.package_name}")
    click.echo(f"  version:   {version}")
    click.echo(f"  commands:  {len(orb.commands)}")
    click.echo(f"  jobs:      {len(orb.jobs)}")
    click.echo(f"  executors: {len(orb.executors)}")
    click.echo("")
    click.echo(f"Install it with: pip install -e {output}")


@cli.command()
@click.option("--orb-path", "-p", required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--dump", is_flag=True, default=False, help="Print the orb as normalized packed YAML")
def validate(orb_path, dump):
    """Parse an orb and list its contents."""
    orb = _parse_orb(orb_path)

    if dump:
        click.echo(yaml.safe_dump(orb.to_dict(), sort_keys=False), nl=False)
        return

    click.echo(f"Orb is valid: {orb_path}")
    click.echo(f"  version: {orb.version}")
    if orb.description:
        click.echo(f"  description: {orb.description}")
    for title, entities in (("commands", orb.commands), ("jobs", orb.jobs), ("executors", orb.executors)):
        click.echo(f"  {title} ({len(entities)}):")
        for entity_name in entities:
            click.echo(f"    - {entity_name}")
