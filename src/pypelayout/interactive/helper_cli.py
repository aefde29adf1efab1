"""
Command line helper for pypelayout.

This module provides a command-line interface for:
- shape: Print the outline of one generated shape as SVG path data
- demo: Build a small rack-and-pipe layout and write it as SVG
- settings: Create, show and validate editor settings files

Usage:
    pypelayout shape elbow --param diameter=20 --param rotation=1
    pypelayout demo -o layout.svg
    pypelayout settings init editor.yaml
"""

import logging
from pathlib import Path

import click
import yaml

from ..editor import LayoutEditor
from ..entities import EntityKind, create_entity
from ..logging_config import setup_logging
from ..settings import EditorSettings
from ..svg_export import write_svg

logger = logging.getLogger(__name__)


def _parse_params(params: tuple[str, ...]) -> dict[str, object]:
    """Parse KEY=VALUE pairs; values go through YAML scalar parsing."""
    values = {}
    for item in params:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--param")
        values[key.strip()] = yaml.safe_load(raw) if raw.strip() else ""
    return values


def _load_settings(path: Path | None) -> EditorSettings:
    if path is None:
        return EditorSettings()
    try:
        return EditorSettings.from_yaml(path)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        raise click.BadParameter(str(e), param_hint="--settings") from None


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write the log to this file.",
)
def cli(verbose: bool, log_file: Path | None):
    """pypelayout - 2D piping layout engine tools."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, log_file)


@cli.command()
@click.argument("kind")
@click.option(
    "--at",
    "center",
    type=(float, float),
    default=(0.0, 0.0),
    show_default=True,
    help="Center point X Y.",
)
@click.option(
    "--param", "-p",
    "params",
    multiple=True,
    help="Entity field as KEY=VALUE (e.g. length=300, vertical=true).",
)
def shape(kind: str, center: tuple[float, float], params: tuple[str, ...]):
    """
    Print the outline of a single shape as SVG path data.

    KIND is one of: pipe, elbow, support, cantilever, floating_support,
    rectangle, circle, zone, text.

    Example:
        pypelayout shape pipe --param length=300 --param vertical=true
    """
    try:
        entity_kind = EntityKind.parse(kind)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="KIND") from None

    fields = _parse_params(params)
    try:
        entity = create_entity(entity_kind, f"{entity_kind.id_prefix}-0", center, **fields)
    except TypeError as e:
        raise click.BadParameter(str(e), param_hint="--param") from None

    logger.debug("Generated %s with %s", entity.id, entity.dimensions)
    click.echo(entity.outline.to_svg_path())


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=Path("layout.svg"),
    show_default=True,
    help="Output SVG file path.",
)
@click.option(
    "--settings", "settings_file",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Editor settings YAML file.",
)
def demo(output: Path, settings_file: Path | None):
    """
    Build a rack with a resting pipe run and write it as SVG.

    A pipe is dropped onto a rack support, a second pipe is aligned to it,
    and an elbow turns the run down.
    """
    editor = LayoutEditor(_load_settings(settings_file))

    rack = editor.add("support")
    first = editor.add("pipe", center=(400.0, 250.0))
    editor.move(first.id, (0.0, 20.0))

    second = editor.add("pipe", center=(612.0, 262.0))
    editor.move(second.id, (0.0, 0.0))

    elbow = editor.add("elbow", center=(second.center[0] + 130.0, second.center[1]))
    editor.rotate(elbow.id)

    editor.select([rack.id, first.id, second.id, elbow.id])
    zone = editor.create_zone()
    editor.set_label(zone.id, "Rack 1 erection")

    write_svg(editor.entities(), output)

    click.echo(f"\nWrote: {output}")
    click.echo("-" * 50)
    for entity in editor.entities():
        x, y = entity.center
        click.echo(f"  {entity.id:<10} {entity.kind.name:<16} ({x:.1f}, {y:.1f})  {entity.label}")


@cli.group()
def settings():
    """Create, show and validate editor settings files."""
    pass


@settings.command("init")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def settings_init(path: Path, force: bool):
    """
    Write the stock editor settings to a YAML file.

    Example:
        pypelayout settings init editor.yaml
    """
    if path.exists() and not force:
        click.echo(f"Error: {path} already exists (use --force to overwrite)", err=True)
        raise SystemExit(1)
    EditorSettings().to_yaml(path)
    click.echo(f"Wrote default settings to {path}")


@settings.command("show")
@click.argument("path", type=click.Path(exists=True, path_type=Path), required=False)
def settings_show(path: Path | None):
    """Print the effective settings (stock defaults when PATH is omitted)."""
    config = _load_settings(path)
    click.echo(yaml.dump(config._to_dict(), default_flow_style=False, sort_keys=False), nl=False)


@settings.command("validate")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def settings_validate(path: Path):
    """
    Validate an editor settings file.

    Example:
        pypelayout settings validate editor.yaml
    """
    click.echo(f"\nValidating: {path}")
    click.echo("-" * 50)

    try:
        config = EditorSettings.from_yaml(path)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        click.echo(f"Error loading settings: {e}", err=True)
        raise SystemExit(1) from None

    warnings = []
    if config.snap.gravity <= config.snap.general:
        warnings.append(
            f"snap.gravity ({config.snap.gravity}) is not wider than snap.general "
            f"({config.snap.general}); pipes will rarely drop onto supports"
        )

    if warnings:
        click.echo("\nWarnings:")
        for w in warnings:
            click.echo(f"  - {w}")
    else:
        click.echo("Settings are valid.")
        click.echo(f"  Snap: general {config.snap.general}, gravity {config.snap.gravity}")
        click.echo(f"  Zoom: {config.zoom.min_scale} .. {config.zoom.max_scale}")


if __name__ == "__main__":
    cli()
