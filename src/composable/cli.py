"""CLI entry point for inspecting and trial-composing behaviors."""

from __future__ import annotations

import importlib
import json
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.errors import ComposableError, ConfigError


def _load_target(target: str) -> Any:
    """Resolve ``package.module:attr.path`` to the object it names."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigError(f"Expected MODULE:ATTR, got {target!r}")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import {module_name}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ConfigError(f"{module_name} has no attribute {attr_path}") from exc
    return obj


@click.group()
@click.option("--config", default=None, help="Config file path (TOML)")
@click.option("--log-level", default=None, help="Override log level")
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default=None,
    help="Override log format",
)
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Compose objects from encapsulated behaviors."""
    from .observability.logger import new_run_id, setup_logging

    observability: dict[str, Any] = {}
    if log_level:
        observability["log_level"] = log_level
    if log_format:
        observability["log_format"] = log_format

    try:
        settings = load_settings(
            config_path=config,
            overrides={"observability": observability} if observability else None,
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    new_run_id()
    ctx.obj = settings


@main.command()
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
def inspect(target: str, as_json: bool) -> None:
    """Show how a behavior's members are classified."""
    from .behavior import classify

    try:
        summary = classify(_load_target(target)).summary()
    except (ConfigError, TypeError) as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    click.echo(f"Behavior: {summary['name']}")
    click.echo(f"  methods:       {', '.join(summary['methods']) or '-'}")
    click.echo(f"  dependencies:  {', '.join(summary['dependencies']) or '-'}")
    click.echo(f"  private slots: {', '.join(summary['private_slots']) or '-'}")
    resolutions = ", ".join(
        f"{name} ({policy})" for name, policy in summary["resolutions"].items()
    )
    click.echo(f"  resolutions:   {resolutions or '-'}")
    if summary["ignored"]:
        click.echo(f"  ignored:       {', '.join(summary['ignored'])}")


@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.option("--parent", default=None, help="Parent composite as MODULE:ATTR")
@click.option(
    "--resolve",
    "resolutions",
    multiple=True,
    help="Annotate a method before composing: INDEX:NAME=POLICY (0-based)",
)
@click.pass_obj
def check(
    settings: Settings,
    targets: tuple[str, ...],
    parent: str | None,
    resolutions: tuple[str, ...],
) -> None:
    """Compose TARGETS left to right and print the resulting methods."""
    from .behavior import resolve
    from .composition import (
        CompositeObject,
        compose,
        method_names_of,
        name_of,
        origins_of,
        own_method_names_of,
    )

    try:
        behaviors = [_load_target(t) for t in targets]
        base = _load_target(parent) if parent else None
        if base is not None and not isinstance(base, CompositeObject):
            raise ConfigError(f"{parent} is not a composite")
        for raw in resolutions:
            index, method_name, policy = _parse_resolution(raw, len(behaviors))
            behaviors[index] = resolve(behaviors[index], {method_name: policy})
    except (ConfigError, KeyError, TypeError) as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        composite = compose(base, *behaviors, config=settings.composition)
    except ComposableError as exc:
        click.echo(f"error: {type(exc).__name__}: {exc}", err=True)
        raise SystemExit(1) from exc

    own = own_method_names_of(composite)
    click.echo(f"Composite: {name_of(composite)}")
    if base is not None:
        click.echo(f"  parent: {name_of(base)}")
    for method_name in method_names_of(composite):
        origin = " -> ".join(origins_of(composite, method_name))
        marker = "" if method_name in own else " (inherited)"
        click.echo(f"  {method_name}: {origin}{marker}")


def _parse_resolution(raw: str, count: int) -> tuple[int, str, str]:
    index_part, _, rest = raw.partition(":")
    method_name, _, policy = rest.partition("=")
    if not index_part.isdigit() or not method_name or not policy:
        raise ConfigError(f"Expected INDEX:NAME=POLICY, got {raw!r}")
    index = int(index_part)
    if index >= count:
        raise ConfigError(f"--resolve index {index} is out of range")
    return index, method_name, policy


if __name__ == "__main__":
    main()
