"""Command-line interface for persistent collection generation."""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from pcgen.generator.config import Configuration
from pcgen.generator.errors import (
    DirectoryRequiredError,
    IntrospectionError,
    NamespaceRequiredError,
    PersistentCollectionError,
)
from pcgen.generator.introspect import introspect, resolve_target
from pcgen.generator.methods import build_parameters_string, get_method_return_type, skip_reason
from pcgen.generator.signature import TypeRenderer

if TYPE_CHECKING:
    from pcgen.generator.types import TargetType


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Persistent collection class generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


@cli.command()
@click.option("--target", "-t", required=True, help="Collection class (module:QualName)")
@click.option("--directory", "-d", default=None, help="Output directory")
@click.option("--namespace", "-n", default=None, help="Namespace of generated classes")
@click.option("--config", "-c", "config_file", default=None, help="JSON configuration file")
def gen(
    target: str, directory: str | None, namespace: str | None, config_file: str | None
) -> None:
    """Write the persistent collection class for a target class."""
    config = Configuration.from_file(config_file) if config_file else Configuration()
    if directory is not None:
        config.collection_dir = directory
    if namespace is not None:
        config.collection_namespace = namespace

    try:
        if not config.collection_dir:
            raise DirectoryRequiredError()
        if not config.collection_namespace:
            raise NamespaceRequiredError()
        generated = config.build_generator().generate_class(target, config.collection_dir)
    except (PersistentCollectionError, IntrospectionError, ImportError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    print(f"Generated {generated.name} in {generated.path}")


@cli.command()
@click.option("--target", "-t", required=True, help="Collection class (module:QualName)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(target: str, output_json: bool) -> None:
    """Display the methods of a target class and how they are decorated."""
    try:
        target_type = introspect(resolve_target(target))
        if output_json:
            _output_json(target_type)
        else:
            _output_plain(target_type)
    except (PersistentCollectionError, IntrospectionError, ImportError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)


def _output_json(target_type: TargetType) -> None:
    """Output the introspected target as JSON."""
    print(json.dumps(target_type.to_dict(), indent=2, default=repr))


def _output_plain(target_type: TargetType) -> None:
    """Output the introspected target using rich text formatting."""
    console = Console()
    renderer = TypeRenderer()

    console.print(f"[bold cyan]{target_type.fqcn}[/bold cyan]")

    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Method", style="white", no_wrap=True)
    table.add_column("Decorated", style="green", no_wrap=True)
    table.add_column("Signature", style="dim")

    for method in target_type.methods:
        reason = skip_reason(method)
        signature = f"({build_parameters_string(method, renderer)})"
        return_type = get_method_return_type(method, renderer)
        if return_type:
            signature += f" -> {return_type}"
        table.add_row(
            method.name, "yes" if reason is None else f"no ({reason})", Text(signature)
        )

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
