"""Command-line interface for bindery code generation."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from bindery.generator import python
from bindery.generator.encoding import choose_strategy
from bindery.generator.parser import ValidationError, load
from bindery.generator.registry import build_registry
from bindery.generator.typemap import TypeMapper
from bindery.generator.types import GenerationError, is_boolean

if TYPE_CHECKING:
    from bindery.generator.registry import Family
    from bindery.generator.types import APIDescription, MethodDescriptor

logger = logging.getLogger(__name__)


def _load(input_file: str) -> APIDescription:
    with open(input_file, encoding="utf-8") as f:
        text = f.read()
    try:
        return load(text)
    except ValidationError as err:
        print(f"Invalid API description: {err}")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log compilation details")
def cli(verbose: bool) -> None:
    """Bindery client binding generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input API description (JSON)")
@click.option("--output", "-o", "output_file", required=True, help="Output file")
@click.option(
    "--runtime-import",
    "runtime_import",
    is_flag=False,
    flag_value="bindery.runtime",
    default=None,
    help="Import path for runtime. No value=bindery.runtime, omit=bindery_runtime",
)
@click.option("--client-name", default="Bot", help="Name of the generated client class")
def gen(input_file: str, output_file: str, runtime_import: str | None, client_name: str) -> None:
    """Generate client bindings from an API description."""
    api = _load(input_file)

    # Default to "bindery_runtime" (copied next to the bindings) if not specified
    import_path = runtime_import if runtime_import is not None else "bindery_runtime"
    try:
        generated_file = python.render(api, runtime_import=import_path, client_name=client_name)
    except GenerationError as err:
        print(f"Generation failed: {err}")
        sys.exit(1)

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(generated_file)
    logger.info("Wrote %s", output_file)


@cli.command()
@click.option("--output", "-o", "output_path", default=".", help="Output directory")
@click.option("--name", default="bindery_runtime", help="Runtime folder name")
def runtime(output_path: str, name: str) -> None:
    """Generate runtime support code."""
    runtime_dir = Path(output_path) / name
    runtime_dir.mkdir(parents=True, exist_ok=True)
    for filename, content in python.runtime().items():
        (runtime_dir / filename).write_text(content)
    print(f"Generated Python runtime in {runtime_dir}")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input API description (JSON)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display API description information."""
    api = _load(input_file)
    mapper = TypeMapper(api)
    try:
        families = build_registry(api)
        multipart = {name for name in api.method_names() if _is_multipart(mapper, api.methods[name])}
    except GenerationError as err:
        print(f"Generation failed: {err}")
        sys.exit(1)

    if output_json:
        _output_json(api, families, multipart)
    else:
        _output_plain(api, families, multipart)


def _is_multipart(mapper: TypeMapper, method: MethodDescriptor) -> bool:
    return any(choose_strategy(mapper, mapper.map_field(f, method.name)).uses_parts for f in method.fields)


def _is_dual(method: MethodDescriptor) -> bool:
    return len(method.returns) == 2 and is_boolean(method.returns[1])


def _dispatch(family: Family) -> str:
    return f"on {family.discriminator}" if family.discriminator else "on shape"


def _flags(method: MethodDescriptor, multipart: bool) -> str:
    flags = []
    if _is_dual(method):
        flags.append("dual")
    if multipart:
        flags.append("multipart")
    return ", ".join(flags)


def _output_json(api: APIDescription, families: dict[str, Family], multipart: set[str]) -> None:
    """Output API info as JSON."""
    data: dict = {
        "types": {},
        "families": {},
        "methods": {},
    }

    for name in api.type_names():
        tg_type = api.types[name]
        data["types"][name] = {
            "fields": len(tg_type.fields),
            "subtype_of": sorted(tg_type.subtype_of),
        }

    for name, family in families.items():
        data["families"][name] = {
            "implementers": list(family.implementers),
            "discriminator": family.discriminator,
        }

    for name in api.method_names():
        method = api.methods[name]
        data["methods"][name] = {
            "required": [f.name for f in method.required_fields],
            "optional": [f.name for f in method.optional_fields],
            "returns": method.returns,
            "dual_return": _is_dual(method),
            "multipart": name in multipart,
        }

    print(json.dumps(data, indent=2))


def _output_plain(api: APIDescription, families: dict[str, Family], multipart: set[str]) -> None:
    """Output API info using rich text formatting."""
    console = Console()

    # Polymorphic families
    console.print("[bold cyan]Families[/bold cyan]")
    family_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    family_table.add_column("Name", style="white")
    family_table.add_column("Implementers", style="yellow", justify="right")
    family_table.add_column("Dispatch", style="dim")

    for name, family in families.items():
        family_table.add_row(name, str(len(family.implementers)), _dispatch(family))

    console.print(family_table)
    console.print()

    # Methods
    console.print("[bold cyan]Methods[/bold cyan]")
    method_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    method_table.add_column("Name", style="white")
    method_table.add_column("Required", style="yellow", justify="right")
    method_table.add_column("Optional", style="yellow", justify="right")
    method_table.add_column("Returns", style="green")
    method_table.add_column("Flags", style="dim")

    for name in api.method_names():
        method = api.methods[name]
        method_table.add_row(
            name,
            str(len(method.required_fields)),
            str(len(method.optional_fields)),
            " or ".join(method.returns),
            _flags(method, name in multipart),
        )

    console.print(method_table)
    console.print()

    summary = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    summary.add_column("Label", style="dim")
    summary.add_column("Value", style="white")
    summary.add_row("Types", str(len(api.types)))
    summary.add_row("Methods", str(len(api.methods)))
    console.print(summary)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
