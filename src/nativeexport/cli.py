"""
NativeExport Command Line Interface.

This module provides the CLI entry point for the method-export compiler.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nativeexport.config import (
    ConfigurationError,
    NativeExportConfig,
    load_config,
    load_config_from_env,
)
from nativeexport.driver import CompileResult, compile_path
from nativeexport.frontend import FrontendError, is_tree_file
from nativeexport.version import __version__

console = Console()

EXIT_DIAGNOSTICS = 1
EXIT_ERROR = 2


def _configure_logging(config: NativeExportConfig, verbose: bool) -> None:
    if config.debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = config.logging.level.to_logging()

    logging.basicConfig(
        level=level,
        format=config.logging.format,
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("nativeexport").setLevel(level)


def _load(ctx: click.Context) -> NativeExportConfig:
    """Load the configuration selected on the command group."""
    config_path = ctx.obj.get("config_path")
    try:
        cfg = load_config(config_path) if config_path else load_config_from_env()
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}", soft_wrap=True)
        sys.exit(EXIT_ERROR)

    _configure_logging(cfg, ctx.obj.get("verbose", False))
    return cfg


def _compile(path: str, cfg: NativeExportConfig) -> CompileResult:
    try:
        return compile_path(Path(path), cfg)
    except FrontendError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        sys.exit(EXIT_ERROR)


def _print_diagnostics(result: CompileResult) -> None:
    for diag in result.diagnostics:
        console.print(f"[red]{escape(str(diag))}[/red]", highlight=False, soft_wrap=True)


def _default_output(source: Path, cfg: NativeExportConfig) -> Path:
    suffix = ".json" if is_tree_file(source) else ".py"
    return source.with_name(f"{source.stem}{cfg.output.suffix}{suffix}")


@click.group()
@click.version_option(version=__version__, prog_name="nativeexport")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """NativeExport: method registration compiler.

    Reads classes marked for export, validates their exported methods and
    generates registration functions for the native runtime.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path


@main.command("compile")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (default: SOURCE stem plus the configured suffix)",
)
@click.pass_context
def compile_command(ctx: click.Context, source: str, output: str | None) -> None:
    """Compile a Python module or a JSON/YAML syntax tree.

    SOURCE is a .py module with marked classes, or a .json/.yaml tree.
    Python input produces a rewritten module, tree input produces JSON.
    """
    cfg = _load(ctx)
    result = _compile(source, cfg)

    out_path = Path(output) if output else _default_output(Path(source), cfg)
    if cfg.output.create_dirs:
        out_path.parent.mkdir(parents=True, exist_ok=True)

    if result.output is not None:
        text = result.output
    else:
        text = json.dumps(result.to_dict(), indent=2) + "\n"
    out_path.write_text(text, encoding="utf-8")

    _print_diagnostics(result)
    methods = sum(r.export.method_count for r in result.results)
    console.print(
        f"[green]Wrote[/green] {out_path} "
        f"({len(result.results)} classes, {methods} exported methods)",
        highlight=False,
        soft_wrap=True,
    )

    if not result.ok:
        sys.exit(EXIT_DIAGNOSTICS)


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check(ctx: click.Context, source: str) -> None:
    """Report diagnostics without writing output.

    SOURCE is a .py module with marked classes, or a .json/.yaml tree.
    """
    cfg = _load(ctx)
    result = _compile(source, cfg)

    _print_diagnostics(result)

    table = Table(title="Check Summary", show_header=True)
    table.add_column("Class", style="cyan")
    table.add_column("Exported", justify="right")
    table.add_column("Registered", justify="right", style="green")
    table.add_column("Errors", justify="right", style="red")
    for r in result.results:
        table.add_row(
            r.class_name,
            str(r.export.method_count),
            str(len(r.registration.statements)),
            str(len(r.diagnostics)),
        )
    console.print(table)

    if result.ok:
        console.print("[green]No problems found.[/green]")
    else:
        console.print(f"[red]{len(result.diagnostics)} problems found.[/red]")
        sys.exit(EXIT_DIAGNOSTICS)


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def inspect(ctx: click.Context, source: str, output_format: str) -> None:
    """Show exported methods with their export arguments.

    SOURCE is a .py module with marked classes, or a .json/.yaml tree.
    """
    cfg = _load(ctx)
    result = _compile(source, cfg)

    if output_format == "json":
        data = [
            {
                "class_name": r.class_name,
                "methods": [
                    {
                        "name": o.method.name,
                        "status": o.status.value,
                        "optional_arg_count": o.method.args.optional_arg_count,
                        "rpc_mode": o.method.args.rpc_mode.value,
                        "diagnostics": [str(d) for d in o.diagnostics],
                    }
                    for o in r.outcomes
                ],
            }
            for r in result.results
        ]
        click.echo(json.dumps(data, indent=2))
        return

    for r in result.results:
        table = Table(title=f"{r.class_name}", show_header=True)
        table.add_column("Method", style="cyan")
        table.add_column("Status")
        table.add_column("Optional", justify="right")
        table.add_column("RPC Mode", style="green")
        for o in r.outcomes:
            status = "[green]accepted[/green]" if o.accepted else "[red]rejected[/red]"
            count = o.method.args.optional_arg_count
            table.add_row(
                o.method.name,
                status,
                "-" if count is None else str(count),
                o.method.args.rpc_mode.value,
            )
        console.print(table)
        console.print()


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Display current configuration."""
    cfg = _load(ctx)

    console.print(
        Panel(
            f"[bold blue]NativeExport v{__version__}[/bold blue]\n"
            f"Source: {ctx.obj.get('config_path') or 'environment / defaults'}",
            title="Configuration",
        )
    )

    for section, values in cfg.to_yaml_dict().items():
        if not isinstance(values, dict):
            console.print(f"[bold]{section}[/bold]: {values}")
            continue
        table = Table(title=section.capitalize(), show_header=False, box=None)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        for key, value in values.items():
            table.add_row(key, str(value))
        console.print(table)
        console.print()


if __name__ == "__main__":
    main()
