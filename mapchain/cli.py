"""CLI entrypoint for mapchain."""

import sys
from pathlib import Path

import click

from . import __version__
from .config import load_settings
from .errors import ConfigError

CONFIG_NAMES = ("mapchain.toml", "pyproject.toml")


def _auto_detect_config(start: Path) -> Path | None:
    """Find a mapchain.toml or pyproject.toml by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        for name in CONFIG_NAMES:
            candidate = p / name
            if candidate.is_file():
                return candidate
    return None


@click.group()
@click.version_option(__version__, prog_name="mapchain")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (defaults to nearest mapchain.toml or pyproject.toml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """mapchain - Resolve conversion chains between typed mappers.

    Inspect which mappers a target needs and which leaf types a host
    must supply, using a TOML graph file of types and invocables.
    """
    ctx.ensure_object(dict)
    if config_path is None:
        config_path = _auto_detect_config(Path.cwd())

    try:
        ctx.obj["settings"] = load_settings(config_path)
    except ConfigError as e:
        raise click.ClickException(f"Invalid settings in {config_path}: {e}")


@cli.command()
@click.argument("graph", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--target", "-t", required=True, help="Name of the target invocable")
@click.option(
    "--have",
    multiple=True,
    metavar="TYPE_KEY",
    help="Type key the caller already has a value for (repeatable)",
)
@click.option("--trace", "show_trace", is_flag=True, help="Print the search trace")
@click.option("--json", "output_json", is_flag=True, help="Output result as JSON")
@click.pass_context
def chain(
    ctx: click.Context,
    graph: Path,
    target: str,
    have: tuple[str, ...],
    show_trace: bool,
    output_json: bool,
) -> None:
    """Resolve the mapper chain for a target.

    Examples:

        mapchain chain graph.toml --target render

        mapchain chain graph.toml -t render --have str --trace
    """
    from .commands.chain_cmd import run_chain

    exit_code = run_chain(
        graph,
        target,
        list(have),
        ctx.obj["settings"],
        show_trace=show_trace,
        output_json=output_json,
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("graph", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", "out_key", required=True, metavar="TYPE_KEY", help="Wanted output type key")
@click.option(
    "--have",
    multiple=True,
    metavar="TYPE_KEY",
    help="Type key the caller already has a value for (repeatable)",
)
@click.option("--trace", "show_trace", is_flag=True, help="Print the search trace")
@click.option("--json", "output_json", is_flag=True, help="Output result as JSON")
@click.pass_context
def find(
    ctx: click.Context,
    graph: Path,
    out_key: str,
    have: tuple[str, ...],
    show_trace: bool,
    output_json: bool,
) -> None:
    """Find the first invocable producing a type whose chain resolves.

    Examples:

        mapchain find graph.toml --out int --have str
    """
    from .commands.chain_cmd import run_find

    exit_code = run_find(
        graph,
        out_key,
        list(have),
        ctx.obj["settings"],
        show_trace=show_trace,
        output_json=output_json,
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("graph", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--target", "-t", required=True, help="Name of the target invocable")
@click.option(
    "--supply",
    multiple=True,
    metavar="TYPE_KEY",
    help="Type key the caller can produce directly (repeatable)",
)
@click.option("--json", "output_json", is_flag=True, help="Output result as JSON")
def leaves(
    graph: Path,
    target: str,
    supply: tuple[str, ...],
    output_json: bool,
) -> None:
    """List the leaf types a caller must supply for a target.

    Examples:

        mapchain leaves graph.toml --target render --supply int
    """
    from .commands.leaves_cmd import run_leaves

    exit_code = run_leaves(graph, target, list(supply), output_json=output_json)
    sys.exit(exit_code)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
