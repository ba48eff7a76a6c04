"""Chain commands implementation - resolve chains over a graph file."""

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..config import GraphDef, Settings, load_graph
from ..errors import MapChainError, UnresolvableTypeError
from ..resolver import build_chain, find_chain
from ..trace import Trace
from ..types import Tagged


def run_chain(
    graph_path: Path,
    target: str,
    have: list[str],
    settings: Settings,
    show_trace: bool = False,
    output_json: bool = False,
) -> int:
    """Resolve the chain for a named target.

    Args:
        graph_path: Path to the TOML graph file
        target: Name of a target (or mapper) in the graph
        have: Type keys the caller already has values for
        settings: Loaded resolver settings
        show_trace: Print the search trace
        output_json: Output result as JSON

    Returns:
        Exit code (0 = chain found, 1 = unresolvable or bad input)
    """
    console = Console(stderr=True)

    try:
        graph = load_graph(graph_path)
        values = _placeholder_values(graph, have)
    except MapChainError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    invocable = graph.find(target)
    if invocable is None:
        console.print(f"Error: target '{target}' not found", style="bold red")
        return 1

    trace = Trace(enabled=show_trace or settings.trace)
    try:
        chain = build_chain(
            invocable,
            graph.mappers,
            *values,
            registry=graph.registry,
            trace=trace,
            separator=settings.separator,
        )
    except UnresolvableTypeError as e:
        if output_json:
            print(json.dumps({"target": target, "error": str(e), "type": e.type_descriptor.name}, indent=2))
        else:
            console.print(f"No chain for {target}: {e}", style="bold red")
        if trace.enabled:
            _print_trace(trace, console)
        return 1

    if output_json:
        payload = {
            "target": target,
            "out": chain.out.name,
            "chain": [f.name for f in chain.funcs],
        }
        if trace.enabled:
            payload["trace"] = trace.to_list()
        print(json.dumps(payload, indent=2, default=str))
        return 0

    print(chain)
    if trace.enabled:
        _print_trace(trace, console)
    return 0


def run_find(
    graph_path: Path,
    out: str,
    have: list[str],
    settings: Settings,
    show_trace: bool = False,
    output_json: bool = False,
) -> int:
    """Find the first invocable producing ``out`` whose chain resolves.

    Mappers are scanned before targets.
    """
    console = Console(stderr=True)

    try:
        graph = load_graph(graph_path)
        wanted = graph.type(out)
        values = _placeholder_values(graph, have)
    except MapChainError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    library = [*graph.mappers, *graph.targets]
    trace = Trace(enabled=show_trace or settings.trace)
    chain = find_chain(
        lambda t: t.key == wanted.key,
        library,
        *values,
        registry=graph.registry,
        trace=trace,
        separator=settings.separator,
    )

    payload: dict = {"out": out, "chain": None if chain is None else [f.name for f in chain.funcs]}
    if output_json:
        if trace.enabled:
            payload["trace"] = trace.to_list()
        print(json.dumps(payload, indent=2, default=str))
    elif chain is None:
        console.print(f"No chain produces {wanted.name}", style="bold red")
    else:
        print(chain)

    if trace.enabled and not output_json:
        _print_trace(trace, console)
    return 0 if chain is not None else 1


def _placeholder_values(graph: GraphDef, keys: list[str]) -> list[Tagged]:
    """Stand-in values for each type the caller claims to have."""
    return [Tagged(graph.type(k), None) for k in keys]


def _print_trace(trace: Trace, console: Console) -> None:
    table = Table(title="Search trace", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Event", style="cyan")
    table.add_column("Func")
    table.add_column("Type", style="magenta")
    table.add_column("Detail", style="dim")

    for i, event in enumerate(trace, start=1):
        detail = ", ".join(f"{k}={v}" for k, v in event.detail.items())
        table.add_row(str(i), event.kind.value, event.func or "", event.type or "", detail)

    console.print(table)
