"""Leaves command implementation - required leaf types for a target."""

import json
from pathlib import Path

from rich.console import Console

from ..config import load_graph
from ..errors import MapChainError
from ..leafset import required_leaf_types


def run_leaves(
    graph_path: Path,
    target: str,
    supply: list[str],
    output_json: bool = False,
) -> int:
    """Print the leaf types a caller must supply for ``target``.

    Args:
        graph_path: Path to the TOML graph file
        target: Name of a target (or mapper) in the graph
        supply: Type keys the caller is able to produce directly
        output_json: Output result as JSON

    Returns:
        Exit code (0 = leaf set found, 1 = none exists or bad input)
    """
    console = Console(stderr=True)

    try:
        graph = load_graph(graph_path)
        supplied = {graph.type(k).key for k in supply}
    except MapChainError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    invocable = graph.find(target)
    if invocable is None:
        console.print(f"Error: target '{target}' not found", style="bold red")
        return 1

    leaves = required_leaf_types(invocable, graph.mappers, lambda t: t.key in supplied)

    if output_json:
        names = None if leaves is None else [t.name for t in leaves]
        print(json.dumps({"target": target, "leaves": names}, indent=2))
        return 0 if leaves is not None else 1

    if leaves is None:
        console.print(f"No leaf set satisfies {target}", style="bold red")
        return 1

    if not leaves:
        console.print(f"{target} needs no inputs", style="dim")
    for t in leaves:
        print(t.name)
    return 0
