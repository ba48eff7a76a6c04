"""Tests for predicate-driven leaf-set search (required_leaf_types)."""

from __future__ import annotations

from mapchain.leafset import required_leaf_types
from mapchain.resolver import build_chain
from mapchain.trace import Trace, TraceKind


def accepts(*types):
    keys = {t.key for t in types}
    return lambda t: t.key in keys


def test_single_mapper_example(make, int_t, str_t):
    M2 = make("M2", [int_t], str_t)
    T = make("T", [str_t], str_t)

    assert required_leaf_types(T, [M2], accepts(int_t)) == [int_t]


def test_directly_suppliable_args_in_declared_order(make, int_t, str_t, float_t):
    T = make("T", [str_t, int_t, str_t], float_t)

    assert required_leaf_types(T, [], accepts(int_t, str_t)) == [str_t, int_t]


def test_no_args_needs_nothing(make, int_t):
    assert required_leaf_types(make("T", [], int_t), [], accepts()) == []


def test_unsatisfiable_returns_none(make, int_t, str_t, float_t):
    M2 = make("M2", [float_t], str_t)
    T = make("T", [str_t], str_t)

    assert required_leaf_types(T, [M2], accepts(int_t)) is None


def test_cyclic_producers_only_returns_none(make, int_t, str_t):
    a = make("A", [str_t], int_t)
    b = make("B", [int_t], str_t)
    T = make("T", [int_t], int_t)

    assert required_leaf_types(T, [a, b], accepts()) is None


def test_tries_next_producer_after_failure(make, int_t, str_t, float_t):
    from_float = make("S1", [float_t], str_t)
    from_int = make("S2", [int_t], str_t)
    T = make("T", [str_t], str_t)

    assert required_leaf_types(T, [from_float, from_int], accepts(int_t)) == [int_t]


def test_producer_reused_across_independent_branches(registry, make, int_t, str_t, float_t):
    blob = registry.descriptor(bytes)
    to_str = make("S", [int_t], str_t)
    to_float = make("F", [int_t], float_t)
    from_blob = make("I", [blob], int_t)
    T = make("T", [str_t, float_t], str_t)

    leaves = required_leaf_types(T, [to_str, to_float, from_blob], accepts(blob))

    assert leaves == [blob]


def test_leaf_set_guarantees_chain(registry, make, int_t, str_t, float_t):
    to_str = make("S", [int_t], str_t)
    to_float = make("F", [int_t], float_t)
    T = make("T", [str_t, float_t], str_t)
    library = [to_str, to_float]

    leaves = required_leaf_types(T, library, accepts(int_t))
    assert leaves == [int_t]

    chain = build_chain(T, library, 5, registry=registry)
    assert chain.funcs == (to_str, to_float, T)


def test_trace_reports_leaf_set(make, int_t, str_t):
    M2 = make("M2", [int_t], str_t)
    T = make("T", [str_t], str_t)
    trace = Trace()

    required_leaf_types(T, [M2], accepts(int_t), trace=trace)

    assert trace.of_kind(TraceKind.LEAF_MISSING)[0].type == "str"
    assert trace.of_kind(TraceKind.LEAF_SUPPLIED)[0].type == "int"
    found = trace.of_kind(TraceKind.LEAF_SET_FOUND)
    assert found and found[0].detail["types"] == ["int"]
