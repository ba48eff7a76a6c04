"""Tests for the mapchain CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from mapchain import __version__
from mapchain.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    path = tmp_path / "mapchain.toml"
    path.write_text("", encoding="utf-8")
    return path


def invoke(runner: CliRunner, settings_file: Path, *args: str):
    return runner.invoke(cli, ["--config", str(settings_file), *args])


def test_version(runner: CliRunner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


class TestChainCommand:
    def test_prints_resolved_chain(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "chain", str(graph_file), "--target", "render", "--have", "str")

        assert result.exit_code == 0
        assert (
            "parse(String) -> Int => widen(Int) -> Float => render(Float, String) -> void"
            in result.stdout
        )

    def test_separator_from_settings(self, runner, tmp_path, graph_file):
        settings = tmp_path / "custom.toml"
        settings.write_text('separator = " | "\n', encoding="utf-8")

        result = invoke(runner, settings, "chain", str(graph_file), "-t", "render", "--have", "str")

        assert result.exit_code == 0
        assert "parse(String) -> Int | widen(Int) -> Float" in result.stdout

    def test_json_output_with_trace(self, runner, settings_file, graph_file):
        result = invoke(
            runner,
            settings_file,
            "chain",
            str(graph_file),
            "-t",
            "render",
            "--have",
            "str",
            "--trace",
            "--json",
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["chain"] == ["parse", "widen", "render"]
        assert payload["out"] == "void"
        assert payload["trace"][0]["kind"] == "chain_start"
        assert payload["trace"][-1]["kind"] == "chain_built"

    def test_unresolvable_exits_nonzero(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "chain", str(graph_file), "-t", "render", "--json")

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["type"] == "Float"

    def test_unknown_target(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "chain", str(graph_file), "-t", "missing")

        assert result.exit_code == 1

    def test_unknown_have_key(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "chain", str(graph_file), "-t", "render", "--have", "nope")

        assert result.exit_code == 1


class TestFindCommand:
    def test_finds_first_producer(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "find", str(graph_file), "--out", "float", "--have", "str")

        assert result.exit_code == 0
        assert "parse(String) -> Int => widen(Int) -> Float" in result.stdout

    def test_no_producer_resolves(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "find", str(graph_file), "--out", "float", "--json")

        assert result.exit_code == 1
        assert json.loads(result.stdout) == {"out": "float", "chain": None}

    def test_trace_flag(self, runner, settings_file, graph_file):
        result = invoke(
            runner,
            settings_file,
            "find",
            str(graph_file),
            "--out",
            "float",
            "--have",
            "str",
            "--trace",
            "--json",
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["chain"] == ["parse", "widen"]
        assert payload["trace"][0]["kind"] == "chain_start"
        assert payload["trace"][-1]["kind"] == "chain_built"

    def test_trace_enabled_from_settings(self, runner, tmp_path, graph_file):
        settings = tmp_path / "custom.toml"
        settings.write_text("trace = true\n", encoding="utf-8")

        result = invoke(runner, settings, "find", str(graph_file), "--out", "float", "--json")

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["chain"] is None
        assert any(e["kind"] == "unresolvable" for e in payload["trace"])


class TestLeavesCommand:
    def test_lists_leaf_types(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "leaves", str(graph_file), "-t", "render", "--supply", "str")

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["String"]

    def test_json_output(self, runner, settings_file, graph_file):
        result = invoke(
            runner,
            settings_file,
            "leaves",
            str(graph_file),
            "-t",
            "render",
            "--supply",
            "int",
            "--supply",
            "str",
            "--json",
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"target": "render", "leaves": ["String", "Int"]}

    def test_no_leaf_set(self, runner, settings_file, graph_file):
        result = invoke(runner, settings_file, "leaves", str(graph_file), "-t", "upload", "--json")

        assert result.exit_code == 1
        assert json.loads(result.stdout) == {"target": "upload", "leaves": None}
