"""Tests for the tspi command line."""

import json
import tempfile
from pathlib import Path

from click.testing import CliRunner

from tspi import __version__
from tspi.cli import main


def test_extract_command():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "pair.ts"
        out = Path(tmp) / "pair.json"
        src.write_text("interface Pair<T> { first: T; second?: number; }\n")

        result = runner.invoke(main, ["extract", str(src), str(out)])

        assert result.exit_code == 0, result.output
        assert "Wrote 1 type definition(s)" in result.output
        data = json.loads(out.read_text())
    assert data[0]["name"] == "Pair"
    assert data[0]["fields"][1]["nullable"] is True


def test_extract_to_stdout():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "a.ts"
        src.write_text("interface A { tag: 'a' | undefined }\n")

        result = runner.invoke(main, ["extract", str(src), "-", "--indent", "0"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data[0]["fields"][0]["type"] == {
        "kind": "union",
        "types": [{"kind": "literal", "value": "a"}, {"kind": "literal"}],
    }


def test_extract_unsupported_syntax_exits_nonzero():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "bad.ts"
        out = Path(tmp) / "bad.json"
        src.write_text("interface Bad { run(): void }\n")

        result = runner.invoke(main, ["extract", str(src), str(out)])

        assert result.exit_code == 1
        assert "Expected property signature" in result.output
        assert not out.exists()


def test_extract_missing_input_exits_nonzero():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        result = runner.invoke(main, ["extract", str(Path(tmp) / "nope.ts"), str(Path(tmp) / "o.json")])

    assert result.exit_code == 1
    assert "Could not read" in result.output


def test_max_depth_option():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "deep.ts"
        src.write_text("interface Deep { grid: number[][] }\n")

        result = runner.invoke(main, ["extract", str(src), "-", "--max-depth", "2"])

    assert result.exit_code == 1
    assert "maximum depth of 2" in result.output


def test_max_depth_from_environment():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "deep.ts"
        src.write_text("interface Deep { grid: number[][] }\n")

        result = runner.invoke(main, ["extract", str(src), "-"], env={"TSPI_MAX_DEPTH": "2"})

    assert result.exit_code == 1


def test_show_command():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "user.ts"
        src.write_text("interface User { id: number; tags?: string[] }\n")

        result = runner.invoke(main, ["show", str(src)])

    assert result.exit_code == 0, result.output
    assert "User" in result.output
    assert "string[]" in result.output


def test_show_without_interfaces():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "empty.ts"
        src.write_text("const x = 1;\n")

        result = runner.invoke(main, ["show", str(src)])

    assert result.exit_code == 0
    assert "No interfaces found" in result.output


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
