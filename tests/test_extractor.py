"""Tests for file-level extraction and all-or-nothing output."""

import json
import os
import stat
import tempfile
from pathlib import Path

import pytest

from tspi.config import ExtractConfig
from tspi.errors import DepthExceeded, OutputError, ParseUnavailable, UnsupportedSyntax
from tspi.extractor import extract, extract_type_defs
from tspi.ir.models import PrimitiveType
from tspi.syntax.nodes import DeclarationNode, MemberNode, MemberTag, NameNode, NameTag, TypeNode, TypeTag

SOURCE = """
export interface Pair<T> {
  first: T;
  second?: number;
}

interface Response {
  status: "ok" | "error";
  items: Array<Pair<string>>;
}
"""


def test_extract_writes_json():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "models.ts"
        out = Path(tmp) / "models.json"
        src.write_text(SOURCE)

        type_defs = extract(src, out)
        data = json.loads(out.read_text())

    assert [d.name for d in type_defs] == ["Pair", "Response"]
    assert data[0] == {
        "name": "Pair",
        "typeParams": ["T"],
        "fields": [
            {"name": "first", "type": {"kind": "primitive", "name": "T"}, "nullable": False},
            {"name": "second", "type": {"kind": "primitive", "name": "number"}, "nullable": True},
        ],
    }
    assert data[1]["fields"][0]["type"] == {
        "kind": "union",
        "types": [{"kind": "literal", "value": "ok"}, {"kind": "literal", "value": "error"}],
    }
    assert data[1]["fields"][1]["type"] == {
        "kind": "generic",
        "name": "Array",
        "typeParams": [
            {
                "kind": "generic",
                "name": "Pair",
                "typeParams": [{"kind": "primitive", "name": "string"}],
            }
        ],
    }


def test_extract_uses_configured_indent():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "a.ts"
        out = Path(tmp) / "a.json"
        src.write_text("interface A { x: string }")
        extract(src, out, config=ExtractConfig(indent=4))
        text = out.read_text()

    assert text.startswith('[\n    {\n        "name": "A"')
    assert text.endswith("\n")


def test_file_without_interfaces_gives_empty_array():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "none.ts"
        out = Path(tmp) / "none.json"
        src.write_text("export const x = 1;\n")
        extract(src, out)
        assert json.loads(out.read_text()) == []


def test_unsupported_member_writes_nothing():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "bad.ts"
        out = Path(tmp) / "bad.json"
        src.write_text("interface Good { a: string }\ninterface Bad { run(): void }\n")

        with pytest.raises(UnsupportedSyntax):
            extract(src, out)
        assert not out.exists()


def test_failure_keeps_previous_output():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "bad.ts"
        out = Path(tmp) / "out.json"
        src.write_text("interface Bad { [k: string]: number }\n")
        out.write_text("previous")

        with pytest.raises(UnsupportedSyntax):
            extract(src, out)
        assert out.read_text() == "previous"
        assert sorted(p.name for p in Path(tmp).iterdir()) == ["bad.ts", "out.json"]


def test_missing_input():
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(ParseUnavailable):
            extract(Path(tmp) / "nope.ts", Path(tmp) / "out.json")


def test_unwritable_output():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "a.ts"
        src.write_text("interface A { x: string }")
        out = Path(tmp) / "no-such-dir" / "a.json"

        with pytest.raises(OutputError) as exc_info:
            extract(src, out)
    assert isinstance(exc_info.value.__cause__, OSError)


def test_invalid_utf8_input_is_parse_unavailable():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "latin1.ts"
        out = Path(tmp) / "out.json"
        src.write_bytes(b'interface A { x: "caf\xe9" }')

        with pytest.raises(ParseUnavailable, match="not valid UTF-8"):
            extract(src, out)
        assert not out.exists()


def test_lone_surrogate_is_written_as_escape():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "a.ts"
        out = Path(tmp) / "a.json"
        src.write_text('interface A { x: "\\uD800" }')

        extract(src, out)
        text = out.read_text(encoding="utf-8")
        assert sorted(p.name for p in Path(tmp).iterdir()) == ["a.json", "a.ts"]

    assert "\\ud800" in text
    assert json.loads(text)[0]["fields"][0]["type"] == {"kind": "literal", "value": "\ud800"}


def test_failed_rename_leaves_no_temp_file(monkeypatch):
    def fail_replace(src, dst):
        raise RuntimeError("interrupted")

    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "a.ts"
        out = Path(tmp) / "a.json"
        src.write_text("interface A { x: string }")
        monkeypatch.setattr(os, "replace", fail_replace)

        with pytest.raises(RuntimeError):
            extract(src, out)
        assert sorted(p.name for p in Path(tmp).iterdir()) == ["a.ts"]


def test_overflowing_number_writes_nothing():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "a.ts"
        out = Path(tmp) / "a.json"
        src.write_text("interface A { x: 1e400 }")

        with pytest.raises(UnsupportedSyntax, match="out of range"):
            extract(src, out)
        assert not out.exists()


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_output_mode_follows_umask():
    previous = os.umask(0o022)
    try:
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "a.ts"
            out = Path(tmp) / "a.json"
            src.write_text("interface A { x: string }")
            extract(src, out)
            mode = stat.S_IMODE(out.stat().st_mode)
    finally:
        os.umask(previous)

    assert mode == 0o644


def test_depth_limit_from_config():
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "deep.ts"
        src.write_text("interface Deep { grid: number[][][] }")

        assert extract_type_defs(src, config=ExtractConfig(max_depth=4))
        with pytest.raises(DepthExceeded):
            extract_type_defs(src, config=ExtractConfig(max_depth=3))


class StaticProvider:
    """A provider that hands back prepared declarations."""

    def __init__(self, declarations):
        self.declarations = declarations
        self.paths = []

    def parse_file(self, path):
        self.paths.append(path)
        return self.declarations


def test_custom_provider():
    member = MemberNode(
        MemberTag.PROPERTY,
        "property_signature",
        name=NameNode(NameTag.IDENTIFIER, "id"),
        type=TypeNode(TypeTag.KEYWORD, "predefined_type", text="string"),
    )
    provider = StaticProvider([DeclarationNode("First", members=(member,)), DeclarationNode("Second")])

    type_defs = extract_type_defs("virtual.ts", provider=provider)

    assert provider.paths == ["virtual.ts"]
    assert [d.name for d in type_defs] == ["First", "Second"]
    assert type_defs[0].fields[0].type == PrimitiveType("string")
    assert type_defs[1].fields == ()
