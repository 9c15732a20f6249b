"""File-level extraction: source file in, JSON array of type definitions out.

Either every interface in the file is extracted and written, or nothing is:
output goes to a temporary file beside the destination and is renamed into
place only after the whole array has been produced.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from pathlib import Path

from tspi.config import ExtractConfig
from tspi.errors import OutputError
from tspi.ir.models import TypeDef
from tspi.ir.serialize import dumps
from tspi.ir.visitor import visit_declaration
from tspi.syntax.nodes import SyntaxProvider
from tspi.syntax.typescript import TypeScriptSyntaxProvider

logger = logging.getLogger(__name__)

STDOUT_PATH = "-"


def extract_type_defs(
    input_path: str | Path,
    provider: SyntaxProvider | None = None,
    config: ExtractConfig | None = None,
) -> list[TypeDef]:
    """Extract every top-level interface of *input_path*, in source order."""
    provider = provider or TypeScriptSyntaxProvider()
    config = config or ExtractConfig()

    declarations = provider.parse_file(input_path)
    type_defs = [visit_declaration(d, max_depth=config.max_depth) for d in declarations]
    logger.debug("Extracted %d type definition(s) from %s", len(type_defs), input_path)
    return type_defs


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_type_defs(
    type_defs: list[TypeDef], output_path: str | Path, indent: int | None = 2
) -> None:
    """Write *type_defs* as JSON, replacing *output_path* atomically."""
    text = dumps(type_defs, indent=indent) + "\n"

    if str(output_path) == STDOUT_PATH:
        sys.stdout.write(text)
        return

    output_path = Path(output_path)
    tmp_name = None
    replaced = False
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=output_path.parent,
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(text)
        # NamedTemporaryFile creates 0600; give the result the usual umask mode.
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, output_path)
        replaced = True
    except OSError as e:
        raise OutputError(f"Could not write {output_path}: {e.strerror or e}", output_path) from e
    finally:
        if not replaced and tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.debug("Wrote %d type definition(s) to %s", len(type_defs), output_path)


def extract(
    input_path: str | Path,
    output_path: str | Path,
    provider: SyntaxProvider | None = None,
    config: ExtractConfig | None = None,
) -> list[TypeDef]:
    """Extract the interfaces of *input_path* and write them to *output_path*.

    Raises ``ParseUnavailable``, ``UnsupportedSyntax`` or ``OutputError``;
    on any of them the output file is left untouched.
    """
    config = config or ExtractConfig()
    type_defs = extract_type_defs(input_path, provider=provider, config=config)
    write_type_defs(type_defs, output_path, indent=config.indent)
    return type_defs
