"""Extraction settings, overridable from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 256
DEFAULT_INDENT = 2


@dataclass(frozen=True)
class ExtractConfig:
    """Settings for one extraction run.

    Parameters
    ----------
    max_depth : int
        Deepest type-expression nesting the visitor accepts before raising
        ``DepthExceeded``.
    indent : int
        Indentation of the JSON output.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    indent: int = DEFAULT_INDENT

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        if self.indent < 0:
            raise ValueError(f"indent must not be negative, got {self.indent}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExtractConfig:
        """Build a config from ``TSPI_MAX_DEPTH`` / ``TSPI_INDENT``."""
        env = os.environ if environ is None else environ
        return cls(
            max_depth=_int_setting(env, "TSPI_MAX_DEPTH", DEFAULT_MAX_DEPTH),
            indent=_int_setting(env, "TSPI_INDENT", DEFAULT_INDENT),
        )


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
