"""tspi — extracts interface type information into a language-agnostic IR."""

__version__ = "0.1.0"
