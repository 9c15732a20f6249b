"""Canonical IR for extracted interface types.

The visitors in ``tspi.ir.visitor`` map the tagged syntax view onto the
models in ``tspi.ir.models``; ``tspi.ir.serialize`` writes them as JSON.
"""
