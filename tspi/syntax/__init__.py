"""Syntax providers: turn source files into the tagged node view."""
