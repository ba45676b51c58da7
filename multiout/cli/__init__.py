"""multiout CLI — Typer-based command-line interface.

Provides the ``multiout`` command for running the handler on a saved
payload, dry-running the routing decision, and validating a configuration
document.  All output uses Rich for formatted terminal display.
"""
