"""logtree CLI — Typer-based demonstrations of dispatch trees.

Provides the ``logtree`` command with subcommands that build small trees
and route sample records through them.  Summaries use Rich.
"""
