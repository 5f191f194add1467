"""Command-line interface for dirflatten."""
