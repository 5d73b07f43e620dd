"""High-level operations backing the CLI commands."""
