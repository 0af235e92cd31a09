"""CLI command modules for workpool."""
