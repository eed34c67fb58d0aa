"""Command line interface for whispi."""
