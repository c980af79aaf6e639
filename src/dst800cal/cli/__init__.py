"""Command line interface for dst800cal."""
