"""Command-line interface for SimpleCA."""
