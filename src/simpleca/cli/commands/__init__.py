"""Subcommand handlers dispatched by :mod:`simpleca.cli.main`."""
