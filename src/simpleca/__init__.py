"""SimpleCA: a local root / intermediate / server PKI for development."""

__version__ = "0.1.0"
