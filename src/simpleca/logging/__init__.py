"""Logging subsystem for SimpleCA.

Public API::

    from simpleca.logging import configure_logging

    configure_logging(settings.logging)
"""

from simpleca.logging.setup import configure_logging

__all__ = ["configure_logging"]
