"""Enumerated types for the SimpleCA core.

:class:`CertTier` inherits from ``StrEnum`` so its ``.value`` is a plain
string usable in log messages and CLI output.
"""

from __future__ import annotations

from enum import StrEnum


class CertTier(StrEnum):
    ROOT = "root"
    INTERMEDIATE = "intermediate"
    SERVER = "server"
