"""CA management subcommand."""

from __future__ import annotations

import logging

from simpleca.services.hierarchy import load_ca

log = logging.getLogger(__name__)


def run_ca(config, store, args) -> None:
    """Create missing CA tiers, or all of them with ``--reset``."""
    issuer = load_ca(
        store,
        config.settings,
        reset=args.reset,
        verbose=args.verbose,
    )
    log.info(
        "CA ready: intermediate=%s (serial=%d), config_dir=%s",
        issuer.cert.subject.rfc4514_string(),
        issuer.cert.serial_number,
        store.config_dir,
    )
