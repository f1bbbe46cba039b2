"""Server certificate subcommand."""

from __future__ import annotations

import logging

from simpleca.core.name import Name
from simpleca.services.hierarchy import generate_server_cert

log = logging.getLogger(__name__)


def run_server(config, store, args) -> None:
    """Issue a server certificate for ``args.common_name``."""
    name = Name(
        country=args.country,
        province=args.state,
        locality=args.locality,
        org=args.org,
        org_unit=args.org_unit,
        common_name=args.common_name,
    )
    issued = generate_server_cert(
        store,
        config.settings,
        name,
        args.sub_alt_names,
        verbose=args.verbose,
    )
    log.info(
        "Issued %s: cert=%s, key=%s",
        args.common_name,
        issued.cert_path,
        issued.key_path,
    )
