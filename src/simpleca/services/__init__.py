"""Service layer.

Orchestrates the CA core, the key-material provider and the certificate
store for the CLI commands.
"""

from simpleca.services.hierarchy import (
    IssuedServerCert,
    IssuerContext,
    generate_server_cert,
    load_ca,
)

__all__ = [
    "IssuedServerCert",
    "IssuerContext",
    "generate_server_cert",
    "load_ca",
]
