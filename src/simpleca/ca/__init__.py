"""Certificate authority core.

Exports the per-tier parameter factory, the extension assembler and the
builder/signer.
"""

from simpleca.ca.builder import (
    build_and_sign,
    create_intermediate_ca,
    create_root_ca,
    create_server_cert,
    draft_root_ca,
    finalize_root_ca,
)
from simpleca.ca.extensions import ExtensionEntry, assemble_extensions
from simpleca.ca.params import (
    INTERMEDIATE_CA_SERIAL,
    ROOT_CA_SERIAL,
    CertParams,
    Entity,
    intermediate_ca_params,
    root_ca_params,
    server_cert_params,
)

__all__ = [
    "INTERMEDIATE_CA_SERIAL",
    "ROOT_CA_SERIAL",
    "CertParams",
    "Entity",
    "ExtensionEntry",
    "assemble_extensions",
    "build_and_sign",
    "create_intermediate_ca",
    "create_root_ca",
    "create_server_cert",
    "draft_root_ca",
    "finalize_root_ca",
    "intermediate_ca_params",
    "root_ca_params",
    "server_cert_params",
]
