# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Transport builder - HTTP client for the Sensu API.

Trust store: system default CAs plus an optional PEM file
($SENSU_TRUSTED_CA_FILE). No pinning, no client certificates and no
client-side deadline; the command timeout is enforced by the agent.
"""

import logging
import ssl
from pathlib import Path
from typing import Optional

import httpx

from runbook import __version__
from runbook.errors import TransportError


logger = logging.getLogger(__name__)


def load_trust_store(trusted_ca_file: Optional[str] = None) -> ssl.SSLContext:
    """
    Build a TLS client context from the system trust store and a CA file.

    A missing system trust store is logged and replaced by an empty one.

    Args:
        trusted_ca_file: Optional path to a PEM bundle to trust in addition

    Returns:
        ssl.SSLContext with hostname checking and certificate verification

    Raises:
        TransportError: If the CA file cannot be read or holds no certificates
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    try:
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)
    except ssl.SSLError as e:
        logger.error(f"failed to load system cert pool: {e}")

    if trusted_ca_file:
        path = Path(trusted_ca_file).expanduser()
        try:
            pem = path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise TransportError(f"failed to read CA file ({path}): {e}") from e
        try:
            context.load_verify_locations(cadata=pem)
        except (ssl.SSLError, ValueError) as e:
            raise TransportError(f"no usable certificates in CA file ({path}): {e}") from e
        logger.debug(f"added trusted CA file {path}")

    return context


def build_client(trusted_ca_file: Optional[str] = None) -> httpx.Client:
    """Return an httpx.Client that verifies TLS against load_trust_store()."""
    context = load_trust_store(trusted_ca_file)
    return httpx.Client(
        verify=context,
        timeout=None,
        headers={"User-Agent": f"sensu-runbook/{__version__}"},
    )
