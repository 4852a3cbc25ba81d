"""Outbound request identification.

Every request carries a fixed, versioned User-Agent naming the library, the
host-supplied contact, and the HTTP transport, as the puzzle site asks of
automated tools.
"""

from __future__ import annotations

import requests


LIBRARY_NAME = "aocinput"
LIBRARY_VERSION = "0.3.0"
PROJECT_URL = "https://pypi.org/project/aocinput/"
PERSISTENCE_DISABLED_NOTE = "(persistent cache disabled)"


def build_identity(contact: str, *, persistent_cache: bool) -> str:
    """Return the User-Agent string for one client configuration."""

    identity = (
        f"{LIBRARY_NAME}/{LIBRARY_VERSION} (automated; +{PROJECT_URL}; +{contact.strip()}) "
        f"requests/{requests.__version__}"
    )
    if not persistent_cache:
        identity = f"{identity} {PERSISTENCE_DISABLED_NOTE}"
    return identity
