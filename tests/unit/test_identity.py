"""Unit tests for outbound User-Agent construction."""

import requests

from aocinput.identity import LIBRARY_VERSION, build_identity


def test_identity_names_library_contact_and_transport() -> None:
    """The User-Agent should be fixed, versioned, and carry the contact."""

    identity = build_identity(" me@example.com ", persistent_cache=True)

    assert identity.startswith(f"aocinput/{LIBRARY_VERSION} (automated; ")
    assert "+me@example.com)" in identity
    assert identity.endswith(f"requests/{requests.__version__}")


def test_identity_flags_disabled_persistence() -> None:
    """Disabling persistence should be visible to the server operator."""

    enabled = build_identity("me@example.com", persistent_cache=True)
    disabled = build_identity("me@example.com", persistent_cache=False)

    assert disabled == f"{enabled} (persistent cache disabled)"
