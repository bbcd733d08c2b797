# src/matchgate/utils/hash.py
"""BLAKE3 helpers for keyed, truncated identity digests."""

from __future__ import annotations

from blake3 import blake3

KEY_LENGTH_BYTES = 32
IDENTITY_KEY_CONTEXT = "matchgate 2024-06 identity pseudonym key"


def derive_key(secret: str, context: str = IDENTITY_KEY_CONTEXT) -> bytes:
    """Derive a 32-byte BLAKE3 key from an arbitrary-length secret string.

    The context string domain-separates keys derived from the same secret.
    """
    return blake3(secret.encode("utf-8"), derive_key_context=context).digest()


def keyed_hexdigest(key: bytes, data: bytes, length: int = KEY_LENGTH_BYTES) -> str:
    """Return the hex digest of ``data`` under ``key``, truncated to ``length`` bytes."""
    return blake3(data, key=key).hexdigest(length=length)
