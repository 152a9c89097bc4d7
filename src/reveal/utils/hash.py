"""Hashing helpers that turn network addresses into pseudonymous identities."""

from __future__ import annotations

import hashlib
import ipaddress

from reveal.core.settings import settings

IDENTITY_HASH_LENGTH = 64


def normalize_address(address: str) -> bytes:
    """Return the canonical 16-byte form of an IP address.

    IPv4 addresses map to their IPv4-mapped IPv6 form, so ``1.2.3.4`` and
    ``::ffff:1.2.3.4`` normalize identically. Strings that do not parse as an
    address, or that carry an IPv6 zone such as ``fe80::1%eth0``, are returned
    as their raw UTF-8 bytes.
    """
    try:
        parsed = ipaddress.ip_address(address)
    except ValueError:
        return address.encode("utf-8", errors="surrogatepass")

    if isinstance(parsed, ipaddress.IPv4Address):
        return ipaddress.IPv6Address(f"::ffff:{parsed}").packed
    if parsed.scope_id:
        return address.encode("utf-8", errors="surrogatepass")
    return parsed.packed


def hash_identity(address: str, salt: str) -> str:
    """Return the hex SHA-256 of the normalized address followed by the salt."""
    data = normalize_address(address) + salt.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


class IdentityHasher:
    """Bind the process-wide salt so callers only pass an address."""

    def __init__(self, salt: str) -> None:
        self._salt = salt

    def digest(self, address: str) -> str:
        """Return the identity hash for `address`."""
        return hash_identity(address, self._salt)


def get_identity_hasher() -> IdentityHasher:
    """Return a hasher using the configured salt."""
    return IdentityHasher(settings.identity_salt)
