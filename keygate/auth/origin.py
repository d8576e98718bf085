"""Client origin resolution and IP allowlist matching."""

import ipaddress
from collections.abc import Iterable, Mapping

from keygate.config import settings


def resolve_client_origin(
    client_host: str | None, headers: Mapping[str, str]
) -> str | None:
    """
    Resolve the network origin of a request.

    The connection address wins; otherwise the first entry of the
    forwarded-for header, then the real-ip header.

    Args:
        client_host: Address of the connecting peer, if known
        headers: Request headers (case-insensitive mapping)

    Returns:
        Origin address string, or None if nothing could be resolved
    """
    if client_host:
        return client_host

    forwarded_for = headers.get(settings.forwarded_for_header)
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = headers.get(settings.real_ip_header)
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return None


def is_origin_allowed(origin: str | None, allowlist: Iterable[str]) -> bool:
    """
    Check an origin against an allowlist of addresses and CIDR networks.

    An empty allowlist admits every origin.

    Args:
        origin: Client address
        allowlist: Allowed IP addresses or networks

    Returns:
        True if the origin is allowed
    """
    entries = [entry.strip() for entry in allowlist if entry and entry.strip()]
    if not entries:
        return True
    if not origin:
        return False

    try:
        address = ipaddress.ip_address(origin)
    except ValueError:
        return False
    # Dual-stack listeners report IPv4 peers as ::ffff:a.b.c.d
    if address.version == 6 and address.ipv4_mapped is not None:
        address = address.ipv4_mapped

    for entry in entries:
        try:
            network = ipaddress.ip_network(entry, strict=False)
        except ValueError:
            continue
        if address.version == network.version and address in network:
            return True
    return False
