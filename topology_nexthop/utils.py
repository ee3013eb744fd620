"""Small parsing helpers shared by steps and the CLI."""

from __future__ import annotations

import ipaddress
from typing import Any, Union

from .exceptions import InvalidArgumentError

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def parse_ip_literal(candidate: Any, role: str = "destination") -> IPAddress:
    """Return ``candidate`` as an IP address object or raise InvalidArgumentError.

    Only bare address literals are accepted; a CIDR suffix is rejected so that
    ``10.0.0.0/8`` is never silently treated as a host address.
    """
    if isinstance(candidate, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return candidate
    if not isinstance(candidate, str):
        raise InvalidArgumentError(
            f"Invalid {role} IP {candidate!r}: expected a string literal"
        )
    text = candidate.strip()
    if not text:
        raise InvalidArgumentError(f"Missing {role} IP address")
    try:
        return ipaddress.ip_address(text)
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid {role} IP '{candidate}': {exc}") from exc
