"""Routing data carried by topology nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
import ipaddress
from typing import Any, Dict, Optional, Tuple, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass(frozen=True)
class Prefix:
    """A network address plus mask length."""
    network: IPNetwork

    @classmethod
    def parse(cls, value: Union[str, IPNetwork]) -> "Prefix":
        """Build a prefix from CIDR text, masking off any host bits."""
        if isinstance(value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
            return cls(value)
        return cls(ipaddress.ip_network(str(value).strip(), strict=False))

    @classmethod
    def from_parts(cls, address: Union[str, IPAddress], mask_length: int) -> "Prefix":
        ip = ipaddress.ip_address(address)
        if not 0 <= mask_length <= ip.max_prefixlen:
            raise ValueError(
                f"Mask length {mask_length} outside [0, {ip.max_prefixlen}] for {ip}"
            )
        return cls(ipaddress.ip_network(f"{ip}/{mask_length}", strict=False))

    @property
    def address(self) -> IPAddress:
        return self.network.network_address

    @property
    def mask_length(self) -> int:
        return self.network.prefixlen

    @property
    def version(self) -> int:
        return self.network.version

    def contains(self, ip: IPAddress) -> bool:
        """Return True when ``ip`` falls inside this network.

        Addresses from the other IP family are never contained, including by
        the default route.
        """
        return ip.version == self.network.version and ip in self.network

    def specificity(self) -> int:
        return self.network.prefixlen

    def is_default_route(self) -> bool:
        return self.network.prefixlen == 0

    def __str__(self) -> str:
        return str(self.network)


IPV4_DEFAULT_ROUTE = Prefix(ipaddress.IPv4Network("0.0.0.0/0"))
IPV6_DEFAULT_ROUTE = Prefix(ipaddress.IPv6Network("::/0"))


def default_route_for(version: int) -> Prefix:
    """Return the default route prefix of the given IP family."""
    return IPV6_DEFAULT_ROUTE if version == 6 else IPV4_DEFAULT_ROUTE


@dataclass(frozen=True)
class NextHopCandidate:
    """One gateway/interface pair listed by a route.

    ``address`` is None for connected and point-to-point routes.
    """
    address: Optional[IPAddress]
    interface_index: int
    priority: int = 0

    @property
    def is_connected(self) -> bool:
        return self.address is None


@dataclass(frozen=True)
class Route:
    """A prefix and the ordered next-hop candidates that serve it."""
    prefix: Prefix
    candidates: Tuple[NextHopCandidate, ...]
    protocol: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.candidates:
            raise ValueError(f"Route {self.prefix} has no next-hop candidates")


@dataclass(frozen=True)
class RoutingTable:
    id: int
    routes: Tuple[Route, ...] = ()
    source: Optional[IPAddress] = None
    type: Optional[str] = None


@dataclass(frozen=True)
class NeighborEntry:
    """An entry of a node's neighbor (ARP/NDP) cache."""
    address: IPAddress
    interface_index: int
    link_address: str
    state: Tuple[str, ...] = field(default_factory=tuple)
    vlan: Optional[int] = None


@dataclass(frozen=True)
class ResolvedNextHop:
    """The address and outgoing interface selected for a destination."""
    address: IPAddress
    interface_index: int

    def as_dict(self) -> Dict[str, Any]:
        return {"address": str(self.address), "interface_index": self.interface_index}
