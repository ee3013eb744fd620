"""Typed access to the routing attributes stored on topology nodes."""

from __future__ import annotations

from dataclasses import dataclass, replace
import ipaddress
from typing import Any, Generic, Iterable, Mapping, Optional, Tuple, TypeVar

from ..config import NextHopSettings
from ..exceptions import MetadataError
from .topology import (
    IPAddress,
    NeighborEntry,
    NextHopCandidate,
    Prefix,
    Route,
    RoutingTable,
    default_route_for,
)

T = TypeVar("T")

PRESENT = "present"
ABSENT = "absent"
MALFORMED = "malformed"


@dataclass(frozen=True)
class AttributeLookup(Generic[T]):
    """Outcome of reading one node attribute."""
    status: str
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.status == PRESENT


def _require_sequence(key: str, value: Any) -> Iterable[Any]:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise MetadataError(key, f"expected a list, got {type(value).__name__}")
    return value


def _as_int(key: str, value: Any, field_name: str, default: Optional[int] = None) -> int:
    if value is None:
        if default is None:
            raise MetadataError(key, f"missing {field_name}")
        return default
    if isinstance(value, bool):
        raise MetadataError(key, f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise MetadataError(key, f"{field_name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MetadataError(key, f"{field_name} must be an integer, got {value!r}") from exc


def _as_ip(key: str, value: Any, field_name: str) -> Optional[IPAddress]:
    if value in (None, ""):
        return None
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    try:
        return ipaddress.ip_address(str(value).strip())
    except ValueError as exc:
        raise MetadataError(key, f"invalid {field_name} {value!r}") from exc


def _decode_candidate(key: str, raw: Any) -> NextHopCandidate:
    if isinstance(raw, NextHopCandidate):
        return raw
    if not isinstance(raw, Mapping):
        raise MetadataError(key, f"next hop must be an object, got {type(raw).__name__}")
    return NextHopCandidate(
        address=_as_ip(key, raw.get("IP"), "next hop IP"),
        interface_index=_as_int(key, raw.get("IfIndex"), "IfIndex", default=0),
        priority=_as_int(key, raw.get("Priority"), "Priority", default=0),
    )


def _decode_route(key: str, raw: Any) -> Route:
    if isinstance(raw, Route):
        if not isinstance(raw.prefix, Prefix):
            raise MetadataError(key, f"route prefix must be a Prefix, got {type(raw.prefix).__name__}")
        return replace(
            raw,
            candidates=tuple(_decode_candidate(key, item) for item in _require_sequence(key, raw.candidates)),
        )
    if not isinstance(raw, Mapping):
        raise MetadataError(key, f"route must be an object, got {type(raw).__name__}")

    candidates = tuple(
        _decode_candidate(key, item)
        for item in _require_sequence(key, raw.get("NextHops") or [])
    )
    if not candidates:
        raise MetadataError(key, f"route {raw.get('Prefix')!r} has no next hops")

    raw_prefix = raw.get("Prefix")
    if raw_prefix in (None, ""):
        # Routes without a prefix are the default route of their gateway family.
        gateway = next((c.address for c in candidates if c.address is not None), None)
        prefix = default_route_for(gateway.version if gateway else 4)
    else:
        try:
            prefix = Prefix.parse(raw_prefix)
        except ValueError as exc:
            raise MetadataError(key, f"invalid prefix {raw_prefix!r}") from exc

    protocol = raw.get("Protocol")
    return Route(
        prefix=prefix,
        candidates=candidates,
        protocol=_as_int(key, protocol, "Protocol") if protocol is not None else None,
    )


def _decode_routing_table(key: str, raw: Any) -> RoutingTable:
    if isinstance(raw, RoutingTable):
        return replace(
            raw,
            routes=tuple(_decode_route(key, item) for item in _require_sequence(key, raw.routes)),
        )
    if not isinstance(raw, Mapping):
        raise MetadataError(key, f"routing table must be an object, got {type(raw).__name__}")
    routes = tuple(
        _decode_route(key, item) for item in _require_sequence(key, raw.get("Routes") or [])
    )
    table_type = raw.get("Type")
    return RoutingTable(
        id=_as_int(key, raw.get("ID"), "ID", default=0),
        routes=routes,
        source=_as_ip(key, raw.get("Src"), "source IP"),
        type=str(table_type) if table_type is not None else None,
    )


def _decode_neighbor(key: str, raw: Any) -> NeighborEntry:
    if isinstance(raw, NeighborEntry):
        return raw
    if not isinstance(raw, Mapping):
        raise MetadataError(key, f"neighbor must be an object, got {type(raw).__name__}")
    address = _as_ip(key, raw.get("IP"), "neighbor IP")
    if address is None:
        raise MetadataError(key, "neighbor without IP")
    vlan = raw.get("Vlan")
    return NeighborEntry(
        address=address,
        interface_index=_as_int(key, raw.get("IfIndex"), "IfIndex", default=0),
        link_address=str(raw.get("MAC") or ""),
        state=tuple(str(item) for item in raw.get("State") or ()),
        vlan=_as_int(key, vlan, "Vlan") if vlan is not None else None,
    )


def decode_routing_tables(value: Any, key: str = "RoutingTables") -> Tuple[RoutingTable, ...]:
    """Decode a routing tables attribute, raising MetadataError when malformed."""
    return tuple(_decode_routing_table(key, item) for item in _require_sequence(key, value))


def decode_neighbors(value: Any, key: str = "Neighbors") -> Tuple[NeighborEntry, ...]:
    """Decode a neighbors attribute, raising MetadataError when malformed."""
    return tuple(_decode_neighbor(key, item) for item in _require_sequence(key, value))


class NodeMetadataAccessor:
    """Read routing attributes from a node's metadata mapping.

    Missing and undecodable attributes are reported through the lookup status
    instead of being replaced with empty defaults.
    """

    def __init__(self, settings: Optional[NextHopSettings] = None) -> None:
        self._settings = settings or NextHopSettings()

    def routing_tables(self, metadata: Optional[Mapping[str, Any]]) -> AttributeLookup[Tuple[RoutingTable, ...]]:
        return self._lookup(metadata, self._settings.routing_tables_key, decode_routing_tables)

    def neighbors(self, metadata: Optional[Mapping[str, Any]]) -> AttributeLookup[Tuple[NeighborEntry, ...]]:
        return self._lookup(metadata, self._settings.neighbors_key, decode_neighbors)

    @staticmethod
    def _lookup(metadata, key, decoder) -> AttributeLookup:
        if not metadata or metadata.get(key) is None:
            return AttributeLookup(status=ABSENT)
        try:
            return AttributeLookup(status=PRESENT, value=decoder(metadata[key], key))
        except MetadataError as exc:
            return AttributeLookup(status=MALFORMED, error=str(exc))
