"""Data model and data sources for topology next-hop resolution."""

from .metadata import AttributeLookup, NodeMetadataAccessor, decode_neighbors, decode_routing_tables
from .topology import (
    IPV4_DEFAULT_ROUTE,
    IPV6_DEFAULT_ROUTE,
    NeighborEntry,
    NextHopCandidate,
    Prefix,
    ResolvedNextHop,
    Route,
    RoutingTable,
)
from .topology_api import TopologyAPIClient, load_snapshot_file

__all__ = [
    "AttributeLookup",
    "NodeMetadataAccessor",
    "decode_neighbors",
    "decode_routing_tables",
    "IPV4_DEFAULT_ROUTE",
    "IPV6_DEFAULT_ROUTE",
    "NeighborEntry",
    "NextHopCandidate",
    "Prefix",
    "ResolvedNextHop",
    "Route",
    "RoutingTable",
    "TopologyAPIClient",
    "load_snapshot_file",
]
