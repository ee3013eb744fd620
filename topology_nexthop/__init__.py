"""Core package for resolving next hops over topology snapshots."""

from .config import NextHopSettings, TopologyAPISettings
from .exceptions import InvalidArgumentError, MetadataError, SnapshotError
from .graph import GraphNode, TopologyGraph
from .interfaces.metadata import AttributeLookup, NodeMetadataAccessor
from .interfaces.topology import (
    IPV4_DEFAULT_ROUTE,
    IPV6_DEFAULT_ROUTE,
    NeighborEntry,
    NextHopCandidate,
    Prefix,
    ResolvedNextHop,
    Route,
    RoutingTable,
)
from .interfaces.topology_api import TopologyAPIClient, load_snapshot_file
from .steps.next_hop_resolution import NextHopResolution, NextHopResolver, resolve_next_hop
from .steps.registry import StepRegistry, default_registry
from .steps.route_lookup import RouteTable
from .steps.traversal import NextHopTraversalExtension, NextHopTraversalResult, NextHopTraversalStep


__all__ = [
    "NextHopSettings",
    "TopologyAPISettings",
    "InvalidArgumentError",
    "MetadataError",
    "SnapshotError",
    "GraphNode",
    "TopologyGraph",
    "AttributeLookup",
    "NodeMetadataAccessor",
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
    "NextHopResolution",
    "NextHopResolver",
    "resolve_next_hop",
    "StepRegistry",
    "default_registry",
    "RouteTable",
    "NextHopTraversalExtension",
    "NextHopTraversalResult",
    "NextHopTraversalStep",
]
