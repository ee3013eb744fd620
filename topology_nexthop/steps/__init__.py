"""Step implementations for topology next-hop resolution."""

from .next_hop_resolution import NextHopResolution, NextHopResolver, resolve_next_hop
from .registry import StepRegistry, default_registry
from .route_lookup import RouteTable
from .traversal import (
    NextHopTraversalExtension,
    NextHopTraversalResult,
    NextHopTraversalStep,
    TraversalExtension,
    TraversalStep,
)

__all__ = [
    "NextHopResolution",
    "NextHopResolver",
    "resolve_next_hop",
    "StepRegistry",
    "default_registry",
    "RouteTable",
    "NextHopTraversalExtension",
    "NextHopTraversalResult",
    "NextHopTraversalStep",
    "TraversalExtension",
    "TraversalStep",
]
