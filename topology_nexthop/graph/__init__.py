"""Graph helpers for topology snapshots."""

from .network_graph import GraphNode, TopologyGraph, generate_id

__all__ = ["GraphNode", "TopologyGraph", "generate_id"]
