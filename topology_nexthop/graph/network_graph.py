"""In-memory topology graph carrying per-node metadata."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

import networkx as nx

from ..exceptions import SnapshotError


@dataclass(frozen=True)
class GraphNode:
    """A node identifier and a read-only view of its metadata."""
    id: str
    metadata: Mapping[str, Any]


def generate_id() -> str:
    return str(uuid.uuid4())


class TopologyGraph:
    """Directed multigraph of topology nodes keyed by identifier."""

    def __init__(self) -> None:
        self.graph = nx.MultiDiGraph()

    def add_node(self, metadata: Optional[Mapping[str, Any]] = None, node_id: Optional[str] = None) -> GraphNode:
        node_id = node_id or generate_id()
        if node_id in self.graph:
            raise ValueError(f"Node '{node_id}' already exists")
        self.graph.add_node(node_id, metadata=dict(metadata or {}))
        return self.get_node(node_id)

    def add_edge(
        self,
        parent: str,
        child: str,
        metadata: Optional[Mapping[str, Any]] = None,
        edge_id: Optional[str] = None,
    ) -> str:
        for endpoint in (parent, child):
            if endpoint not in self.graph:
                raise KeyError(f"Unknown node '{endpoint}'")
        edge_id = edge_id or generate_id()
        self.graph.add_edge(parent, child, key=edge_id, metadata=dict(metadata or {}))
        return edge_id

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        if node_id not in self.graph:
            return None
        return GraphNode(id=node_id, metadata=MappingProxyType(self.graph.nodes[node_id]["metadata"]))

    def nodes(self) -> Iterator[GraphNode]:
        for node_id, data in self.graph.nodes(data=True):
            yield GraphNode(id=node_id, metadata=MappingProxyType(data["metadata"]))

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def serialize(self) -> Dict[str, List[Dict[str, Any]]]:
        """Return the graph in topology snapshot form."""
        return {
            "Nodes": [
                {"ID": node_id, "Metadata": dict(data["metadata"])}
                for node_id, data in self.graph.nodes(data=True)
            ],
            "Edges": [
                {"ID": key, "Parent": parent, "Child": child, "Metadata": dict(data["metadata"])}
                for parent, child, key, data in self.graph.edges(keys=True, data=True)
            ],
        }

    @classmethod
    def from_snapshot(cls, payload: Any) -> "TopologyGraph":
        """Build a graph from a decoded topology snapshot."""
        if not isinstance(payload, Mapping):
            raise SnapshotError("Topology snapshot must be a JSON object")
        graph = cls()
        for raw in payload.get("Nodes") or []:
            if not isinstance(raw, Mapping) or not raw.get("ID"):
                raise SnapshotError(f"Snapshot node without ID: {raw!r}")
            metadata = raw.get("Metadata")
            if metadata is None:
                metadata = {}
            if not isinstance(metadata, Mapping):
                raise SnapshotError(f"Metadata of node '{raw['ID']}' must be an object")
            try:
                graph.add_node(metadata, node_id=str(raw["ID"]))
            except ValueError as exc:
                raise SnapshotError(str(exc)) from exc
        for raw in payload.get("Edges") or []:
            if not isinstance(raw, Mapping):
                raise SnapshotError(f"Snapshot edge must be an object: {raw!r}")
            try:
                graph.add_edge(
                    str(raw.get("Parent")),
                    str(raw.get("Child")),
                    raw.get("Metadata") or {},
                    edge_id=str(raw["ID"]) if raw.get("ID") else None,
                )
            except KeyError as exc:
                raise SnapshotError(f"Snapshot edge references {exc.args[0]}") from exc
        return graph
