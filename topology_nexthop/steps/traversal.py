"""Traversal step exposing next-hop resolution to a graph query pipeline."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..config import NextHopSettings
from ..exceptions import InvalidArgumentError
from ..graph import GraphNode
from ..interfaces.topology import ResolvedNextHop
from ..utils import parse_ip_literal
from .next_hop_resolution import NextHopResolution, NextHopResolver


class TraversalStep(Protocol):
    """Step protocol evaluated by the host query engine."""
    def exec(self, nodes: Iterable[GraphNode]) -> Any:
        """Evaluate the step over the nodes produced by the previous step."""


class TraversalExtension(Protocol):
    """A named step the host query engine can parse and build."""
    name: str

    def parse_step(self, args: Sequence[Any]) -> TraversalStep:
        """Build a step from its query arguments."""


@dataclass(frozen=True)
class NextHopTraversalResult:
    """Per-node next hops produced by one evaluation of the step."""
    next_hops: Mapping[str, ResolvedNextHop]
    resolutions: Mapping[str, NextHopResolution]
    cancelled: bool = False

    def values(self) -> List[Dict[str, ResolvedNextHop]]:
        return [dict(self.next_hops)]

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        return {node_id: hop.as_dict() for node_id, hop in self.next_hops.items()}


class NextHopTraversalStep:
    """Resolve the next hop toward a fixed destination for every node.

    Nodes without a usable route are left out of the result mapping.
    """

    def __init__(
        self,
        destination: Any,
        settings: Optional[NextHopSettings] = None,
        logger: Optional[logging.Logger] = None,
        max_workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.destination = parse_ip_literal(destination)
        settings = settings or NextHopSettings()
        self._resolver = NextHopResolver(settings, logger)
        self._max_workers = max(1, max_workers if max_workers is not None else settings.max_workers)
        self._cancel_event = cancel_event
        self._logger = logger

    def exec(self, nodes: Iterable[GraphNode]) -> NextHopTraversalResult:
        node_list = list(nodes)
        if self._max_workers > 1 and len(node_list) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(self._resolve_node, node_list))
        else:
            outcomes = []
            for node in node_list:
                outcome = self._resolve_node(node)
                if outcome is None:
                    break
                outcomes.append(outcome)

        resolutions: Dict[str, NextHopResolution] = {}
        next_hops: Dict[str, ResolvedNextHop] = {}
        for outcome in outcomes:
            if outcome is None:
                continue
            node_id, resolution = outcome
            resolutions[node_id] = resolution
            if resolution.found and resolution.next_hop is not None:
                next_hops[node_id] = resolution.next_hop
        cancelled = len(outcomes) < len(node_list) or None in outcomes

        if self._logger:
            self._logger.info(
                f"Resolved next hop toward {self.destination} for {len(next_hops)}/{len(node_list)} node(s)",
                extra={"grouping": "next-hop-resolution"},
            )
        return NextHopTraversalResult(next_hops=next_hops, resolutions=resolutions, cancelled=cancelled)

    def _resolve_node(self, node: GraphNode) -> Optional[Tuple[str, NextHopResolution]]:
        if self._cancel_event is not None and self._cancel_event.is_set():
            return None
        return str(node.id), self._resolver.resolve(node.metadata, self.destination)


class NextHopTraversalExtension:
    """Query extension providing the ``NextHop('<ip>')`` step."""

    name = "NextHop"

    def __init__(
        self,
        settings: Optional[NextHopSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings or NextHopSettings()
        self._logger = logger

    def parse_step(self, args: Sequence[Any]) -> NextHopTraversalStep:
        if len(args) != 1:
            raise InvalidArgumentError(
                f"{self.name} step expects exactly one destination IP argument, got {len(args)}"
            )
        return NextHopTraversalStep(args[0], settings=self._settings, logger=self._logger)
