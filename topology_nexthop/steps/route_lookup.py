"""Longest-prefix-match lookup over a node's routes."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from ..interfaces.topology import IPAddress, Route, RoutingTable


class RouteTable:
    """An ordered collection of routes searched by longest-prefix-match.

    Host route tables are small, so lookup is a linear scan. Among routes with
    the same mask length the first one listed wins.
    """

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._routes: Tuple[Route, ...] = tuple(routes)

    @classmethod
    def from_routing_tables(cls, tables: Iterable[RoutingTable]) -> "RouteTable":
        """Merge every table in table order, then route order."""
        return cls(route for table in tables for route in table.routes)

    @property
    def routes(self) -> Tuple[Route, ...]:
        return self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def lookup(self, destination: IPAddress) -> Optional[Route]:
        """Return the most specific route containing ``destination``, if any."""
        best: Optional[Route] = None
        for route in self._routes:
            if not route.prefix.contains(destination):
                continue
            if best is None or route.prefix.specificity() > best.prefix.specificity():
                best = route
        return best
