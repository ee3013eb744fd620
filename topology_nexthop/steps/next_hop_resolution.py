"""Next-hop resolution from a node's locally observed routing tables."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..config import NextHopSettings
from ..interfaces.metadata import ABSENT, NodeMetadataAccessor
from ..interfaces.topology import IPAddress, ResolvedNextHop, Route
from ..utils import parse_ip_literal
from .route_lookup import RouteTable

FOUND = "found"
NO_ROUTING_TABLES = "no_routing_tables"
MALFORMED_ROUTING_TABLES = "malformed_routing_tables"
NO_ROUTE = "no_route"


@dataclass(frozen=True)
class NextHopResolution:
    """Outcome of resolving one node toward one destination."""
    found: bool
    reason: str
    next_hop: Optional[ResolvedNextHop] = None
    route: Optional[Route] = None
    details: Optional[str] = None


class NextHopResolver:
    """Select the next hop a node would use to reach a destination.

    Routes from every routing table on the node are merged and searched by
    longest-prefix-match. The first candidate of the winning route is used; a
    candidate without a gateway address means the destination is on-link, so
    the destination itself becomes the resolved address.
    """

    def __init__(
        self,
        settings: Optional[NextHopSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._accessor = NodeMetadataAccessor(settings)
        self._logger = logger

    def resolve(self, metadata: Optional[Mapping[str, Any]], destination: IPAddress) -> NextHopResolution:
        lookup = self._accessor.routing_tables(metadata)
        if lookup.status == ABSENT:
            return NextHopResolution(found=False, reason=NO_ROUTING_TABLES)
        if not lookup.present:
            if self._logger:
                self._logger.warning(
                    f"Ignoring malformed routing tables: {lookup.error}",
                    extra={"grouping": "next-hop-resolution"},
                )
            return NextHopResolution(found=False, reason=MALFORMED_ROUTING_TABLES, details=lookup.error)

        route = RouteTable.from_routing_tables(lookup.value).lookup(destination)
        if route is None:
            return NextHopResolution(
                found=False,
                reason=NO_ROUTE,
                details=f"No route matches {destination}",
            )

        candidate = route.candidates[0]
        address = destination if candidate.is_connected else candidate.address
        next_hop = ResolvedNextHop(address=address, interface_index=candidate.interface_index)
        if self._logger:
            self._logger.debug(
                f"Route {route.prefix} selected for {destination}: {address} via ifindex {candidate.interface_index}",
                extra={"grouping": "next-hop-resolution"},
            )
        return NextHopResolution(found=True, reason=FOUND, next_hop=next_hop, route=route)


def resolve_next_hop(
    metadata: Optional[Mapping[str, Any]],
    destination: Any,
    settings: Optional[NextHopSettings] = None,
) -> Optional[ResolvedNextHop]:
    """Return the resolved next hop for ``destination`` or None when not found."""
    address = parse_ip_literal(destination)
    return NextHopResolver(settings).resolve(metadata, address).next_hop
