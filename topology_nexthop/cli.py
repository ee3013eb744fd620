"""Command-line helpers for running the next-hop step over a topology snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .config import NextHopSettings
from .exceptions import InvalidArgumentError, SnapshotError
from .graph import TopologyGraph
from .interfaces.topology_api import TopologyAPIClient, load_snapshot_file
from .steps import default_registry

logger = logging.getLogger("topology_nexthop")


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Resolve the next hop toward a destination for topology nodes"
    )
    parser.add_argument(
        "--destination",
        required=True,
        help="Destination IP address literal",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--snapshot",
        help="Path to a topology snapshot JSON file",
    )
    source.add_argument(
        "--analyzer-url",
        help="Fetch the live topology from this analyzer base URL (overrides TOPOLOGY_API_URL)",
    )
    parser.add_argument(
        "--node",
        action="append",
        default=[],
        help="Restrict the query to this node ID (repeatable)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Resolve nodes on this many worker threads (default: NEXTHOP_WORKERS or 1)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log resolution details and report why nodes were left out",
    )
    return parser


def load_graph(settings: NextHopSettings, snapshot: Optional[str]) -> TopologyGraph:
    """Return the topology graph from a file or from the configured analyzer."""
    if snapshot:
        return load_snapshot_file(snapshot)
    api_settings = settings.api_settings()
    if not api_settings:
        raise SnapshotError(
            "No topology source. Pass --snapshot or set TOPOLOGY_API_URL / --analyzer-url."
        )
    return TopologyAPIClient(api_settings).fetch_snapshot()


def run_query(
    destination: str,
    settings: Optional[NextHopSettings] = None,
    snapshot: Optional[str] = None,
    graph: Optional[TopologyGraph] = None,
    node_ids: Optional[List[str]] = None,
    workers: Optional[int] = None,
    debug: bool = False,
) -> Dict[str, Any]:
    """Execute the next-hop step and return a JSON-serializable payload."""
    settings = settings or NextHopSettings()
    if workers is not None:
        settings = replace(settings, max_workers=workers)

    # Argument errors abort before any snapshot is loaded.
    step = default_registry(settings, logger).build("NextHop", [destination])

    graph = graph if graph is not None else load_graph(settings, snapshot)
    nodes = list(graph.nodes())
    if node_ids:
        wanted = set(node_ids)
        nodes = [node for node in nodes if node.id in wanted]

    result = step.exec(nodes)
    payload: Dict[str, Any] = {
        "status": "ok",
        "destination": str(step.destination),
        "nodes_evaluated": len(nodes),
        "next_hops": result.as_dict(),
    }
    if debug:
        payload["debug"] = {
            "not_found": {
                node_id: {"reason": resolution.reason, "details": resolution.details}
                for node_id, resolution in result.resolutions.items()
                if not resolution.found
            },
            "routes": {
                node_id: str(resolution.route.prefix)
                for node_id, resolution in result.resolutions.items()
                if resolution.route is not None
            },
        }
    return payload


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.debug)

    settings = NextHopSettings()
    if args.analyzer_url:
        settings = replace(settings, api=replace(settings.api, base_url=args.analyzer_url))

    try:
        payload = run_query(
            args.destination,
            settings=settings,
            snapshot=args.snapshot,
            node_ids=args.node,
            workers=args.workers,
            debug=args.debug,
        )
    except InvalidArgumentError as exc:
        payload = {"status": "error", "error": str(exc)}
        print(json.dumps(payload, indent=2), file=sys.stdout)
        return 1
    except SnapshotError as exc:
        payload = {"status": "error", "error": str(exc)}
        print(json.dumps(payload, indent=2), file=sys.stdout)
        return 1
    except Exception as exc:  # pragma: no cover - CLI guard
        payload = {"status": "error", "error": str(exc)}
        print(json.dumps(payload, indent=2), file=sys.stdout)
        return 2

    print(json.dumps(payload, indent=2), file=sys.stdout)
    return 0


class _GroupingFilter(logging.Filter):
    """Default the ``grouping`` record field for log lines that omit it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "grouping"):
            record.grouping = "general"
        return True


def configure_logging(debug: bool = False) -> None:
    """Send package log records to stderr, tagged with their grouping."""
    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(_GroupingFilter())
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(grouping)s] %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
