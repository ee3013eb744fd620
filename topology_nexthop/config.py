"""Configuration helpers for the topology next-hop toolkit."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

_DEFAULT_ROUTING_TABLES_KEY = "RoutingTables"
_DEFAULT_NEIGHBORS_KEY = "Neighbors"
_DEFAULT_TOPOLOGY_PATH = "/api/topology"


def _env_flag(name: str, default: bool = True) -> bool:
    """Return a boolean flag based on common truthy/falsey strings."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class TopologyAPISettings:
    """Settings that describe how to reach a topology analyzer REST API."""
    base_url: str = os.getenv("TOPOLOGY_API_URL", "")
    username: str = os.getenv("TOPOLOGY_API_USERNAME", "")
    password: str = os.getenv("TOPOLOGY_API_PASSWORD", "")
    verify_ssl: bool = _env_flag("TOPOLOGY_API_VERIFY_SSL", False)
    topology_path: str = _DEFAULT_TOPOLOGY_PATH
    timeout: int = _env_int("TOPOLOGY_API_TIMEOUT", 30)

    def is_configured(self) -> bool:
        return bool(self.base_url)

    def has_credentials(self) -> bool:
        return bool(self.username and self.password)


@dataclass(frozen=True)
class NextHopSettings:
    """Container for runtime settings used by the next-hop step.

    Metadata keys default to the attribute names written by the topology
    ingestion probes; they can be overridden for graphs that namespace them.
    """
    routing_tables_key: str = os.getenv("NEXTHOP_ROUTING_TABLES_KEY", _DEFAULT_ROUTING_TABLES_KEY)
    neighbors_key: str = os.getenv("NEXTHOP_NEIGHBORS_KEY", _DEFAULT_NEIGHBORS_KEY)
    max_workers: int = _env_int("NEXTHOP_WORKERS", 1)
    api: TopologyAPISettings = TopologyAPISettings()

    def api_settings(self) -> Optional[TopologyAPISettings]:
        if self.api.is_configured():
            return self.api
        return None
