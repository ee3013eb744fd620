"""Topology snapshot sources: JSON files and the analyzer REST API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union
from urllib.parse import urljoin

import requests

from ..config import TopologyAPISettings
from ..exceptions import SnapshotError
from ..graph import TopologyGraph


def load_snapshot_file(path: Union[str, Path]) -> TopologyGraph:
    """Read a topology snapshot from a JSON file."""
    location = Path(path).expanduser()
    try:
        payload = json.loads(location.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SnapshotError(f"Unable to read snapshot '{location}': {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SnapshotError(f"Snapshot '{location}' is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot '{location}' is not valid JSON: {exc}") from exc
    return TopologyGraph.from_snapshot(payload)


@dataclass
class TopologyAPISession:
    """Thin wrapper around a requests session configured for the analyzer."""
    settings: TopologyAPISettings

    def __post_init__(self) -> None:
        if not self.settings.is_configured():
            raise SnapshotError("Topology API settings are not configured")
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        if self.settings.has_credentials():
            self._session.auth = (self.settings.username, self.settings.password)

    def get(self, path: str, **kwargs) -> requests.Response:
        url = urljoin(self.settings.base_url.rstrip("/") + "/", path.lstrip("/"))
        response = self._session.get(
            url, verify=self.settings.verify_ssl, timeout=self.settings.timeout, **kwargs
        )
        response.raise_for_status()
        return response

    def get_json(self, path: str, **kwargs) -> Dict[str, Any]:
        return self.get(path, **kwargs).json()


class TopologyAPIClient:
    """Fetch live topology snapshots from a topology analyzer."""

    def __init__(self, settings: TopologyAPISettings) -> None:
        self._settings = settings
        self._session = TopologyAPISession(settings)

    def fetch_snapshot(self) -> TopologyGraph:
        try:
            payload = self._session.get_json(self._settings.topology_path)
        except requests.RequestException as exc:
            raise SnapshotError(f"Topology API request failed: {exc}") from exc
        except ValueError as exc:
            raise SnapshotError(f"Topology API returned invalid JSON: {exc}") from exc
        return TopologyGraph.from_snapshot(payload)
