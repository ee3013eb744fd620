"""Registry of traversal extensions known to the query pipeline."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config import NextHopSettings
from .traversal import NextHopTraversalExtension, TraversalExtension, TraversalStep


class StepRegistry:
    """Map step names to the extensions that build them.

    Names are matched case-insensitively, the way query tokens are scanned.
    """

    def __init__(self) -> None:
        self._extensions: Dict[str, TraversalExtension] = {}

    def register(self, extension: TraversalExtension) -> None:
        key = extension.name.lower()
        if key in self._extensions:
            raise ValueError(f"Step '{extension.name}' is already registered")
        self._extensions[key] = extension

    def build(self, name: str, args: Sequence[Any]) -> TraversalStep:
        extension = self._extensions.get(name.lower())
        if extension is None:
            raise KeyError(f"Unknown step: {name}. Available: {self.available_steps()}")
        return extension.parse_step(args)

    def available_steps(self) -> List[str]:
        return sorted(extension.name for extension in self._extensions.values())


def default_registry(
    settings: Optional[NextHopSettings] = None,
    logger: Optional[logging.Logger] = None,
) -> StepRegistry:
    registry = StepRegistry()
    registry.register(NextHopTraversalExtension(settings, logger))
    return registry
