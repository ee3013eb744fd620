"""Custom exceptions for the topology next-hop toolkit."""

from __future__ import annotations


class InvalidArgumentError(RuntimeError):
    """Raised when a traversal step is built with an unusable argument."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:  # pragma: no cover - simple accessor
        return self.message


class MetadataError(RuntimeError):
    """Raised when a node attribute is present but cannot be decoded."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key
        self.message = message

    def __str__(self) -> str:  # pragma: no cover - simple accessor
        return f"{self.key}: {self.message}"


class SnapshotError(RuntimeError):
    """Raised when a topology snapshot cannot be loaded."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:  # pragma: no cover - simple accessor
        return self.message
