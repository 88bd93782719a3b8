"""Clases base para fuentes de datos."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

Record = dict[str, str]


@dataclass(frozen=True)
class ExportPaths:
    """Location of one exported file."""

    path: Path


class DataSource(ABC):
    """Abstract export source."""

    def __init__(self, paths: ExportPaths, label: str) -> None:
        """Create a data source.

        Args:
            paths: Export file location.
            label: Short name used in logs and error messages.
        """
        self._paths = paths
        self.label = label

    @property
    def path(self) -> Path:
        return self._paths.path

    @abstractmethod
    def validate(self) -> None:
        """Validate that the export file exists.

        Raises:
            FileNotFoundError: If the file is missing.
        """

    @abstractmethod
    def load_records(self) -> list[Record]:
        """Read the export into field-keyed raw records."""
