"""Errores fatales del pipeline de informes."""

from __future__ import annotations


class ReportError(ValueError):
    """Base class for fatal report pipeline failures."""


class IngestionError(ReportError):
    """A CSV export could not be parsed into records."""

    def __init__(self, source: str, message: str) -> None:
        """Create an ingestion error.

        Args:
            source: Label of the failing export (e.g. "sensor").
            message: Original parser message.
        """
        super().__init__(f"{source}: {message}")
        self.source = source


class EmptyDatasetError(ReportError):
    """No glucose entries were resolved from any export."""

    def __init__(self) -> None:
        super().__init__("No se encontraron datos válidos. Verifique los CSV.")


class EmptyWindowError(ReportError):
    """Glucose entries exist but none fall inside the selected window."""

    def __init__(self, duration: str) -> None:
        super().__init__(f"No hay datos en el rango seleccionado ({duration}).")
        self.duration = duration
