from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass(frozen=True)
class Column:
    key: str
    title: str
    width: float = 1.0  # relative share of the page width


@dataclass(frozen=True)
class ReportTable:
    """A fully materialized, already ordered projection ready for rendering."""

    title: str
    columns: Sequence[Column]
    rows: list[dict] = field(default_factory=list)

    @property
    def fieldnames(self) -> list[str]:
        return [c.key for c in self.columns]


@dataclass(frozen=True)
class ExportedDocument:
    content: bytes
    mimetype: str
    filename: str
