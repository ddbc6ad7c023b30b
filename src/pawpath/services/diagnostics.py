"""Collection of recoverable data-quality problems."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Iterator, List, Optional

from ..models.domain import Diagnostic, DiagnosticKind

logger = logging.getLogger(__name__)


class DiagnosticCollector:
    """List-backed sink handed to engine calls that may degrade their output."""

    def __init__(self) -> None:
        self._items: List[Diagnostic] = []
        self._seen: set[Diagnostic] = set()

    def record(
        self,
        kind: DiagnosticKind,
        subject_id: str,
        reason: str,
        day: Optional[date] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, subject_id=subject_id, reason=reason, date=day)
        if diagnostic in self._seen:
            return diagnostic
        self._seen.add(diagnostic)
        logger.warning(f"{kind.value} for {subject_id}: {reason}")
        self._items.append(diagnostic)
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [item for item in self._items if item.kind is kind]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


def diagnostic_to_json(diagnostic: Diagnostic) -> dict:
    payload = asdict(diagnostic)
    payload["kind"] = diagnostic.kind.value
    return payload
