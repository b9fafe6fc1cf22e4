"""Partitioning of generated readings into bulk-insert batches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from models.records import Reading


@dataclass(frozen=True)
class Batch:
    """A contiguous slice of the reading sequence submitted as one request."""

    index: int
    start: int
    readings: Sequence[Reading]

    @property
    def end(self) -> int:
        return self.start + len(self.readings)

    def __len__(self) -> int:
        return len(self.readings)

    def documents(self) -> List[Dict[str, Any]]:
        return [reading.to_document() for reading in self.readings]


def batch_readings(readings: Sequence[Reading], batch_size: int) -> List[Batch]:
    """Split ``readings`` into batches of ``batch_size``.

    The final batch holds whatever remains and is never dropped.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}.")

    return [
        Batch(index=index, start=start, readings=readings[start : start + batch_size])
        for index, start in enumerate(range(0, len(readings), batch_size))
    ]
