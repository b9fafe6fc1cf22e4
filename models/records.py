"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class Reading:
    """A single synthetic temperature sample from a simulated device."""

    reading_id: str
    temperature: float
    device_id: str
    recorded_at: datetime

    def to_document(self) -> Dict[str, Any]:
        """Render the record stored in the readings collection."""

        document: Dict[str, Any] = {}
        if self.reading_id:
            document["reading_id"] = self.reading_id
        document["temperature"] = self.temperature
        document["device_id"] = self.device_id
        document["recorded_at"] = self.recorded_at
        return document
