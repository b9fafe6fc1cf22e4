"""Synthetic reading generation for simulated temperature sensors."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from models.records import Reading
from models.schemas import GenerationMode
from services.identity import hash_seed

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
DEFAULT_TEMPERATURE_RANGE: Tuple[float, float] = (0.0, 100.0)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class GenerationConfig:
    """Parameters of a single generation run."""

    mode: GenerationMode = GenerationMode.flat
    devices: int = 1
    readings_per_device: int = 10
    days: int = 365

    @property
    def expected_readings(self) -> int:
        if self.mode is GenerationMode.time_series:
            return self.devices * self.days * MINUTES_PER_DAY
        return self.devices * self.readings_per_device


class ReadingGenerator:
    """Builds the complete, ordered list of readings for a run.

    Temperatures are drawn from the injected ``random_source`` in loop order,
    so a source seeded with a fixed value reproduces the same output for the
    same clock.
    """

    def __init__(
        self,
        random_source: random.Random,
        temperature_range: Tuple[float, float] = DEFAULT_TEMPERATURE_RANGE,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        minimum, maximum = temperature_range
        if minimum > maximum:
            raise ValueError(
                f"Temperature range is inverted: min {minimum} is above max {maximum}."
            )
        self.random_source = random_source
        self.temperature_range = (float(minimum), float(maximum))
        self.clock = clock or _utc_now

    def generate(self, config: GenerationConfig) -> List[Reading]:
        if config.mode is GenerationMode.time_series:
            readings = self.time_series(config.devices, config.days)
        else:
            readings = self.flat(config.devices, config.readings_per_device)
        logger.info(
            "Generated readings",
            extra={
                "mode": config.mode.value,
                "devices": config.devices,
                "reading_count": len(readings),
            },
        )
        return readings

    def flat(self, devices: int, readings_per_device: int) -> List[Reading]:
        """All readings stamped with the current time, grouped by device.

        ``reading_id`` hashes the per-device reading index, so the same ids
        repeat for every device.
        """
        _check_devices(devices)
        if readings_per_device < 0:
            raise ValueError(
                f"readings_per_device must not be negative, got {readings_per_device}."
            )

        now = self.clock()
        reading_ids = [hash_seed(index) for index in range(readings_per_device)]
        readings: List[Reading] = []
        for device_index in range(devices):
            device_id = hash_seed(device_index)
            for reading_id in reading_ids:
                readings.append(
                    Reading(
                        reading_id=reading_id,
                        temperature=self._temperature(),
                        device_id=device_id,
                        recorded_at=now,
                    )
                )
        return readings

    def time_series(self, devices: int, days: int) -> List[Reading]:
        """One reading per device per minute over the ``days`` before now.

        Minutes form the outer loop and devices (numbered from 1) the inner
        one. ``reading_id`` hashes ``minute + device``.
        """
        _check_devices(devices)
        if days < 0:
            raise ValueError(f"days must not be negative, got {days}.")

        total_minutes = days * MINUTES_PER_DAY
        start_time = self.clock() - timedelta(days=days)
        device_ids = [hash_seed(device) for device in range(1, devices + 1)]
        readings: List[Reading] = []
        for minute in range(total_minutes):
            recorded_at = start_time + timedelta(minutes=minute)
            for device, device_id in enumerate(device_ids, start=1):
                readings.append(
                    Reading(
                        reading_id=hash_seed(minute + device),
                        temperature=self._temperature(),
                        device_id=device_id,
                        recorded_at=recorded_at,
                    )
                )
        return readings

    def _temperature(self) -> float:
        minimum, maximum = self.temperature_range
        return minimum + self.random_source.random() * (maximum - minimum)


def _check_devices(devices: int) -> None:
    if devices <= 0:
        raise ValueError(f"devices must be positive, got {devices}.")
