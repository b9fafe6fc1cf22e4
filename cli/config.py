from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from models.schemas import GenerationMode
from services.generator import DEFAULT_TEMPERATURE_RANGE, GenerationConfig
from settings import ConfigurationError

DEFAULT_DEVICES = 1
DEFAULT_READINGS_PER_DEVICE = 10
DEFAULT_DAYS = 365


@dataclass(frozen=True)
class SeedOptions:
    generation: GenerationConfig
    temperature_range: Tuple[float, float] = DEFAULT_TEMPERATURE_RANGE
    random_seed: Optional[int] = None


def resolve_mode(
    mode: Optional[GenerationMode],
    readings_per_device: Optional[int],
    days: Optional[int],
) -> GenerationMode:
    """Pick the generation mode from the flags that were actually given."""
    if readings_per_device is not None and days is not None:
        raise ConfigurationError("--readings-per-device and --days are mutually exclusive.")
    if mode is GenerationMode.flat and days is not None:
        raise ConfigurationError("--days only applies to time-series mode.")
    if mode is GenerationMode.time_series and readings_per_device is not None:
        raise ConfigurationError("--readings-per-device only applies to flat mode.")
    if mode is not None:
        return mode
    return GenerationMode.time_series if days is not None else GenerationMode.flat


def load_options(
    devices: Optional[int] = None,
    readings_per_device: Optional[int] = None,
    days: Optional[int] = None,
    mode: Optional[GenerationMode] = None,
    temp_min: Optional[float] = None,
    temp_max: Optional[float] = None,
    random_seed: Optional[int] = None,
) -> SeedOptions:
    resolved = resolve_mode(mode, readings_per_device, days)
    device_count = DEFAULT_DEVICES if devices is None else devices
    if device_count <= 0:
        raise ConfigurationError(f"--devices must be positive, got {device_count}.")
    per_device = DEFAULT_READINGS_PER_DEVICE if readings_per_device is None else readings_per_device
    if per_device < 0:
        raise ConfigurationError(f"--readings-per-device must not be negative, got {per_device}.")
    day_span = DEFAULT_DAYS if days is None else days
    if day_span < 0:
        raise ConfigurationError(f"--days must not be negative, got {day_span}.")

    minimum = DEFAULT_TEMPERATURE_RANGE[0] if temp_min is None else temp_min
    maximum = DEFAULT_TEMPERATURE_RANGE[1] if temp_max is None else temp_max
    if minimum > maximum:
        raise ConfigurationError(f"--temp-min {minimum} is above --temp-max {maximum}.")

    return SeedOptions(
        generation=GenerationConfig(
            mode=resolved,
            devices=device_count,
            readings_per_device=per_device,
            days=day_span,
        ),
        temperature_range=(minimum, maximum),
        random_seed=random_seed,
    )
