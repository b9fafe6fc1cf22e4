"""Unit tests for synthetic reading generation."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from itertools import groupby

import pytest

from models.schemas import GenerationMode
from services.generator import MINUTES_PER_DAY, GenerationConfig, ReadingGenerator
from services.identity import hash_seed

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _generator(seed: int = 7, temperature_range=(0.0, 100.0)) -> ReadingGenerator:
    return ReadingGenerator(
        random_source=random.Random(seed),
        temperature_range=temperature_range,
        clock=lambda: FIXED_NOW,
    )


@pytest.mark.parametrize(("devices", "per_device"), [(1, 0), (1, 10), (3, 4), (5, 1)])
def test_flat_mode_count(devices: int, per_device: int) -> None:
    readings = _generator().flat(devices, per_device)

    assert len(readings) == devices * per_device


def test_flat_mode_layout() -> None:
    readings = _generator().flat(devices=2, readings_per_device=3)

    assert [r.device_id for r in readings] == [hash_seed(0)] * 3 + [hash_seed(1)] * 3
    assert [r.reading_id for r in readings[:3]] == [hash_seed(0), hash_seed(1), hash_seed(2)]
    # reading ids come from the per-device counter and repeat across devices
    assert [r.reading_id for r in readings[3:]] == [r.reading_id for r in readings[:3]]
    assert all(r.recorded_at == FIXED_NOW for r in readings)


@pytest.mark.parametrize(("devices", "days"), [(1, 0), (1, 1), (2, 1), (3, 2)])
def test_time_series_count(devices: int, days: int) -> None:
    readings = _generator().time_series(devices, days)

    assert len(readings) == devices * days * MINUTES_PER_DAY


def test_time_series_layout() -> None:
    readings = _generator().time_series(devices=2, days=1)
    start = FIXED_NOW - timedelta(days=1)

    first, second, third = readings[:3]
    assert first.recorded_at == start
    assert first.device_id == hash_seed(1)
    assert first.reading_id == hash_seed(1)
    assert second.recorded_at == start
    assert second.device_id == hash_seed(2)
    assert second.reading_id == hash_seed(2)
    assert third.recorded_at == start + timedelta(minutes=1)
    assert third.reading_id == hash_seed(2)
    assert readings[-1].recorded_at == FIXED_NOW - timedelta(minutes=1)


def test_time_series_devices_advance_one_minute() -> None:
    readings = _generator().time_series(devices=3, days=1)

    by_device = sorted(readings, key=lambda r: r.device_id)
    groups = {key: list(group) for key, group in groupby(by_device, key=lambda r: r.device_id)}

    assert set(groups) == {hash_seed(1), hash_seed(2), hash_seed(3)}
    for device_readings in groups.values():
        assert len(device_readings) == MINUTES_PER_DAY
        stamps = [r.recorded_at for r in device_readings]
        assert all(b - a == timedelta(minutes=1) for a, b in zip(stamps, stamps[1:]))


def test_fixed_seed_reproduces_output() -> None:
    first = _generator(seed=11).time_series(devices=2, days=1)
    second = _generator(seed=11).time_series(devices=2, days=1)
    other = _generator(seed=12).time_series(devices=2, days=1)

    assert first == second
    assert [r.temperature for r in first] != [r.temperature for r in other]


def test_temperatures_stay_in_range() -> None:
    readings = _generator(temperature_range=(18.5, 22.0)).flat(devices=4, readings_per_device=50)

    assert all(18.5 <= r.temperature <= 22.0 for r in readings)


def test_generate_dispatches_on_mode() -> None:
    generator = _generator()

    flat = generator.generate(GenerationConfig(mode=GenerationMode.flat, devices=2, readings_per_device=5))
    series = generator.generate(GenerationConfig(mode=GenerationMode.time_series, devices=2, days=1))

    assert len(flat) == 10
    assert len(series) == 2 * MINUTES_PER_DAY


def test_expected_readings_matches_mode() -> None:
    assert GenerationConfig(devices=3, readings_per_device=4).expected_readings == 12
    assert (
        GenerationConfig(mode=GenerationMode.time_series, devices=2, days=3).expected_readings
        == 2 * 3 * MINUTES_PER_DAY
    )


@pytest.mark.parametrize("devices", [0, -1])
def test_non_positive_devices_rejected(devices: int) -> None:
    generator = _generator()

    with pytest.raises(ValueError):
        generator.flat(devices, 1)
    with pytest.raises(ValueError):
        generator.time_series(devices, 1)


def test_negative_spans_rejected() -> None:
    generator = _generator()

    with pytest.raises(ValueError):
        generator.flat(1, -1)
    with pytest.raises(ValueError):
        generator.time_series(1, -1)


def test_inverted_temperature_range_rejected() -> None:
    with pytest.raises(ValueError):
        ReadingGenerator(random_source=random.Random(1), temperature_range=(10.0, 5.0))
