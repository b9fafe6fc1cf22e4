"""Unit tests for reading batching."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from models.records import Reading
from services.batcher import batch_readings


def _readings(count: int) -> list[Reading]:
    recorded_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        Reading(reading_id=f"r{i}", temperature=float(i), device_id="dev", recorded_at=recorded_at)
        for i in range(count)
    ]


def test_remainder_batch_is_kept() -> None:
    batches = batch_readings(_readings(10), batch_size=3)

    assert [len(batch) for batch in batches] == [3, 3, 3, 1]
    assert [batch.index for batch in batches] == [0, 1, 2, 3]
    assert [(batch.start, batch.end) for batch in batches] == [(0, 3), (3, 6), (6, 9), (9, 10)]


def test_even_split_has_no_empty_tail() -> None:
    batches = batch_readings(_readings(9), batch_size=3)

    assert [len(batch) for batch in batches] == [3, 3, 3]


def test_batches_preserve_order_and_content() -> None:
    readings = _readings(7)

    batches = batch_readings(readings, batch_size=2)

    assert [r for batch in batches for r in batch.readings] == readings


def test_oversized_batch_holds_everything() -> None:
    batches = batch_readings(_readings(4), batch_size=1000)

    assert len(batches) == 1
    assert len(batches[0]) == 4


def test_empty_input_yields_no_batches() -> None:
    assert batch_readings([], batch_size=5) == []


@pytest.mark.parametrize("batch_size", [0, -3])
def test_non_positive_batch_size_rejected(batch_size: int) -> None:
    with pytest.raises(ValueError):
        batch_readings(_readings(3), batch_size=batch_size)


def test_documents_match_persisted_shape() -> None:
    readings = _readings(2)
    anonymous = Reading(
        reading_id="", temperature=1.5, device_id="dev", recorded_at=readings[0].recorded_at
    )

    batch = batch_readings(readings + [anonymous], batch_size=3)[0]
    documents = batch.documents()

    assert documents[0] == {
        "reading_id": "r0",
        "temperature": 0.0,
        "device_id": "dev",
        "recorded_at": readings[0].recorded_at,
    }
    assert "reading_id" not in documents[2]
