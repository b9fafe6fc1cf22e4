"""End-to-end seeding run: generate, batch, reset, load, count."""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

import pymongo
from pymongo.errors import PyMongoError

from datastore.mongo import reset_collection
from models.schemas import ResetMode, SeedReport
from services.batcher import batch_readings
from services.generator import (
    DEFAULT_TEMPERATURE_RANGE,
    GenerationConfig,
    ReadingGenerator,
)
from services.loader import BulkLoader
from settings import Settings

logger = logging.getLogger(__name__)


class SeedService:
    """Replaces the contents of a collection with freshly generated readings."""

    def __init__(
        self,
        generator: ReadingGenerator,
        loader: BulkLoader,
        batch_size: int,
        reset_mode: ResetMode = ResetMode.truncate,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}.")
        self.generator = generator
        self.loader = loader
        self.batch_size = batch_size
        self.reset_mode = reset_mode

    def run(self, config: GenerationConfig, collection: Any) -> SeedReport:
        started_at = datetime.now(timezone.utc)
        start_time = time.perf_counter()
        logger.info(
            "Starting mock data generation",
            extra={
                "mode": config.mode.value,
                "devices": config.devices,
                "reading_count": config.expected_readings,
            },
        )

        readings = self.generator.generate(config)
        batches = batch_readings(readings, self.batch_size)
        readings_generated = len(readings)
        del readings

        deleted = reset_collection(collection, self.reset_mode, self.loader.timeout)

        logger.info("Inserting new data", extra={"batch_count": len(batches)})
        summary = self.loader.load(batches, collection)
        if summary.failed:
            logger.warning(
                "Some batches were not inserted",
                extra={"batch_count": len(summary.failed)},
            )

        final_count, count_error = self._count(collection)
        finished_at = datetime.now(timezone.utc)
        report = SeedReport(
            mode=config.mode,
            devices=config.devices,
            readings_generated=readings_generated,
            batch_size=self.batch_size,
            reset_mode=self.reset_mode,
            deleted=deleted,
            load=summary,
            final_count=final_count,
            count_error=count_error,
            started_at=started_at,
            finished_at=finished_at,
            elapsed_ms=int((time.perf_counter() - start_time) * 1000),
        )
        logger.info(
            "Seeding finished",
            extra={"document_count": final_count, "elapsed_ms": report.elapsed_ms},
        )
        return report

    def _count(self, collection: Any) -> Tuple[Optional[int], Optional[str]]:
        try:
            with pymongo.timeout(self.loader.timeout):
                return collection.count_documents({}), None
        except PyMongoError as exc:
            logger.error("Failed to count documents", extra={"error": str(exc)})
            return None, str(exc)


def build_default_seeder(
    settings: Settings,
    random_seed: Optional[int] = None,
    temperature_range: Tuple[float, float] = DEFAULT_TEMPERATURE_RANGE,
    batch_size: Optional[int] = None,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    reset_mode: Optional[ResetMode] = None,
) -> SeedService:
    """Factory that wires the seeder from settings and per-run overrides."""
    generator = ReadingGenerator(
        random_source=random.Random(random_seed),
        temperature_range=temperature_range,
    )
    loader = BulkLoader(
        workers=settings.loader_workers if workers is None else workers,
        timeout=settings.request_timeout if timeout is None else timeout,
    )
    return SeedService(
        generator=generator,
        loader=loader,
        batch_size=settings.batch_size if batch_size is None else batch_size,
        reset_mode=settings.reset_mode if reset_mode is None else reset_mode,
    )
