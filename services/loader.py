"""Concurrent bulk insertion of reading batches."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Any, List, Sequence

import pymongo
from pymongo.errors import BulkWriteError, PyMongoError

from models.schemas import BatchFailure, LoadSummary
from services.batcher import Batch

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4
DEFAULT_TIMEOUT_SECONDS = 5.0


class _LoadProgress:
    """Outcomes reported by the workers of a single ``load`` call."""

    def __init__(self, batches: int) -> None:
        self._batches = batches
        self._succeeded = 0
        self._inserted = 0
        self._failures: List[BatchFailure] = []
        self._lock = Lock()

    def record_success(self, batch: Batch) -> None:
        with self._lock:
            self._succeeded += 1
            self._inserted += len(batch)

    def record_failure(self, failure: BatchFailure) -> None:
        with self._lock:
            self._failures.append(failure)
            self._inserted += failure.inserted

    def summary(self) -> LoadSummary:
        with self._lock:
            return LoadSummary(
                batches=self._batches,
                succeeded=self._succeeded,
                documents_inserted=self._inserted,
                failed=sorted(self._failures, key=lambda failure: failure.batch_index),
            )


class BulkLoader:
    """Submits every batch once as an ``insert_many`` request.

    A batch that times out or is rejected by the store is recorded and the
    remaining batches still run. Nothing is retried.
    """

    def __init__(
        self,
        workers: int = DEFAULT_WORKERS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if workers <= 0:
            raise ValueError(f"workers must be positive, got {workers}.")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}.")
        self.workers = workers
        self.timeout = timeout
        self.executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="bulk-loader")

    def load(self, batches: Sequence[Batch], collection: Any) -> LoadSummary:
        progress = _LoadProgress(len(batches))
        started = time.perf_counter()

        futures: List[Future[None]] = [
            self.executor.submit(self._insert_batch, batch, collection, progress)
            for batch in batches
        ]
        wait(futures)
        for future in futures:
            # Surfaces programming errors raised outside the store call.
            future.result()

        summary = progress.summary()
        logger.info(
            "Finished loading batches",
            extra={
                "batch_count": summary.batches,
                "document_count": summary.documents_inserted,
                "elapsed_ms": int((time.perf_counter() - started) * 1000),
            },
        )
        return summary

    def shutdown(self) -> None:
        self.executor.shutdown(wait=True)

    def _insert_batch(self, batch: Batch, collection: Any, progress: _LoadProgress) -> None:
        documents = batch.documents()
        try:
            with pymongo.timeout(self.timeout):
                collection.insert_many(documents)
        except PyMongoError as exc:
            inserted = 0
            if isinstance(exc, BulkWriteError):
                inserted = int(exc.details.get("nInserted", 0))
            failure = BatchFailure(
                batch_index=batch.index,
                start=batch.start,
                end=batch.end,
                error=str(exc),
                timed_out=bool(getattr(exc, "timeout", False)),
                inserted=inserted,
            )
            progress.record_failure(failure)
            logger.error(
                "Failed to insert batch",
                extra={
                    "batch_index": batch.index,
                    "batch_start": batch.start,
                    "batch_end": batch.end,
                    "timed_out": failure.timed_out,
                    "error": failure.error,
                },
            )
            return

        progress.record_success(batch)
        logger.debug(
            "Inserted batch",
            extra={
                "batch_index": batch.index,
                "batch_start": batch.start,
                "batch_end": batch.end,
                "document_count": len(documents),
            },
        )
