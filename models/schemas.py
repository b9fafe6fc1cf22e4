"""Pydantic schemas describing generation modes and load outcomes."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class GenerationMode(str, Enum):
    """How the synthetic readings are laid out in time."""

    flat = "flat"
    time_series = "time-series"


class ResetMode(str, Enum):
    """How the destination collection is cleared before loading."""

    truncate = "truncate"
    drop = "drop"


class BatchFailure(BaseModel):
    """A batch the store rejected or did not answer in time."""

    batch_index: int = Field(..., ge=0)
    start: int = Field(..., ge=0, description="Offset of the first reading in the batch.")
    end: int = Field(..., ge=0, description="Offset one past the last reading in the batch.")
    error: str
    timed_out: bool = False
    inserted: int = Field(
        default=0,
        ge=0,
        description="Documents the store accepted before the batch failed.",
    )


class LoadSummary(BaseModel):
    """Aggregate outcome of submitting every batch once."""

    batches: int = Field(..., ge=0)
    succeeded: int = Field(..., ge=0)
    documents_inserted: int = Field(..., ge=0)
    failed: List[BatchFailure] = Field(default_factory=list)

    @property
    def failed_indexes(self) -> List[int]:
        return [failure.batch_index for failure in self.failed]


class SeedReport(BaseModel):
    """Everything a seeding run did, from generation to the final count."""

    mode: GenerationMode
    devices: int = Field(..., ge=1)
    readings_generated: int = Field(..., ge=0)
    batch_size: int = Field(..., ge=1)
    reset_mode: ResetMode
    deleted: Optional[int] = Field(
        default=None, description="Documents removed by a truncate; None after a drop."
    )
    load: LoadSummary
    final_count: Optional[int] = None
    count_error: Optional[str] = None
    started_at: datetime
    finished_at: datetime
    elapsed_ms: int = Field(..., ge=0)
