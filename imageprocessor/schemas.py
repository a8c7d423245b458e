# imageprocessor/schemas.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from imageprocessor.models import HistoryRecord


class HistoryItem(BaseModel):
    """One processing attempt as returned by the history endpoint."""
    filename: str = Field(..., description="Original name of the uploaded file", examples=["photo.jpg"])
    status: str = Field(..., description="Outcome name, usable as a status filter", examples=["PROCESSED_SUCCESSFULLY"])
    status_label: str = Field(..., description="Human readable outcome", examples=["Processed Successfully"])
    timestamp: datetime = Field(..., description="UTC time the attempt finished")

    @classmethod
    def from_record(cls, record: HistoryRecord) -> HistoryItem:
        return cls(
            filename=record.filename,
            status=record.outcome.name,
            status_label=record.outcome.label,
            timestamp=record.timestamp,
        )


class ErrorResponse(BaseModel):
    error: str
    message: str
    status: int
