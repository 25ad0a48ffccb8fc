"""Data Transfer Objects for Pet Use Cases"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class UpdatePetLifeStagesCommandDTO(BaseModel):
    """
    Command DTO for the life stage reconciliation job

    today defaults to the current UTC date; tests pin it.
    """

    today: Optional[date] = None
    batch_size: int = Field(default=500, ge=1, description="Pets scanned per chunk")


class LifeStageUpdateResultDTO(BaseModel):
    updated_count: int = Field(..., description="Pets whose life stage changed")
    scanned_count: int = Field(..., description="Active pets examined")
    run_date: date
    started_at: datetime
    execution_time_ms: int
