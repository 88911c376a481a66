"""Pydantic models for data the core hands to the notification and statistics layers."""
from typing import List, Literal

from pydantic import BaseModel, Field


class AlertPayload(BaseModel):
	"""Emitted only when the alert controller decides to fire."""

	kind: Literal["warning", "poor"]
	score: int = Field(..., ge=0, le=100)
	causes: List[str] = Field(default_factory=list)


class PostureRecord(BaseModel):
	"""One analysed reading, suitable for time-in-status aggregation."""

	status: Literal["good", "warning", "poor"]
	score: int = Field(..., ge=0, le=100)
	timestamp: float
