"""Reward distribution result model for API responses."""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from .participant import AllocationEntry


class DistributionResult(BaseModel):
    """
    Outcome of closing one challenge.
    """
    model_config = ConfigDict(populate_by_name=True)

    challengeId: str
    splitAddress: Optional[str] = None
    participantCount: int = 0
    allocations: list[AllocationEntry] = Field(default_factory=list)
    totalBasisPoints: int = Field(default=0, description="Sum of allocated basis points")
    distributed: bool = Field(default=False, description="Whether the split distribution was triggered")
    closed: bool = Field(default=False, description="Whether the challenge was marked inactive")
    error: Optional[str] = None
