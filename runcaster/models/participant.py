"""Allocator input and output records."""

from pydantic import BaseModel, Field, ConfigDict


class Participant(BaseModel):
    """
    A single paid entrant in one challenge, as handed to the allocator.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str = Field(description="Payout address")
    progress: float = Field(default=0.0, description="Challenge goal completion, higher is better")
    hasPaid: bool = Field(default=True, description="Whether the entry fee was paid")


class AllocationEntry(BaseModel):
    """
    One row of the payout table.

    shareBasisPoints is in units of 1/100th of a percent (10000 = whole pool).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str
    shareBasisPoints: int = Field(ge=0, le=10000, description="Share of the pool in basis points")
