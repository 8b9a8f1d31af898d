"""Activity and community stats models."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict


class Activity(BaseModel):
    """A recorded run, ride or walk."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    fid: int
    user_address: str
    type: Literal["run", "bike", "walk"]
    distance: float = Field(description="Distance in km")
    duration: float = Field(description="Duration in minutes")
    created_at: str
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    is_public: bool = True


class CommunityStats(BaseModel):
    """
    Aggregates over the public activity feed.
    """
    model_config = ConfigDict(populate_by_name=True)

    activitiesCount: int = 0
    totalDistance: float = Field(default=0.0, description="Total distance in km, one decimal")
    activeUsers: int = Field(default=0, description="Unique fids with at least one activity")
    topLocation: str = "Unknown"
    runCount: int = 0
    bikeCount: int = 0
    walkCount: int = 0
    recentActivities: int = Field(default=0, description="Activities created in the last 24 hours")
