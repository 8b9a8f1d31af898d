"""Community stats over the public activity feed."""

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional

from runcaster.datasources import ChallengeStore
from runcaster.models import Activity, CommunityStats

RECENT_WINDOW = timedelta(hours=24)


def _parse_timestamp(value: str) -> datetime:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def compute_community_stats(activities: list[Activity], now: Optional[datetime] = None) -> CommunityStats:
    """
    Aggregate activity counts, distance and locations.
    
    Args:
        activities: Activities to aggregate
        now: Reference time for the recent-activity count
        
    Returns:
        CommunityStats for the given activities
    """
    if now is None:
        now = datetime.now(timezone.utc)

    type_counts = Counter(a.type for a in activities)
    location_counts = Counter(a.location for a in activities if a.location)
    # most_common keeps first-seen order among ties
    top_location = location_counts.most_common(1)[0][0] if location_counts else "Unknown"

    cutoff = now - RECENT_WINDOW
    recent = sum(1 for a in activities if _parse_timestamp(a.created_at) > cutoff)

    return CommunityStats(
        activitiesCount=len(activities),
        totalDistance=round(sum(a.distance for a in activities), 1),
        activeUsers=len({a.fid for a in activities}),
        topLocation=top_location,
        runCount=type_counts["run"],
        bikeCount=type_counts["bike"],
        walkCount=type_counts["walk"],
        recentActivities=recent,
    )


class StatsService:
    """Service for community-wide activity stats."""

    def __init__(self, store: ChallengeStore):
        self.store = store

    async def get_community_stats(
        self,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> CommunityStats:
        """Compute stats over the public activity feed."""
        rows = await self.store.list_public_activities(limit=limit)
        activities = [Activity.model_validate(row) for row in rows]
        return compute_community_stats(activities, now=now)
