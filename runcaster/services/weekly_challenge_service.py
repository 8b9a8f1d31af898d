"""Weekly challenge scheduling."""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from runcaster.datasources import ChallengeStore, PayoutSplitter
from runcaster.models import Challenge, ChallengeCreate
from .allocation import TOTAL_POOL_BPS
from .challenge_service import ChallengeService

logger = logging.getLogger(__name__)

WEEKLY_TEMPLATES: list[dict] = [
    {
        "title": "Monday 5K",
        "description": "Complete a 5 kilometer run this week",
        "activity_type": "run",
        "target_value": 5,
        "target_unit": "km",
        "entry_fee": 0,
    },
    {
        "title": "Weekly Long Run",
        "description": "Run at least 10 kilometers in a single session",
        "activity_type": "run",
        "target_value": 10,
        "target_unit": "km",
        "entry_fee": 0,
    },
    {
        "title": "Cycling Challenge",
        "description": "Cycle at least 50 kilometers this week",
        "activity_type": "bike",
        "target_value": 50,
        "target_unit": "km",
        "entry_fee": 0,
    },
    {
        "title": "Walking Tour",
        "description": "Visit 3 different locations on your walks this week",
        "activity_type": "walk",
        "target_value": 3,
        "target_unit": "locations",
        "entry_fee": 1,
    },
]


def next_monday(now: datetime) -> datetime:
    """
    Midnight of the upcoming Monday.
    
    On a Monday this is the following week's Monday.
    """
    days_ahead = 7 - now.weekday()
    start = now + timedelta(days=days_ahead)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Start (Monday 00:00) and end (Sunday 23:59:59.999) of next week."""
    start = next_monday(now)
    end = (start + timedelta(days=6)).replace(hour=23, minute=59, second=59, microsecond=999000)
    return start, end


def week_number(start: datetime) -> int:
    """Week of the month used in weekly challenge titles."""
    # Sunday = 0
    day_of_week = (start.weekday() + 1) % 7
    return math.ceil((start.day - day_of_week + 1) / 7)


class WeeklyChallengeService:
    """Creates the weekly set of challenges from fixed templates."""

    def __init__(
        self,
        store: ChallengeStore,
        splitter: Optional[PayoutSplitter] = None,
        controller_address: str = "",
        templates: Optional[list[dict]] = None,
    ):
        self.challenge_service = ChallengeService(store)
        self.splitter = splitter
        self.controller_address = controller_address
        self.templates = templates if templates is not None else WEEKLY_TEMPLATES

    async def _attach_split(self, challenge: Challenge) -> Challenge:
        """Create a split with the controller as sole recipient and attach it."""
        recipients = [{"address": self.controller_address, "percentAllocation": TOTAL_POOL_BPS}]
        try:
            split_address = await self.splitter.create_split(
                recipients=recipients,
                controller=self.controller_address,
            )
        except httpx.HTTPError as e:
            logger.error(f"Error creating split for challenge {challenge.id}: {e}")
            return challenge

        try:
            return await self.challenge_service.update_split_address(challenge.id, split_address)
        except httpx.HTTPError as e:
            logger.error(f"Failed to update challenge {challenge.id} with split address {split_address}: {e}")
            return challenge

    async def create_weekly_challenges(self, now: Optional[datetime] = None) -> list[Challenge]:
        """
        Create next week's challenges.
        
        Paid challenges get a split contract when a splitter and controller
        are configured; otherwise they are created without one. A template
        whose insert fails is logged and skipped.
        
        Args:
            now: Reference time, defaults to the current UTC time
            
        Returns:
            The created challenges
        """
        if now is None:
            now = datetime.now(timezone.utc)
        start, end = week_bounds(now)
        week = week_number(start)
        can_split = self.splitter is not None and bool(self.controller_address)

        if not can_split and any(t["entry_fee"] > 0 for t in self.templates):
            logger.warning(
                "Some challenges have entry fees but no splitter controller is configured. "
                "Split contracts will not be created."
            )

        logger.info(f"Creating weekly challenges for {start.date()} to {end.date()}")

        created: list[Challenge] = []
        for template in self.templates:
            challenge = ChallengeCreate(**{
                **template,
                "title": f"Week {week}: {template['title']}",
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "is_active": True,
            })
            logger.info(f"Creating challenge: {challenge.title}")
            try:
                stored = await self.challenge_service.create_challenge(challenge)
            except httpx.HTTPError as e:
                logger.error(f"Failed to create challenge {challenge.title}: {e}")
                continue

            if stored.entry_fee > 0 and can_split:
                stored = await self._attach_split(stored)

            created.append(stored)

        logger.info("Weekly challenges creation completed")
        return created
