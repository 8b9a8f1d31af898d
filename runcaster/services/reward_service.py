"""Reward service for closing challenges and paying out their pools."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from runcaster.datasources import ChallengeStore, PayoutSplitter
from runcaster.errors import DistributionError
from runcaster.models import (
    AllocationEntry,
    Challenge,
    DistributionResult,
    Participant,
)
from .allocation import allocate, total_basis_points
from .challenge_service import ChallengeService

logger = logging.getLogger(__name__)

DEFAULT_DISTRIBUTION_WINDOW_HOURS = 24


def to_split_recipients(allocations: list[AllocationEntry]) -> list[dict]:
    """Convert allocation entries to the splitter's recipient table."""
    return [
        {"address": entry.address, "percentAllocation": entry.shareBasisPoints}
        for entry in allocations
    ]


class RewardService:
    """
    Service for distributing challenge reward pools.
    
    Each closure runs: fetch ranked paid participants, allocate, update
    the split recipients, distribute the token, mark the challenge closed.
    The sequence is not safe to repeat for the same challenge; a second
    run would pay out again.
    """

    def __init__(
        self,
        store: ChallengeStore,
        splitter: PayoutSplitter,
        controller_address: str,
        token_address: str,
        window_hours: int = DEFAULT_DISTRIBUTION_WINDOW_HOURS,
    ):
        self.store = store
        self.splitter = splitter
        self.controller_address = controller_address
        self.token_address = token_address
        self.window_hours = window_hours
        self.challenge_service = ChallengeService(store)

    async def _ranked_participants(self, challenge_id: str) -> list[Participant]:
        """Paid participants ordered by progress descending."""
        rows = await self.challenge_service.get_participants(challenge_id, paid_only=True)
        return [row.to_participant() for row in rows]

    async def _load_payable(self, challenge_id: str) -> tuple[Challenge, list[Participant]]:
        challenge = await self.challenge_service.get_challenge(challenge_id)
        if not challenge.split_address:
            raise DistributionError(f"Challenge {challenge_id} does not have a split address")

        participants = await self._ranked_participants(challenge_id)
        if not participants:
            raise DistributionError(f"No paid participants found for challenge {challenge_id}")

        return challenge, participants

    async def _pay_out(self, challenge: Challenge, allocations: list[AllocationEntry]) -> None:
        logger.info(f"Updating split {challenge.split_address} with new allocations")
        await self.splitter.update_split(
            split_address=challenge.split_address,
            recipients=to_split_recipients(allocations),
            controller=self.controller_address,
        )

        logger.info(f"Distributing {self.token_address} from split {challenge.split_address}")
        await self.splitter.distribute_token(
            split_address=challenge.split_address,
            token=self.token_address,
        )

    async def preview_allocation(self, challenge_id: str) -> DistributionResult:
        """
        Compute the allocation a distribution would use, without paying out.
        
        Raises:
            ChallengeNotFoundError: if the challenge does not exist
            DistributionError: if it has no split address or no paid participants
        """
        challenge, participants = await self._load_payable(challenge_id)
        allocations = allocate(participants)

        return DistributionResult(
            challengeId=challenge.id,
            splitAddress=challenge.split_address,
            participantCount=len(participants),
            allocations=allocations,
            totalBasisPoints=total_basis_points(allocations),
        )

    async def distribute_challenge(self, challenge_id: str) -> DistributionResult:
        """
        Distribute the reward pool of one challenge and close it.
        
        Raises:
            ChallengeNotFoundError: if the challenge does not exist
            DistributionError: if it has no split address or no paid participants
            httpx.HTTPError: if the splitter or store call fails
        """
        challenge, participants = await self._load_payable(challenge_id)
        logger.info(f"Distributing rewards for challenge: {challenge.title} ({challenge.id})")
        logger.info(f"Found {len(participants)} paid participants")

        allocations = allocate(participants)
        await self._pay_out(challenge, allocations)
        await self.challenge_service.close_challenge(challenge.id)

        return DistributionResult(
            challengeId=challenge.id,
            splitAddress=challenge.split_address,
            participantCount=len(participants),
            allocations=allocations,
            totalBasisPoints=total_basis_points(allocations),
            distributed=True,
            closed=True,
        )

    async def distribute_completed(self, now: Optional[datetime] = None) -> list[DistributionResult]:
        """
        Distribute every challenge that ended within the distribution window.
        
        Challenges without paid participants are closed without a payout.
        A failed payout is logged and reported in that challenge's result,
        the challenge stays open, and the batch carries on.
        
        Args:
            now: Reference time, defaults to the current UTC time
            
        Returns:
            One DistributionResult per ended challenge
        """
        if now is None:
            now = datetime.now(timezone.utc)
        window_start = now - timedelta(hours=self.window_hours)

        rows = await self.store.list_ended_challenges(ended_after=window_start, ended_before=now)
        challenges = [Challenge.model_validate(row) for row in rows]
        logger.info(f"Found {len(challenges)} completed challenges to distribute rewards for")

        results: list[DistributionResult] = []
        for challenge in challenges:
            logger.info(f"Processing challenge: {challenge.title} ({challenge.id})")
            participants = await self._ranked_participants(challenge.id)

            if not participants:
                logger.info(
                    f"No paid participants found for challenge {challenge.id}, skipping distribution"
                )
                await self.challenge_service.close_challenge(challenge.id)
                results.append(DistributionResult(
                    challengeId=challenge.id,
                    splitAddress=challenge.split_address,
                    closed=True,
                ))
                continue

            allocations = allocate(participants)
            result = DistributionResult(
                challengeId=challenge.id,
                splitAddress=challenge.split_address,
                participantCount=len(participants),
                allocations=allocations,
                totalBasisPoints=total_basis_points(allocations),
            )

            try:
                await self._pay_out(challenge, allocations)
                result.distributed = True
                await self.challenge_service.close_challenge(challenge.id)
                result.closed = True
                logger.info(
                    f"Successfully distributed rewards and marked challenge {challenge.id} as inactive"
                )
            except httpx.HTTPError as e:
                logger.error(f"Error distributing rewards for challenge {challenge.id}: {e}")
                result.error = str(e)

            results.append(result)

        logger.info("Reward distribution completed")
        return results
