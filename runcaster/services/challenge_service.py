"""Challenge service for creating, joining and tracking challenges."""

import logging
from typing import Optional

from runcaster.datasources import ChallengeStore
from runcaster.errors import ChallengeNotFoundError, ParticipantNotFoundError
from runcaster.models import (
    Challenge,
    ChallengeCreate,
    ChallengeParticipant,
    UserChallenge,
)

logger = logging.getLogger(__name__)


class ChallengeService:
    """Service for challenge and participant records."""

    def __init__(self, store: ChallengeStore):
        self.store = store

    async def create_challenge(self, challenge: ChallengeCreate) -> Challenge:
        """Create a new challenge."""
        row = await self.store.insert_challenge(challenge.model_dump())
        return Challenge.model_validate(row)

    async def update_split_address(self, challenge_id: str, split_address: str) -> Challenge:
        """Attach a split contract to a challenge."""
        row = await self.store.update_challenge(challenge_id, {"split_address": split_address})
        if row is None:
            raise ChallengeNotFoundError(challenge_id)
        return Challenge.model_validate(row)

    async def close_challenge(self, challenge_id: str) -> Challenge:
        """Mark a challenge inactive."""
        row = await self.store.update_challenge(challenge_id, {"is_active": False})
        if row is None:
            raise ChallengeNotFoundError(challenge_id)
        logger.info(f"Challenge {challenge_id} marked as inactive")
        return Challenge.model_validate(row)

    async def list_challenges(self, active_only: bool = True) -> list[Challenge]:
        """List challenges newest first, optionally including closed ones."""
        rows = await self.store.list_challenges(active_only=active_only)
        return [Challenge.model_validate(row) for row in rows]

    async def get_active_challenges(self) -> list[Challenge]:
        """Get all active challenges, newest first."""
        return await self.list_challenges(active_only=True)

    async def get_challenge(self, challenge_id: str) -> Challenge:
        """
        Get a challenge by id.
        
        Raises:
            ChallengeNotFoundError: if no challenge has this id
        """
        row = await self.store.get_challenge(challenge_id)
        if row is None:
            raise ChallengeNotFoundError(challenge_id)
        return Challenge.model_validate(row)

    async def join_challenge(
        self,
        challenge_id: str,
        fid: int,
        user_address: str,
        transaction_hash: Optional[str] = None,
    ) -> ChallengeParticipant:
        """
        Join a user to a challenge.
        
        The entry counts as paid only when an entry fee transaction hash
        is supplied. Progress starts at zero.
        """
        await self.get_challenge(challenge_id)

        row = await self.store.insert_participant({
            "challenge_id": challenge_id,
            "fid": fid,
            "user_address": user_address,
            "current_progress": 0,
            "has_paid": bool(transaction_hash),
            "transaction_hash": transaction_hash,
        })
        logger.info(f"fid {fid} joined challenge {challenge_id} (paid={bool(transaction_hash)})")
        return ChallengeParticipant.model_validate(row)

    async def record_payment(self, participant_id: str, transaction_hash: str) -> ChallengeParticipant:
        """Mark a participant's entry fee as paid."""
        row = await self.store.update_participant(participant_id, {
            "has_paid": True,
            "transaction_hash": transaction_hash,
        })
        if row is None:
            raise ParticipantNotFoundError(participant_id)
        return ChallengeParticipant.model_validate(row)

    async def update_progress(self, participant_id: str, progress: float) -> ChallengeParticipant:
        """Set a participant's current progress."""
        row = await self.store.update_participant(participant_id, {"current_progress": progress})
        if row is None:
            raise ParticipantNotFoundError(participant_id)
        return ChallengeParticipant.model_validate(row)

    async def get_participants(
        self,
        challenge_id: str,
        paid_only: bool = False,
    ) -> list[ChallengeParticipant]:
        """Get participants of a challenge; paid-only lists are ranked by progress."""
        rows = await self.store.list_participants(challenge_id, paid_only=paid_only)
        return [ChallengeParticipant.model_validate(row) for row in rows]

    async def get_user_challenges(self, fid: int) -> list[UserChallenge]:
        """Get a user's challenge participations."""
        rows = await self.store.list_participations(fid)
        return [UserChallenge.model_validate(row) for row in rows]

    async def has_joined(self, challenge_id: str, fid: int) -> bool:
        """Check if a user has joined a challenge."""
        count = await self.store.count_participants(challenge_id, fid)
        return count > 0
