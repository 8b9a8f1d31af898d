"""Abstract base classes for the external collaborators."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional


class ChallengeStore(ABC):
    """
    Abstract interface for challenge and activity storage.
    
    Rows are returned as plain dicts keyed by column name; services
    validate them into models.
    """

    @abstractmethod
    async def insert_challenge(self, data: dict[str, Any]) -> dict:
        """Insert a challenge row and return it as stored."""
        pass

    @abstractmethod
    async def update_challenge(self, challenge_id: str, data: dict[str, Any]) -> Optional[dict]:
        """
        Update columns of a challenge.
        
        Returns:
            The updated row, or None if no row matched
        """
        pass

    @abstractmethod
    async def get_challenge(self, challenge_id: str) -> Optional[dict]:
        """Get a challenge by id, or None if it does not exist."""
        pass

    @abstractmethod
    async def list_challenges(self, active_only: bool = True) -> list[dict]:
        """List challenges, newest first."""
        pass

    @abstractmethod
    async def list_ended_challenges(
        self,
        ended_after: datetime,
        ended_before: datetime,
    ) -> list[dict]:
        """
        List active challenges with a split address that ended in a window.
        
        Args:
            ended_after: Inclusive lower bound on end_date
            ended_before: Exclusive upper bound on end_date
        """
        pass

    @abstractmethod
    async def insert_participant(self, data: dict[str, Any]) -> dict:
        """Insert a challenge participant row and return it as stored."""
        pass

    @abstractmethod
    async def update_participant(self, participant_id: str, data: dict[str, Any]) -> Optional[dict]:
        """Update columns of a participant row, or None if no row matched."""
        pass

    @abstractmethod
    async def list_participants(
        self,
        challenge_id: str,
        paid_only: bool = False,
    ) -> list[dict]:
        """
        List participants of a challenge.
        
        Args:
            challenge_id: Challenge id
            paid_only: If True, only participants with has_paid set,
                ordered by current_progress descending
        """
        pass

    @abstractmethod
    async def list_participations(self, fid: int) -> list[dict]:
        """List a user's participant rows, each with its challenge under 'challenges'."""
        pass

    @abstractmethod
    async def count_participants(self, challenge_id: str, fid: int) -> int:
        """Count participant rows for a user in a challenge."""
        pass

    @abstractmethod
    async def list_public_activities(self, limit: Optional[int] = None) -> list[dict]:
        """List public activities, newest first."""
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).
        
        Override this if the store holds resources that need cleanup.
        """
        pass


class PayoutSplitter(ABC):
    """
    Abstract interface for the on-chain value splitter.
    """

    @abstractmethod
    async def create_split(self, recipients: list[dict[str, Any]], controller: str) -> str:
        """
        Create a new split.
        
        Args:
            recipients: Initial recipient table, basis points summing to 10000
            controller: Address allowed to update the split
            
        Returns:
            Address of the created split
        """
        pass

    @abstractmethod
    async def update_split(
        self,
        split_address: str,
        recipients: list[dict[str, Any]],
        controller: str,
    ) -> dict:
        """
        Replace the recipient table of a split.
        
        Args:
            split_address: Split contract address
            recipients: [{"address": ..., "percentAllocation": bps}]
            controller: Address allowed to update the split
            
        Returns:
            Transaction data reported by the splitter
        """
        pass

    @abstractmethod
    async def distribute_token(self, split_address: str, token: str) -> dict:
        """Distribute the split's balance of a token to its recipients."""
        pass

    async def close(self) -> None:
        """Clean up resources."""
        pass
