"""Challenge and challenge participant models."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

from .participant import Participant

ActivityType = Literal["run", "bike", "walk"]
TargetUnit = Literal["km", "count", "locations"]


class ChallengeCreate(BaseModel):
    """Fields required to create a challenge."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    activity_type: Optional[ActivityType] = None
    target_value: float
    target_unit: TargetUnit
    start_date: str = Field(description="ISO 8601 start timestamp")
    end_date: str = Field(description="ISO 8601 end timestamp")
    entry_fee: float = Field(default=0.0, description="Entry fee in USDC")
    split_address: Optional[str] = Field(default=None, description="Split contract address")
    is_active: bool = True


class Challenge(ChallengeCreate):
    """A stored challenge row."""

    id: str
    created_at: str


class ChallengeParticipant(BaseModel):
    """A stored challenge_participants row."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    challenge_id: str
    fid: int
    user_address: str
    joined_at: Optional[str] = None
    current_progress: float = 0.0
    has_paid: bool = False
    transaction_hash: Optional[str] = None

    def to_participant(self) -> Participant:
        """Map this row onto an allocator participant."""
        return Participant(
            address=self.user_address,
            progress=self.current_progress,
            hasPaid=self.has_paid,
        )


class JoinChallengeRequest(BaseModel):
    """Request body for joining a challenge."""

    fid: int
    userAddress: str
    transactionHash: Optional[str] = None


class UserChallenge(ChallengeParticipant):
    """A participation row with its challenge embedded."""

    challenges: Optional[Challenge] = None


class ProgressUpdate(BaseModel):
    """Request body for updating a participant's progress."""

    progress: float = Field(ge=0)


class PaymentUpdate(BaseModel):
    """Request body for recording an entry fee payment."""

    transactionHash: str
