from .participant import Participant, AllocationEntry
from .challenge import (
    Challenge,
    ChallengeCreate,
    ChallengeParticipant,
    JoinChallengeRequest,
    PaymentUpdate,
    ProgressUpdate,
    UserChallenge,
)
from .activity import Activity, CommunityStats
from .distribution import DistributionResult

__all__ = [
    "Participant",
    "AllocationEntry",
    "Challenge",
    "ChallengeCreate",
    "ChallengeParticipant",
    "JoinChallengeRequest",
    "PaymentUpdate",
    "ProgressUpdate",
    "UserChallenge",
    "Activity",
    "CommunityStats",
    "DistributionResult",
]
