"""API routes for the rewards service."""

from typing import Literal, Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from runcaster.models import (
    AllocationEntry,
    Challenge,
    ChallengeCreate,
    ChallengeParticipant,
    CommunityStats,
    DistributionResult,
    JoinChallengeRequest,
    Participant,
    PaymentUpdate,
    ProgressUpdate,
    UserChallenge,
)
from runcaster.services import (
    ChallengeService,
    RewardService,
    StatsService,
    WeeklyChallengeService,
    allocate,
    calculate_pace,
    calculate_pace_from_seconds,
)
from .dependencies import (
    get_challenge_service,
    get_reward_service,
    get_stats_service,
    get_weekly_challenge_service,
)

router = APIRouter(prefix="/v1")


@router.post("/rewards/allocate", response_model=list[AllocationEntry])
async def allocate_rewards(
    participants: list[Participant] = Body(
        ...,
        description="Paid participants sorted by progress descending",
    ),
) -> list[AllocationEntry]:
    """
    Compute the tiered payout table for a ranked participant list.
    
    Top 10% share 5000 bps, next 20% share 3000 bps, the rest share 2000 bps.
    """
    return allocate(participants)


@router.post("/rewards/distribute-completed", response_model=list[DistributionResult])
async def distribute_completed(
    service: RewardService = Depends(get_reward_service),
) -> list[DistributionResult]:
    """
    Pay out every challenge that ended within the distribution window.
    """
    return await service.distribute_completed()


@router.get("/challenges", response_model=list[Challenge])
async def list_challenges(
    activeOnly: bool = Query(
        True,
        description="Only active challenges; false lists closed ones too"
    ),
    service: ChallengeService = Depends(get_challenge_service),
) -> list[Challenge]:
    """List challenges, newest first."""
    return await service.list_challenges(active_only=activeOnly)


@router.post("/challenges", response_model=Challenge)
async def create_challenge(
    challenge: ChallengeCreate,
    service: ChallengeService = Depends(get_challenge_service),
) -> Challenge:
    """Create a new challenge."""
    return await service.create_challenge(challenge)


@router.post("/challenges/weekly", response_model=list[Challenge])
async def create_weekly_challenges(
    service: WeeklyChallengeService = Depends(get_weekly_challenge_service),
) -> list[Challenge]:
    """Create next week's challenges from the weekly templates."""
    return await service.create_weekly_challenges()


@router.get("/challenges/{challenge_id}", response_model=Challenge)
async def get_challenge(
    challenge_id: str = Path(..., description="Challenge ID"),
    service: ChallengeService = Depends(get_challenge_service),
) -> Challenge:
    """Get a challenge by ID."""
    return await service.get_challenge(challenge_id)


@router.post("/challenges/{challenge_id}/close", response_model=Challenge)
async def close_challenge(
    challenge_id: str = Path(..., description="Challenge ID"),
    service: ChallengeService = Depends(get_challenge_service),
) -> Challenge:
    """Mark a challenge inactive without paying out."""
    return await service.close_challenge(challenge_id)


@router.post("/challenges/{challenge_id}/join", response_model=ChallengeParticipant)
async def join_challenge(
    request: JoinChallengeRequest,
    challenge_id: str = Path(..., description="Challenge ID"),
    service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeParticipant:
    """
    Join a challenge.
    
    The entry counts as paid when the entry fee transaction hash is given.
    """
    return await service.join_challenge(
        challenge_id=challenge_id,
        fid=request.fid,
        user_address=request.userAddress,
        transaction_hash=request.transactionHash,
    )


@router.get("/challenges/{challenge_id}/participants", response_model=list[ChallengeParticipant])
async def get_participants(
    challenge_id: str = Path(..., description="Challenge ID"),
    paidOnly: bool = Query(
        False,
        description="Only paid participants, ranked by progress"
    ),
    service: ChallengeService = Depends(get_challenge_service),
) -> list[ChallengeParticipant]:
    """Get the participants of a challenge."""
    return await service.get_participants(challenge_id, paid_only=paidOnly)


@router.get("/challenges/{challenge_id}/joined")
async def has_joined(
    challenge_id: str = Path(..., description="Challenge ID"),
    fid: int = Query(..., description="Farcaster user ID", example=1234),
    service: ChallengeService = Depends(get_challenge_service),
) -> dict:
    """Check whether a user has joined a challenge."""
    return {"joined": await service.has_joined(challenge_id, fid)}


@router.get("/challenges/{challenge_id}/allocation", response_model=DistributionResult)
async def preview_allocation(
    challenge_id: str = Path(..., description="Challenge ID"),
    service: RewardService = Depends(get_reward_service),
) -> DistributionResult:
    """
    Preview the payout table for a challenge without distributing.
    """
    return await service.preview_allocation(challenge_id)


@router.post("/challenges/{challenge_id}/distribute", response_model=DistributionResult)
async def distribute_challenge(
    challenge_id: str = Path(..., description="Challenge ID"),
    service: RewardService = Depends(get_reward_service),
) -> DistributionResult:
    """
    Distribute a challenge's reward pool and close the challenge.
    
    Not idempotent: calling this twice pays out twice.
    """
    return await service.distribute_challenge(challenge_id)


@router.post("/participants/{participant_id}/progress", response_model=ChallengeParticipant)
async def update_progress(
    update: ProgressUpdate,
    participant_id: str = Path(..., description="Participant ID"),
    service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeParticipant:
    """Set a participant's current progress."""
    return await service.update_progress(participant_id, update.progress)


@router.post("/participants/{participant_id}/payment", response_model=ChallengeParticipant)
async def record_payment(
    update: PaymentUpdate,
    participant_id: str = Path(..., description="Participant ID"),
    service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeParticipant:
    """Record a participant's entry fee transaction."""
    return await service.record_payment(participant_id, update.transactionHash)


@router.get("/users/{fid}/challenges", response_model=list[UserChallenge])
async def get_user_challenges(
    fid: int = Path(..., description="Farcaster user ID"),
    service: ChallengeService = Depends(get_challenge_service),
) -> list[UserChallenge]:
    """Get a user's challenge participations."""
    return await service.get_user_challenges(fid)


@router.get("/stats/community", response_model=CommunityStats)
async def get_community_stats(
    limit: Optional[int] = Query(
        None,
        description="Only aggregate the most recent activities",
        example=100
    ),
    service: StatsService = Depends(get_stats_service),
) -> CommunityStats:
    """
    Get community stats over public activities.
    
    Returns: activitiesCount, totalDistance, activeUsers, topLocation, per-type counts
    """
    return await service.get_community_stats(limit=limit)


@router.get("/pace")
async def get_pace(
    distance: float = Query(..., ge=0, description="Distance in km", example=5.0),
    duration: float = Query(..., gt=0, description="Duration", example=27.5),
    activity_type: Literal["run", "bike", "walk"] = Query("run", alias="type", description="Activity type"),
    unit: Literal["minutes", "seconds"] = Query("minutes", description="Unit of duration"),
) -> dict:
    """Format pace (runs) or speed (rides and walks)."""
    if unit == "seconds":
        pace = calculate_pace_from_seconds(distance, duration, activity_type)
    else:
        pace = calculate_pace(distance, duration, activity_type)
    return {"pace": pace}
