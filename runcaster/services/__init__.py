from .allocation import allocate, split_tiers, total_basis_points
from .challenge_service import ChallengeService
from .reward_service import RewardService
from .weekly_challenge_service import WeeklyChallengeService
from .stats_service import StatsService, compute_community_stats
from .pace_service import calculate_pace, calculate_pace_from_seconds

__all__ = [
    "allocate",
    "split_tiers",
    "total_basis_points",
    "ChallengeService",
    "RewardService",
    "WeeklyChallengeService",
    "StatsService",
    "compute_community_stats",
    "calculate_pace",
    "calculate_pace_from_seconds",
]
