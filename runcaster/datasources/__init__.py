from .base import ChallengeStore, PayoutSplitter
from .supabase import SupabaseDataSource
from .splits import SplitsRelaySplitter

__all__ = [
    "ChallengeStore",
    "PayoutSplitter",
    "SupabaseDataSource",
    "SplitsRelaySplitter",
]
