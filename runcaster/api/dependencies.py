"""FastAPI dependencies for dependency injection."""

from runcaster.config import Config
from runcaster.datasources import ChallengeStore, PayoutSplitter
from runcaster.services import (
    ChallengeService,
    RewardService,
    StatsService,
    WeeklyChallengeService,
)

# Global instances - initialized at app startup
_config: Config | None = None
_store: ChallengeStore | None = None
_splitter: PayoutSplitter | None = None


def set_datasources(config: Config, store: ChallengeStore, splitter: PayoutSplitter) -> None:
    """Set the global config, store and splitter instances."""
    global _config, _store, _splitter
    _config = config
    _store = store
    _splitter = splitter


def get_config() -> Config:
    """Get the global config instance."""
    if _config is None:
        raise RuntimeError("Config not initialized. Call set_datasources() first.")
    return _config


def get_store() -> ChallengeStore:
    """Get the global challenge store for dependency injection."""
    if _store is None:
        raise RuntimeError("ChallengeStore not initialized. Call set_datasources() first.")
    return _store


def get_splitter() -> PayoutSplitter:
    """Get the global payout splitter for dependency injection."""
    if _splitter is None:
        raise RuntimeError("PayoutSplitter not initialized. Call set_datasources() first.")
    return _splitter


def get_challenge_service() -> ChallengeService:
    return ChallengeService(get_store())


def get_stats_service() -> StatsService:
    return StatsService(get_store())


def get_reward_service() -> RewardService:
    config = get_config()
    return RewardService(
        store=get_store(),
        splitter=get_splitter(),
        controller_address=config.admin_address,
        token_address=config.usdc_address,
        window_hours=config.distribution_window_hours,
    )


def get_weekly_challenge_service() -> WeeklyChallengeService:
    return WeeklyChallengeService(
        store=get_store(),
        splitter=get_splitter(),
        controller_address=get_config().admin_address,
    )
