#!/usr/bin/env python3
"""
Runcaster Reward Distribution
Previews or executes the reward payout for challenges.

Usage:
    python distribute_rewards.py <challenge_id> [--execute]
    python distribute_rewards.py --completed

Example:
    python distribute_rewards.py 8c0b6a1e-... --execute
"""

import argparse
import asyncio
import logging
import sys

from tabulate import tabulate

from runcaster.config import Config
from runcaster.datasources import SupabaseDataSource, SplitsRelaySplitter
from runcaster.errors import RuncasterError
from runcaster.models import DistributionResult
from runcaster.services import RewardService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def format_share(basis_points: int) -> str:
    """Format basis points as a percentage"""
    return f"{basis_points / 100:.2f}%"


def print_result(result: DistributionResult):
    """Print one challenge's allocation table"""
    print("=" * 80)
    print(f"Challenge: {result.challengeId}")
    print(f"Split:     {result.splitAddress or '-'}")
    print(f"Paid participants: {result.participantCount}")
    print(f"Allocated: {format_share(result.totalBasisPoints)} ({result.totalBasisPoints} bps)")
    print(f"Distributed: {result.distributed}  Closed: {result.closed}")
    if result.error:
        print(f"Error: {result.error}")
    print("-" * 80)

    if not result.allocations:
        return

    table_data = [
        [rank, entry.address, entry.shareBasisPoints, format_share(entry.shareBasisPoints)]
        for rank, entry in enumerate(result.allocations, start=1)
    ]
    print(tabulate(
        table_data,
        headers=["#", "Address", "Bps", "Share"],
        tablefmt="grid"
    ))


async def run(args: argparse.Namespace, config: Config) -> list[DistributionResult]:
    store = SupabaseDataSource(config.supabase_url, config.supabase_service_key)
    splitter = SplitsRelaySplitter(config.splits_relay_url, config.splits_api_key)
    service = RewardService(
        store=store,
        splitter=splitter,
        controller_address=config.admin_address,
        token_address=config.usdc_address,
        window_hours=config.distribution_window_hours,
    )

    try:
        if args.completed:
            return await service.distribute_completed()
        if args.execute:
            return [await service.distribute_challenge(args.challenge_id)]
        return [await service.preview_allocation(args.challenge_id)]
    finally:
        await store.close()
        await splitter.close()


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Preview or distribute Runcaster challenge rewards"
    )
    parser.add_argument(
        "challenge_id",
        nargs="?",
        help="Challenge ID"
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Update the split and distribute (default: preview only)"
    )
    parser.add_argument(
        "--completed",
        action="store_true",
        help="Distribute every challenge that ended in the distribution window"
    )

    args = parser.parse_args()

    if not args.completed and not args.challenge_id:
        parser.error("a challenge ID is required unless --completed is given")

    config = Config.from_env()
    missing = config.missing_settings()
    if missing:
        print(f"Error: Missing required environment variables: {', '.join(missing)}")
        sys.exit(1)

    try:
        results = asyncio.run(run(args, config))
    except RuncasterError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not results:
        print("No completed challenges to distribute")
        return

    for result in results:
        print_result(result)
    print("=" * 80)


if __name__ == "__main__":
    main()
