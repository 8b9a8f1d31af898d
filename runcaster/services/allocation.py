"""Reward tier allocation for challenge payouts.

Ranked participants are bucketed into three tiers:

- top 10% (at least one) share 50% of the pool
- next 20% (at least one) share 30% of the pool
- everyone else shares 20% of the pool

Shares are whole basis points, floored per member. Budget left over by
flooring or by an empty tier stays with the pool and is not redistributed.
"""

import logging
import math
from typing import Sequence

from runcaster.models import Participant, AllocationEntry

logger = logging.getLogger(__name__)

TOTAL_POOL_BPS = 10000

TOP_TIER_FRACTION = 0.10
SECOND_TIER_FRACTION = 0.20

TOP_TIER_POOL_BPS = 5000
SECOND_TIER_POOL_BPS = 3000
REST_TIER_POOL_BPS = 2000

TIER_POOLS_BPS = (TOP_TIER_POOL_BPS, SECOND_TIER_POOL_BPS, REST_TIER_POOL_BPS)


def split_tiers(
    participants: Sequence[Participant],
) -> tuple[list[Participant], list[Participant], list[Participant]]:
    """
    Slice a ranked list into top, second and rest tiers.
    
    Tier sizes are computed independently and the slices are taken in
    sequence, so small inputs leave the later tiers short or empty.
    """
    ranked = list(participants)
    n = len(ranked)
    top_count = max(1, math.ceil(n * TOP_TIER_FRACTION))
    second_count = max(1, math.ceil(n * SECOND_TIER_FRACTION))

    top = ranked[:top_count]
    second = ranked[top_count:top_count + second_count]
    rest = ranked[top_count + second_count:]
    return top, second, rest


def allocate(participants: Sequence[Participant]) -> list[AllocationEntry]:
    """
    Compute the payout table for a ranked list of paid participants.
    
    Args:
        participants: Paid participants sorted by progress descending.
            The order is taken as-is; ties keep their input order.
            
    Returns:
        One AllocationEntry per participant, top tier first, with
        shares in basis points. Empty input gives an empty list.
    """
    eligible = [p for p in participants if p.hasPaid]
    if len(eligible) != len(participants):
        logger.warning(
            f"Ignoring {len(participants) - len(eligible)} unpaid participant(s)"
        )

    if not eligible:
        return []

    allocations: list[AllocationEntry] = []
    for tier, pool_bps in zip(split_tiers(eligible), TIER_POOLS_BPS):
        if not tier:
            continue
        per_member = pool_bps // len(tier)
        allocations.extend(
            AllocationEntry(address=p.address, shareBasisPoints=per_member)
            for p in tier
        )

    return allocations


def total_basis_points(allocations: Sequence[AllocationEntry]) -> int:
    """Sum of allocated basis points."""
    return sum(entry.shareBasisPoints for entry in allocations)
