"""
Asset Identifier Allocation

Mints ids of the form ``A-NNNN`` (NNNN in 1000-9999) that are not present
in a given id set. Allocation is best-effort: the caller must still insert
conditionally, since another writer may take the id before the insert lands.
"""

from __future__ import annotations

import random
from collections.abc import Collection
from dataclasses import dataclass
from typing import Final, Optional, Union


# =============================================================================
# Constants
# =============================================================================

ASSET_ID_PREFIX: Final[str] = "A-"
ASSET_ID_MIN: Final[int] = 1000
ASSET_ID_MAX: Final[int] = 9999
DEFAULT_MAX_ATTEMPTS: Final[int] = 10_000


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class AllocationSuccess:
    """Returned when an unused id was found."""

    asset_id: str
    attempts: int


@dataclass(frozen=True)
class AllocationExhausted:
    """Returned when the attempt bound was reached without a free id."""

    attempts: int
    message: str = "Failed to generate unique asset ID"


AllocationResult = Union[AllocationSuccess, AllocationExhausted]


# =============================================================================
# Allocation
# =============================================================================


def format_asset_id(number: int) -> str:
    """Render a numeric suffix as an asset id."""
    return f"{ASSET_ID_PREFIX}{number}"


def allocate_asset_id(
    existing_ids: Collection[str],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> AllocationResult:
    """
    Draw random ids until one is not in ``existing_ids``.

    Args:
        existing_ids: Ids currently in use
        max_attempts: Upper bound on draws
        rng: Random source (default: module-level generator)

    Returns:
        AllocationSuccess with the id, or AllocationExhausted
    """
    rng = rng or random
    taken = existing_ids if isinstance(existing_ids, (set, frozenset)) else set(existing_ids)

    for attempt in range(1, max_attempts + 1):
        candidate = format_asset_id(rng.randint(ASSET_ID_MIN, ASSET_ID_MAX))
        if candidate not in taken:
            return AllocationSuccess(asset_id=candidate, attempts=attempt)

    return AllocationExhausted(attempts=max_attempts)
