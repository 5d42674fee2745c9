"""Bingo rules that are independent from transport and scheduling.

Rule of thumb:
- OK: variant lookup, number drawing, display formatting, payout math.
- Not OK: touching connections, rooms, the scheduler, datetime.now(), etc.
"""

import math
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

import numpy as np

from bingo_server.errors import RangeExhaustedError

BINGO_LETTERS = "BINGO"

# Payout is estimated against a full field, not the actual room size.
PAYOUT_FIELD_SIZE = 90
PAYOUT_POOL_SHARE = 0.8
PAYOUT_HOUSE_FACTOR = 0.97

RECENT_CALLS_SHOWN = 10


class GameVariant(NamedTuple):
    variant_id: str
    name: str
    number_range: int
    lettered: bool

    @property
    def column_size(self) -> int:
        return self.number_range // len(BINGO_LETTERS)


GAME_VARIANTS: Dict[str, GameVariant] = {
    variant.variant_id: variant
    for variant in (
        GameVariant("75ball", "75-ቢንጎ", 75, True),
        GameVariant("90ball", "90-ቢንጎ", 90, False),
        GameVariant("30ball", "30-ቢንጎ", 30, False),
        GameVariant("50ball", "50-ቢንጎ", 50, True),
        GameVariant("pattern", "ንድፍ ቢንጎ", 75, True),
        GameVariant("coverall", "ሙሉ ቤት", 90, False),
    )
}


def get_variant(variant_id: str) -> Optional[GameVariant]:
    """Return the variant registered under variant_id, or None."""
    return GAME_VARIANTS.get(variant_id)


def potential_win(stake: int) -> int:
    """Calculate the payout for a single win

    Args:
        stake (int): The stake the winning player registered with

    Returns:
        int: floor(0.8 * 90 * stake * 0.97)
    """
    return math.floor(PAYOUT_POOL_SHARE * PAYOUT_FIELD_SIZE * stake * PAYOUT_HOUSE_FACTOR)


def display_number(number: int, variant: GameVariant) -> str:
    """Format a called number for display, e.g. "B-1" or "42"."""
    if not variant.lettered:
        return str(number)
    column_index = (number - 1) // variant.column_size
    letter = BINGO_LETTERS[min(column_index, len(BINGO_LETTERS) - 1)]
    return f"{letter}-{number}"


def draw_number(
    rng: np.random.Generator, called_numbers: Iterable[int], number_range: int
) -> int:
    """Draw a number in [1, number_range] that has not been called yet

    Args:
        rng (np.random.Generator): Source of uniform random integers
        called_numbers (Iterable[int]): Numbers already called this round
        number_range (int): Upper bound of the variant's range

    Raises:
        RangeExhaustedError: Every number in the range has been called

    Returns:
        int: The newly drawn number
    """
    called: Set[int] = set(called_numbers)
    if len(called) >= number_range:
        raise RangeExhaustedError(f"All {number_range} numbers have been called")
    while True:
        number = int(rng.integers(1, number_range, endpoint=True))
        if number not in called:
            return number


def is_full_house(called_numbers: List[int], marked_numbers: Set[int]) -> bool:
    """A player wins when every called number is in their marked set."""
    return all(number in marked_numbers for number in called_numbers)


def recent_calls(called_numbers: List[int]) -> List[int]:
    return called_numbers[-RECENT_CALLS_SHOWN:]
