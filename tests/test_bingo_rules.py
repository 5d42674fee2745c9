import numpy as np
import pytest

from bingo_server.domain.bingo_rules import (
    GAME_VARIANTS,
    display_number,
    draw_number,
    get_variant,
    is_full_house,
    potential_win,
    recent_calls,
)
from bingo_server.errors import RangeExhaustedError


def test_potential_win_matches_fixed_field_formula():
    assert potential_win(100) == 6984
    assert potential_win(10) == 698
    assert potential_win(100) == potential_win(100)


@pytest.mark.parametrize(
    "variant_id, number, expected",
    [
        ("75ball", 1, "B-1"),
        ("75ball", 15, "B-15"),
        ("75ball", 16, "I-16"),
        ("75ball", 75, "O-75"),
        ("pattern", 46, "G-46"),
        ("50ball", 10, "B-10"),
        ("50ball", 11, "I-11"),
        ("50ball", 50, "O-50"),
        ("90ball", 42, "42"),
        ("coverall", 90, "90"),
        ("30ball", 7, "7"),
    ],
)
def test_display_number(variant_id, number, expected):
    assert display_number(number, GAME_VARIANTS[variant_id]) == expected


def test_get_variant_unknown_is_none():
    assert get_variant("80ball") is None
    assert get_variant("75ball").number_range == 75


def test_draw_number_never_repeats_and_stays_in_range():
    rng = np.random.default_rng(3)
    called = []
    for _ in range(30):
        called.append(draw_number(rng, called, 30))

    assert sorted(called) == list(range(1, 31))
    with pytest.raises(RangeExhaustedError):
        draw_number(rng, called, 30)


def test_is_full_house():
    assert is_full_house([3, 9], {1, 3, 9})
    assert not is_full_house([3, 9, 12], {3, 9})


def test_recent_calls_keeps_last_ten():
    assert recent_calls(list(range(1, 13))) == list(range(3, 13))
