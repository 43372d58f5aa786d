import math
from typing import Tuple

K_FACTOR = 32


def expected_score(rating: int, opponent_rating: int) -> float:
    """Probability that a player rated `rating` beats `opponent_rating`."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / 400.0))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def elo_deltas(winner_rating: int, loser_rating: int, k_factor: int = K_FACTOR) -> Tuple[int, int]:
    """Return (winner_gain, loser_loss) for a decisive result.

    Each side is rounded on its own, so the two magnitudes can differ by
    one point.
    """
    expected = expected_score(winner_rating, loser_rating)
    return (
        _round_half_up(k_factor * (1.0 - expected)),
        _round_half_up(k_factor * expected),
    )
