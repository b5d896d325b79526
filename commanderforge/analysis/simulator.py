"""
Monte Carlo opening-hand simulation.

Shuffles the deck many times and looks at the land count in the first 6,
7 and 10 cards:
- keepable 7 / keepable 6: 2 to 4 lands in hand
- at least 2 lands in the opening 7
- at least 3 lands in the first 10 cards (third land drop by turn 3 on the play)

Trials are independent, so they are sampled in vectorised chunks with numpy.
A fixed seed gives identical statistics for the same deck.
"""

from collections.abc import Sequence

import numpy as np

from commanderforge.config import settings
from commanderforge.models.card import Card
from commanderforge.models.deck import SimulationStats

KEEPABLE_MIN_LANDS = 2
KEEPABLE_MAX_LANDS = 4
OPENING_HAND = 7
MULLIGAN_HAND = 6
CARDS_SEEN_BY_TURN_3 = 10
THIRD_LAND = 3

# Rows per vectorised batch (bounds memory at roughly chunk * deck size ints)
_CHUNK_TRIALS = 10_000


def _land_counts(order: np.ndarray, is_land: np.ndarray, depth: int) -> np.ndarray:
    """Land count in the first `depth` cards of each shuffled row."""
    depth = min(depth, order.shape[1])
    return is_land[order[:, :depth]].sum(axis=1)


def simulate_opening_hands(
    deck: Sequence[Card],
    trials: int | None = None,
    seed: int | None = None,
) -> SimulationStats:
    """
    Estimate opening-hand land statistics by repeated shuffling.

    Args:
        deck: Cards to shuffle (the mainboard)
        trials: Number of shuffles; defaults to settings.simulation_trials
        seed: Random seed; defaults to settings.simulation_seed

    Returns:
        SimulationStats with each percentage in [0, 100]. An empty deck or
        non-positive trial count gives all zeros.
    """
    trials = settings.simulation_trials if trials is None else trials
    seed = settings.simulation_seed if seed is None else seed

    n = len(deck)
    if trials <= 0 or n == 0:
        return SimulationStats(
            trials=max(trials, 0),
            keepable_7_pct=0.0,
            keepable_6_pct=0.0,
            at_least_2_lands_in_7_pct=0.0,
            hit_third_land_by_turn_3_pct=0.0,
        )

    rng = np.random.default_rng(seed)
    is_land = np.fromiter((c.is_land for c in deck), dtype=bool, count=n)
    indices = np.arange(n)

    keep_7 = keep_6 = two_in_7 = three_in_10 = 0
    done = 0
    while done < trials:
        size = min(_CHUNK_TRIALS, trials - done)
        order = rng.permuted(np.tile(indices, (size, 1)), axis=1)

        lands_7 = _land_counts(order, is_land, OPENING_HAND)
        lands_6 = _land_counts(order, is_land, MULLIGAN_HAND)
        lands_10 = _land_counts(order, is_land, CARDS_SEEN_BY_TURN_3)

        keep_7 += int(((lands_7 >= KEEPABLE_MIN_LANDS) & (lands_7 <= KEEPABLE_MAX_LANDS)).sum())
        keep_6 += int(((lands_6 >= KEEPABLE_MIN_LANDS) & (lands_6 <= KEEPABLE_MAX_LANDS)).sum())
        two_in_7 += int((lands_7 >= KEEPABLE_MIN_LANDS).sum())
        three_in_10 += int((lands_10 >= THIRD_LAND).sum())
        done += size

    return SimulationStats(
        trials=trials,
        keepable_7_pct=keep_7 * 100.0 / trials,
        keepable_6_pct=keep_6 * 100.0 / trials,
        at_least_2_lands_in_7_pct=two_in_7 * 100.0 / trials,
        hit_third_land_by_turn_3_pct=three_in_10 * 100.0 / trials,
    )
