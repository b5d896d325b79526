"""
Scored Candidate Pool - ordering for quota allocation.

Each candidate gets an additive score from its mana value, roles, theme
tags, tutor policy and price. The score is only used to order the pool;
it is never persisted or compared across configs.

INVARIANT: Ordering is a total order (score descending, then name
case-insensitively) and depends on nothing but the inputs.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from commanderforge.models.card import Card, CardRole
from commanderforge.models.deck_config import DeckConfig

# Cheap cards get up to (6 - mana value) * this bonus
LOW_MANA_VALUE_WEIGHT = 0.35
LOW_MANA_VALUE_CEILING = 6.0

ROLE_WEIGHTS: dict[CardRole, float] = {
    CardRole.RAMP: 2.2,
    CardRole.DRAW: 2.0,
    CardRole.REMOVAL: 1.8,
    CardRole.WIPE: 1.2,
    CardRole.PROTECTION: 1.0,
}

# Cantrips are down-weighted draw
CANTRIP_DRAW_WEIGHT = 0.35
THEME_TAG_WEIGHT = 1.4
TUTOR_PENALTY = 1.0

# Budget penalty: price / divisor, capped
PRICE_PENALTY_DIVISOR = 20.0
MAX_PRICE_PENALTY = 2.0

# Tie-break jitter: FNV-1a (32-bit) of the lower-cased name, modulo a small prime
_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193
_JITTER_MODULUS = 17
_JITTER_SCALE = 0.001


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a hash."""
    h = _FNV_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def name_jitter(name: str) -> float:
    """Small, stable per-name perturbation in [0, 0.016]."""
    return (fnv1a_32(name.lower().encode("utf-8")) % _JITTER_MODULUS) * _JITTER_SCALE


@dataclass(frozen=True, slots=True)
class ScoredCard:
    """
    A card with its selection score.

    Higher scores = picked earlier.
    """

    card: Card
    score: float

    def __lt__(self, other: "ScoredCard") -> bool:
        """Sort by score descending, then name ascending (case-insensitive)."""
        return (-self.score, self.card.name_key) < (-other.score, other.card.name_key)


@dataclass(frozen=True)
class ScoredCandidatePool:
    """
    Candidate pool in selection order.

    Usage:
        pool = build_scored_pool(config, commander, cards)
        for card in pool.cards:
            ...
    """

    scored_cards: tuple[ScoredCard, ...]
    config: DeckConfig

    @property
    def cards(self) -> list[Card]:
        """All cards in selection order."""
        return [s.card for s in self.scored_cards]


# =============================================================================
# SCORING
# =============================================================================


def score_terms(config: DeckConfig, card: Card) -> dict[str, float]:
    """
    Independent, additive score terms for a candidate, keyed by term name.

    Terms that don't apply are left out.
    """
    terms: dict[str, float] = {}

    mana_value = float(card.mana_value)
    terms["mana_value"] = max(0.0, LOW_MANA_VALUE_CEILING - mana_value) * LOW_MANA_VALUE_WEIGHT

    for role, weight in ROLE_WEIGHTS.items():
        if not card.has_role(role):
            continue
        if role is CardRole.DRAW and card.has_role(CardRole.CANTRIP):
            weight = CANTRIP_DRAW_WEIGHT
        terms[role.value] = weight

    if card.theme_tags:
        terms["themes"] = len(card.theme_tags) * THEME_TAG_WEIGHT

    if card.has_role(CardRole.TUTOR) and not config.allow_tutors:
        terms["tutor"] = -TUTOR_PENALTY

    if config.has_budget and card.usd_price is not None:
        terms["price"] = -min(MAX_PRICE_PENALTY, float(card.usd_price) / PRICE_PENALTY_DIVISOR)

    terms["jitter"] = name_jitter(card.name)
    return terms


def score_card(config: DeckConfig, commander: Card, card: Card) -> ScoredCard:  # noqa: ARG001
    """Score a candidate for selection order."""
    return ScoredCard(card=card, score=sum(score_terms(config, card).values()))


def build_scored_pool(
    config: DeckConfig, commander: Card, cards: Iterable[Card]
) -> ScoredCandidatePool:
    """
    Score every candidate and sort into selection order.

    Args:
        config: Deck configuration (tutor policy, budget)
        commander: The deck's commander
        cards: Filtered candidates

    Returns:
        ScoredCandidatePool sorted by score descending, name ascending
    """
    scored = [score_card(config, commander, card) for card in cards]
    scored.sort()
    return ScoredCandidatePool(scored_cards=tuple(scored), config=config)
