"""
Candidate pool filtering.

Deterministic filters applied to fetched cards before scoring:
colour identity containment, optional stax and infinite-combo exclusions,
commander self-exclusion, and singleton dedupe by case-insensitive name.

INVARIANTS:
- Filtering only removes cards, never adds
- Same input cards + config -> same pool, in the same order
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from commanderforge.models.card import Card
from commanderforge.models.deck_config import DeckConfig

logger = logging.getLogger(__name__)

# Text that usually marks a stax piece
STAX_PHRASES = (
    "players can't",
    "can't cast",
    "can't search",
    "skip your",
    "skip their",
    "doesn't untap",
    "can't untap",
    "each player can't",
)

# Well-known infinite combo pieces
INFINITE_COMBO_DENYLIST = frozenset(
    {
        "isochron scepter",
        "dramatic reversal",
        "food chain",
        "thassa's oracle",
        "demonic consultation",
        "tainted pact",
    }
)


@dataclass
class CandidatePoolMetrics:
    """Counts recorded while building a candidate pool."""

    total_cards: int = 0
    after_commander_filter: int = 0
    after_rule_filters: int = 0
    final_pool_size: int = 0


@dataclass
class CandidatePool:
    """Filtered, singleton candidate cards in fetch order."""

    cards: list[Card] = field(default_factory=list)
    metrics: CandidatePoolMetrics = field(default_factory=CandidatePoolMetrics)

    @property
    def size(self) -> int:
        return len(self.cards)


def within_color_identity(card: Card, commander_identity: Sequence[str]) -> bool:
    """True if every colour of the card appears in the commander's identity."""
    allowed = {c.upper() for c in commander_identity}
    return all(c.upper() in allowed for c in card.color_identity)


def is_stax(card: Card) -> bool:
    lowered = card.oracle_text.lower()
    return any(p in lowered for p in STAX_PHRASES)


def passes_filters(config: DeckConfig, card: Card, commander_identity: Sequence[str]) -> bool:
    """
    Check a candidate against the colour identity and configured exclusions.

    Commander legality is not rechecked here; candidate searches already
    constrain it.
    """
    if not within_color_identity(card, commander_identity):
        return False
    if config.no_stax and is_stax(card):
        return False
    if config.no_infinite and card.name_key in INFINITE_COMBO_DENYLIST:
        return False
    return True


def is_commander_card(commander: Card, candidate: Card) -> bool:
    """Same card as the commander, compared by case-insensitive name."""
    return candidate.name_key == commander.name_key


def dedupe_by_name(cards: Iterable[Card]) -> list[Card]:
    """Singleton rule: keep the first card seen for each case-insensitive name."""
    seen: set[str] = set()
    unique: list[Card] = []
    for card in cards:
        if card.name_key in seen:
            continue
        seen.add(card.name_key)
        unique.append(card)
    return unique


def build_candidate_pool(
    config: DeckConfig, commander: Card, cards: Iterable[Card]
) -> CandidatePool:
    """
    Filter fetched cards into the pool considered for selection.

    Args:
        config: Deck configuration (stax/infinite exclusions)
        commander: The deck's commander; it never enters its own pool
        cards: Fetched candidates, in fetch order

    Returns:
        CandidatePool with filtered, deduplicated cards and stage counts
    """
    metrics = CandidatePoolMetrics()
    all_cards = list(cards)
    metrics.total_cards = len(all_cards)

    remaining = [c for c in all_cards if not is_commander_card(commander, c)]
    metrics.after_commander_filter = len(remaining)

    remaining = [c for c in remaining if passes_filters(config, c, commander.color_identity)]
    metrics.after_rule_filters = len(remaining)

    unique = dedupe_by_name(remaining)
    metrics.final_pool_size = len(unique)

    logger.info(
        "Candidate pool: %d fetched, %d after filters, %d unique",
        metrics.total_cards,
        metrics.after_rule_filters,
        metrics.final_pool_size,
    )

    return CandidatePool(cards=unique, metrics=metrics)
