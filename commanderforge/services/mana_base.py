"""
Mana base service.

Builds the land portion of a deck: a short list of curated utility lands
(whatever the caller managed to fetch), then basics split randomly across
the commander's colours.
"""

import logging
import random
from collections.abc import Iterable, Sequence
from decimal import Decimal

from commanderforge.filtering.candidate_pool import passes_filters
from commanderforge.models.card import Card
from commanderforge.models.deck_config import DeckConfig

logger = logging.getLogger(__name__)

# Lands every Commander deck is happy to run, looked up by exact name
CURATED_UTILITY_LANDS = (
    "Command Tower",
    "Path of Ancestry",
    "Exotic Orchard",
    "Terramorphic Expanse",
    "Evolving Wilds",
    "Myriad Landscape",
)

COLOR_TO_BASIC_LAND = {
    "W": "Plains",
    "U": "Island",
    "B": "Swamp",
    "R": "Mountain",
    "G": "Forest",
}

COLORLESS_BASIC_LAND = "Wastes"


class ManaBaseError(RuntimeError):
    """Raised when a mana base comes out with the wrong number of lands."""

    pass


def basic_land_stub(name: str) -> Card:
    """A generated basic land card. Basics are unlimited."""
    return Card(
        id=f"basic:{name.lower()}",
        name=name,
        oracle_text="",
        type_line="Basic Land",
        mana_value=Decimal(0),
        color_identity=(),
        usd_price=Decimal(0),
    )


def basic_land_for(color_identity: Sequence[str], rng: random.Random) -> Card:
    """Pick a basic for a uniformly random colour of the identity (Wastes if colorless)."""
    if not color_identity:
        return basic_land_stub(COLORLESS_BASIC_LAND)

    symbol = rng.choice(list(color_identity)).upper()
    return basic_land_stub(COLOR_TO_BASIC_LAND.get(symbol, COLORLESS_BASIC_LAND))


def build_mana_base(
    config: DeckConfig,
    commander: Card,
    land_count: int,
    utility_lands: Iterable[Card] = (),
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Build exactly land_count lands.

    Args:
        config: Deck configuration (filters, seed)
        commander: The deck's commander (colour identity)
        land_count: Number of land slots
        utility_lands: Fetched curated lands; non-lands and off-identity cards are dropped
        rng: Random source for basic colours; seeded from the config when omitted

    Returns:
        Utility lands first, then basics

    Raises:
        ManaBaseError: If the result doesn't hold exactly land_count cards
    """
    rng = rng or random.Random(config.effective_seed)

    lands: list[Card] = []
    seen: set[str] = set()
    for card in utility_lands:
        if len(lands) >= land_count:
            break
        if not card.is_land or card.name_key in seen:
            continue
        if not passes_filters(config, card, commander.color_identity):
            logger.debug("Skipping utility land %s: outside commander identity", card.name)
            continue
        lands.append(card)
        seen.add(card.name_key)

    while len(lands) < land_count:
        lands.append(basic_land_for(commander.color_identity, rng))

    if len(lands) != land_count:
        raise ManaBaseError(f"Mana base has {len(lands)} lands; expected {land_count}")

    logger.info("Mana base: %d utility lands, %d basics", len(seen), land_count - len(seen))
    return lands
