"""
Deck building service.

Builds a 99-card Commander mainboard around a commander:

1. Look up the commander and derive its colour identity
2. Gather candidates with targeted searches plus staple mana rocks
3. Filter, score and allocate non-land slots against the power preset quotas
4. Fill land slots with curated utility lands and basics
5. Tally the finished list into a report

Only card lookups are asynchronous; everything after the fetch is plain
synchronous computation.
"""

import logging
import random
from dataclasses import dataclass
from typing import Protocol

from commanderforge.analysis.report import build_deck_report
from commanderforge.filtering.candidate_pool import build_candidate_pool
from commanderforge.filtering.scored_pool import build_scored_pool
from commanderforge.models.card import Card
from commanderforge.models.deck import DeckResult
from commanderforge.models.deck_config import DeckConfig
from commanderforge.models.quotas import quotas_for_power
from commanderforge.parsers.scryfall import ScryfallCard, card_from_record
from commanderforge.services.allocator import allocate_nonlands
from commanderforge.services.mana_base import CURATED_UTILITY_LANDS, build_mana_base
from commanderforge.services.scryfall_client import CardLookupError
from commanderforge.tagging.themes import theme_search_query

logger = logging.getLogger(__name__)

# Every candidate search is constrained to these
BASE_SEARCH_FILTER = "legal:commander ci:{identity} -t:land -is:digital game:paper"

# Staple mana rocks added by exact name
STAPLE_ROCKS = ("Sol Ring", "Arcane Signet", "Fellwar Stone", "Mind Stone")

# Two-colour Signets, keyed by the colour pair (lower-case identity symbols)
SIGNETS: tuple[tuple[str, str], ...] = (
    ("wu", "Azorius Signet"),
    ("ub", "Dimir Signet"),
    ("br", "Rakdos Signet"),
    ("rg", "Gruul Signet"),
    ("gw", "Selesnya Signet"),
    ("wb", "Orzhov Signet"),
    ("ur", "Izzet Signet"),
    ("bg", "Golgari Signet"),
    ("rw", "Boros Signet"),
    ("gu", "Simic Signet"),
)


class CommanderNotDeterminedError(ValueError):
    """Raised when no commander name is available for a build or evaluation."""

    pass


class CardSource(Protocol):
    """Card-data collaborator: exact-name lookups and searches."""

    async def get_card_named(self, name: str) -> ScryfallCard: ...

    async def search(self, query: str, max_cards: int) -> list[ScryfallCard]: ...


@dataclass(frozen=True)
class CandidateSearch:
    """One targeted candidate search."""

    label: str
    query: str
    max_cards: int


def identity_code(commander: Card) -> str:
    """Scryfall ci: value for the commander ("c" when colorless)."""
    return "".join(commander.color_identity).lower() or "c"


def candidate_searches(config: DeckConfig, identity: str) -> list[CandidateSearch]:
    """
    Targeted searches for a build.

    Role searches get a sixth of the candidate cap (wipes and protection a
    tenth), plus one search per requested theme that has a query.
    """
    base = BASE_SEARCH_FILTER.format(identity=identity)
    sixth = config.max_candidates // 6
    tenth = config.max_candidates // 10

    searches = [
        CandidateSearch(
            "ramp", f'{base} (o:"add {{" OR o:"search your library for a land")', sixth
        ),
        CandidateSearch(
            "draw", f'{base} (o:"draw a card" OR (o:"exile the top" o:"you may play"))', sixth
        ),
        CandidateSearch(
            "removal",
            f'{base} (o:"destroy target" OR o:"exile target" OR o:"counter target")',
            sixth,
        ),
        CandidateSearch("wipes", f'{base} (o:"destroy all" OR o:"exile all")', tenth),
        CandidateSearch(
            "protection",
            f'{base} (o:hexproof OR o:indestructible OR o:"phase out" '
            'OR (o:return o:"from your graveyard"))',
            tenth,
        ),
    ]

    for theme in config.themes:
        theme_query = theme_search_query(theme)
        if theme_query is None:
            logger.debug("No search query for theme %s", theme)
            continue
        searches.append(CandidateSearch(f"theme:{theme}", f"{base} ({theme_query})", sixth))

    return searches


def staple_names_for(identity: str) -> list[str]:
    """Staple rocks plus the Signet for each colour pair inside the identity."""
    names = list(STAPLE_ROCKS)
    for pair, signet in SIGNETS:
        if all(symbol in identity for symbol in pair):
            names.append(signet)
    return names


async def fetch_card(source: CardSource, name: str, themes: list[str]) -> Card:
    """Look up a card by exact name and normalize it."""
    record = await source.get_card_named(name)
    return card_from_record(record, themes)


async def fetch_optional_cards(
    source: CardSource, names: list[str], themes: list[str]
) -> list[Card]:
    """Look up cards by name, skipping any that fail."""
    cards: list[Card] = []
    for name in names:
        try:
            cards.append(await fetch_card(source, name, themes))
        except CardLookupError as e:
            logger.debug("Skipping optional card %s: %s", name, e)
    return cards


async def gather_candidates(
    config: DeckConfig, commander: Card, source: CardSource
) -> list[Card]:
    """Run the candidate searches and staple lookups, in that order."""
    identity = identity_code(commander)
    fetched: list[Card] = []

    for search in candidate_searches(config, identity):
        records = await source.search(search.query, search.max_cards)
        logger.info("Search %s: %d cards", search.label, len(records))
        fetched.extend(card_from_record(r, config.themes) for r in records)

    staples = await fetch_optional_cards(source, staple_names_for(identity), config.themes)
    fetched.extend(c for c in staples if not c.is_land)

    return fetched


async def build_commander_deck(config: DeckConfig, source: CardSource) -> DeckResult:
    """
    Build a Commander deck for the configured commander.

    Args:
        config: Deck configuration
        source: Card-data collaborator (ScryfallClient in production)

    Returns:
        DeckResult with the mainboard (non-lands then lands), report and warnings

    Raises:
        CommanderNotDeterminedError: If no commander name was given
        CardLookupError: If the commander lookup or a search fails
    """
    if not config.commander:
        raise CommanderNotDeterminedError("A commander name is required to build a deck")

    warnings: list[str] = []

    commander = await fetch_card(source, config.commander, config.themes)
    if not commander.is_commander_eligible:
        warnings.append(
            f"Commander may not be a legal commander (heuristic). You chose: {commander.name}"
        )

    quotas = quotas_for_power(config.power)
    logger.info(
        "Building %s deck for %s (identity %s)",
        config.power,
        commander.name,
        identity_code(commander),
    )

    fetched = await gather_candidates(config, commander, source)
    pool = build_candidate_pool(config, commander, fetched)
    scored = build_scored_pool(config, commander, pool.cards)

    allocation = allocate_nonlands(config, quotas, commander, scored)
    warnings.extend(allocation.warnings)

    utility_lands = await fetch_optional_cards(source, list(CURATED_UTILITY_LANDS), config.themes)
    rng = random.Random(config.effective_seed)
    lands = build_mana_base(config, commander, quotas.lands, utility_lands, rng)

    mainboard = allocation.selection + lands
    report = build_deck_report(mainboard)

    logger.info("Built %d-card mainboard with %d warnings", len(mainboard), len(warnings))
    return DeckResult(commander=commander, mainboard=mainboard, report=report, warnings=warnings)
