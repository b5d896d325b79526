"""
Deck evaluation service.

Scores an existing Commander deck list: role counts against the power
preset quotas, colour demand against sources, and opening-hand land
statistics. Produces categorized suggestions and a 0-100 score.
"""

import logging
from collections.abc import Sequence

from commanderforge.analysis.mana import COLOR_NAMES, analyze_mana
from commanderforge.analysis.report import build_deck_report
from commanderforge.analysis.simulator import simulate_opening_hands
from commanderforge.config import MAINBOARD_SIZE
from commanderforge.models.card import Card, CardRole
from commanderforge.models.deck import (
    DeckEvaluationResult,
    DeckReport,
    DeckSuggestion,
    ManaColorStats,
    SimulationStats,
)
from commanderforge.models.deck_config import DeckConfig
from commanderforge.models.quotas import Quotas, quotas_for_power
from commanderforge.parsers.deck_list import parse_deck_list
from commanderforge.services.deck_builder import (
    CardSource,
    CommanderNotDeterminedError,
    fetch_card,
)

logger = logging.getLogger(__name__)

# Opening 7 should hit 2+ lands at least this often (percent)
MIN_TWO_LAND_PCT = 80.0
MIN_COLOR_SOURCES = 10

# Suggestion priorities (lower sorts first)
PRIORITY_DECK_SIZE = 10
PRIORITY_LANDS = 20
PRIORITY_MANA = 30
PRIORITY_DRAW = 40
PRIORITY_INTERACTION = 50
PRIORITY_WIN_CONS = 60
PRIORITY_RAMP = 70
PRIORITY_GROUP_HUG = 80

# Score penalties
LAND_PENALTY = 15
DEFICIT_PENALTY_PER_CARD = 2
MAX_DEFICIT_PENALTY = 10
MAX_RAMP_EXCESS_PENALTY = 12


# =============================================================================
# SUGGESTIONS
# =============================================================================


def quota_suggestions(
    quotas: Quotas, report: DeckReport, config: DeckConfig
) -> list[DeckSuggestion]:
    """Suggestions from role counts versus quota targets and soft caps."""
    suggestions: list[DeckSuggestion] = []

    if report.ramp > quotas.ramp_soft_cap:
        suggestions.append(
            DeckSuggestion(
                "Ramp",
                f"Ramp is high ({report.ramp}). Consider trimming toward "
                f"~{quotas.ramp}-{quotas.ramp_soft_cap} unless this is intentionally turbo.",
                PRIORITY_RAMP,
            )
        )

    if report.draw_engines < quotas.draw_engines:
        suggestions.append(
            DeckSuggestion(
                "Draw",
                f"Draw engines are low ({report.draw_engines}). "
                f"Target ~{quotas.draw_engines}+ engines for your power band.",
                PRIORITY_DRAW,
            )
        )

    # Only meaningful when the deck is built to share cards
    if "group_hug" in config.themes and report.draw_group < quotas.group_draw:
        suggestions.append(
            DeckSuggestion(
                "GroupHug",
                f"Group draw is low ({report.draw_group}). "
                f"For group hug, aim ~{quotas.group_draw}+ symmetrical draw effects.",
                PRIORITY_GROUP_HUG,
            )
        )

    if report.removal < quotas.removal:
        suggestions.append(
            DeckSuggestion(
                "Interaction",
                f"Removal is low ({report.removal}). Target ~{quotas.removal}+.",
                PRIORITY_INTERACTION,
            )
        )

    if report.wipes < quotas.wipes:
        suggestions.append(
            DeckSuggestion(
                "Interaction",
                f"Board wipes are low ({report.wipes}). Target ~{quotas.wipes}.",
                PRIORITY_INTERACTION,
            )
        )

    return suggestions


def win_con_suggestions(quotas: Quotas, cards: Sequence[Card]) -> list[DeckSuggestion]:
    win_cons = sum(1 for c in cards if c.has_role(CardRole.WIN_CON))
    if win_cons >= quotas.win_cons_min:
        return []
    return [
        DeckSuggestion(
            "WinCons",
            f"Only {win_cons} wincon-tagged cards detected. "
            f"Consider adding {quotas.win_cons_min - win_cons}+ clear finishers.",
            PRIORITY_WIN_CONS,
        )
    ]


def mana_suggestions(mana: Sequence[ManaColorStats]) -> list[DeckSuggestion]:
    suggestions: list[DeckSuggestion] = []
    for stats in mana:
        if stats.demand > 0 and stats.sources < MIN_COLOR_SOURCES:
            color = COLOR_NAMES[stats.color]
            suggestions.append(
                DeckSuggestion(
                    "Mana",
                    f"{color} demand exists but {color.lower()} sources look low "
                    f"(<{MIN_COLOR_SOURCES}).",
                    PRIORITY_MANA,
                )
            )
    return suggestions


def land_suggestions(simulation: SimulationStats) -> list[DeckSuggestion]:
    pct = simulation.at_least_2_lands_in_7_pct
    if pct >= MIN_TWO_LAND_PCT:
        return []
    return [
        DeckSuggestion(
            "Lands",
            f"Opening 7 has <80% chance of 2+ lands ({pct:.1f}%). Consider +1-2 lands.",
            PRIORITY_LANDS,
        )
    ]


def deck_size_suggestions(mainboard_size: int) -> list[DeckSuggestion]:
    if mainboard_size == MAINBOARD_SIZE:
        return []
    return [
        DeckSuggestion(
            "DeckSize",
            f"Mainboard is {mainboard_size} cards; expected {MAINBOARD_SIZE} for Commander.",
            PRIORITY_DECK_SIZE,
        )
    ]


# =============================================================================
# SCORE
# =============================================================================


def score_deck(quotas: Quotas, report: DeckReport, simulation: SimulationStats) -> int:
    """
    Structural score in [0, 100].

    Starts at 100 and subtracts for a shaky land count, missing draw engines
    or removal, and ramp above the soft cap.
    """
    score = 100

    if simulation.at_least_2_lands_in_7_pct < MIN_TWO_LAND_PCT:
        score -= LAND_PENALTY

    if report.draw_engines < quotas.draw_engines:
        deficit = quotas.draw_engines - report.draw_engines
        score -= min(MAX_DEFICIT_PENALTY, deficit * DEFICIT_PENALTY_PER_CARD)

    if report.removal < quotas.removal:
        deficit = quotas.removal - report.removal
        score -= min(MAX_DEFICIT_PENALTY, deficit * DEFICIT_PENALTY_PER_CARD)

    if report.ramp > quotas.ramp_soft_cap:
        excess = report.ramp - quotas.ramp_soft_cap
        score -= min(MAX_RAMP_EXCESS_PENALTY, excess * DEFICIT_PENALTY_PER_CARD)

    return max(0, min(100, score))


# =============================================================================
# EVALUATION
# =============================================================================


def evaluate_cards(
    config: DeckConfig,
    commander: Card,
    mainboard: list[Card],
    trials: int | None = None,
    seed: int | None = None,
    warnings: list[str] | None = None,
) -> DeckEvaluationResult:
    """
    Evaluate an already-fetched deck.

    Args:
        config: Deck configuration (power preset, themes)
        commander: The deck's commander
        mainboard: Mainboard cards, one entry per copy
        trials: Simulation trials (settings default when None)
        seed: Simulation seed (settings default when None)
        warnings: Notes carried over from parsing

    Returns:
        DeckEvaluationResult with report, simulation, mana stats, suggestions and score
    """
    quotas = quotas_for_power(config.power)
    report = build_deck_report(mainboard)
    mana = analyze_mana(mainboard)
    simulation = simulate_opening_hands(mainboard, trials=trials, seed=seed)

    suggestions = (
        deck_size_suggestions(len(mainboard))
        + quota_suggestions(quotas, report, config)
        + win_con_suggestions(quotas, mainboard)
        + mana_suggestions(mana)
        + land_suggestions(simulation)
    )
    suggestions.sort(key=lambda s: s.priority)

    notes = list(warnings or [])
    if not commander.is_commander_eligible:
        notes.append(f"Commander may not be a legal commander (heuristic): {commander.name}")

    score = score_deck(quotas, report, simulation)
    logger.info("Evaluated %s: score %d, %d suggestions", commander.name, score, len(suggestions))

    return DeckEvaluationResult(
        commander=commander,
        mainboard=mainboard,
        report=report,
        simulation=simulation,
        mana=mana,
        suggestions=suggestions,
        score=score,
        warnings=notes,
    )


async def evaluate_deck_list(
    deck_text: str,
    config: DeckConfig,
    source: CardSource,
    trials: int | None = None,
    seed: int | None = None,
) -> DeckEvaluationResult:
    """
    Parse, fetch and evaluate a deck list.

    config.commander, when set, overrides commander detection.

    Raises:
        CommanderNotDeterminedError: If the list has no resolvable commander
        CardLookupError: If a card lookup fails
    """
    parsed = parse_deck_list(deck_text, config.commander or None)
    if not parsed.commander:
        raise CommanderNotDeterminedError(
            f"Could not determine the commander from a {len(parsed.mainboard)}-card list; "
            "pass the commander explicitly"
        )

    commander = await fetch_card(source, parsed.commander, config.themes)

    # Repeated names (basics) are looked up once
    fetched: dict[str, Card] = {}
    mainboard: list[Card] = []
    for name in parsed.mainboard:
        key = name.lower()
        if key not in fetched:
            fetched[key] = await fetch_card(source, name, config.themes)
        mainboard.append(fetched[key])

    logger.info("Fetched %d mainboard cards (%d unique)", len(mainboard), len(fetched))
    return evaluate_cards(
        config, commander, mainboard, trials=trials, seed=seed, warnings=parsed.warnings
    )
