"""
Quota allocation service.

Selects the non-land part of a Commander deck from a scored candidate pool:

1. Category passes in fixed priority order, each taking the best-scored
   cards for its predicate until its quota target is met
2. Tutor trim down to the preset's soft cap (unless tutors are allowed)
3. Fill pass with per-category soft caps; payoff and themed cards bypass them
4. "Pool too small" warning if the budget still isn't filled
5. Commander self-inclusion removed and refilled

Shortfalls never raise: they are reported as warnings.

INVARIANTS:
- No two selected cards share a case-insensitive name
- Never more than (99 - land quota) cards
- Same pool + config + quotas -> identical ordered selection
"""

import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal

from commanderforge.filtering.candidate_pool import is_commander_card
from commanderforge.filtering.scored_pool import ScoredCandidatePool
from commanderforge.models.card import Card, CardRole
from commanderforge.models.deck_config import DeckConfig
from commanderforge.models.quotas import Quotas
from commanderforge.tagging.roles import is_personal_draw

logger = logging.getLogger(__name__)

# Cards above this price are skipped by category passes on a budgeted precon build
AFFORDABILITY_CEILING_USD = Decimal(25)
STRICT_BUDGET_POWER = "precon"


# =============================================================================
# CATEGORIES
# =============================================================================


def _is_ramp(card: Card) -> bool:
    return card.has_role(CardRole.RAMP)


def _is_group_draw(card: Card) -> bool:
    return card.has_role(CardRole.GROUP_DRAW)


def _is_removal(card: Card) -> bool:
    return card.has_role(CardRole.REMOVAL)


def _is_wipe(card: Card) -> bool:
    return card.has_role(CardRole.WIPE)


def _is_protection(card: Card) -> bool:
    return card.has_role(CardRole.PROTECTION)


def _is_payoff_or_themed(card: Card) -> bool:
    return card.has_role(CardRole.PAYOFF) or bool(card.theme_tags)


def _is_tutor(card: Card) -> bool:
    return card.has_role(CardRole.TUTOR)


def _is_cantrip(card: Card) -> bool:
    return card.has_role(CardRole.CANTRIP)


# Counted categories, keyed the way soft caps and warnings refer to them
CATEGORY_PREDICATES: dict[str, Callable[[Card], bool]] = {
    "ramp": _is_ramp,
    "draw_engines": is_personal_draw,
    "group_draw": _is_group_draw,
    "cantrips": _is_cantrip,
    "removal": _is_removal,
    "wipes": _is_wipe,
    "protection": _is_protection,
    "tutors": _is_tutor,
}


@dataclass(frozen=True)
class CategoryPass:
    """One greedy category pass: label for warnings, predicate, quota target."""

    label: str
    predicate: Callable[[Card], bool]
    target: int


def category_passes(quotas: Quotas) -> list[CategoryPass]:
    """Category passes in priority order."""
    return [
        CategoryPass("Ramp", _is_ramp, quotas.ramp),
        CategoryPass("Draw (engines)", is_personal_draw, quotas.draw_engines),
        CategoryPass("Draw (group)", _is_group_draw, quotas.group_draw),
        CategoryPass("Removal", _is_removal, quotas.removal),
        CategoryPass("Wipes", _is_wipe, quotas.wipes),
        CategoryPass("Protection", _is_protection, quotas.protection),
        CategoryPass("Payoffs/Theme", _is_payoff_or_themed, quotas.payoffs),
    ]


def soft_caps(quotas: Quotas) -> dict[str, int]:
    """Fill-pass soft caps per counted category."""
    return {
        "cantrips": quotas.cantrips_soft_cap,
        "draw_engines": quotas.draw_engines_soft_cap,
        "ramp": quotas.ramp_soft_cap,
        "removal": quotas.removal_soft_cap,
        "wipes": quotas.wipes_soft_cap,
        "protection": quotas.protection_soft_cap,
    }


# =============================================================================
# WORKING STATE
# =============================================================================


@dataclass
class DeckAssembly:
    """
    Mutable working state for one allocation.

    Chosen cards in pick order, a name set for duplicate checks, and running
    per-category counts.
    """

    target: int
    chosen: list[Card] = field(default_factory=list)
    names: set[str] = field(default_factory=set)
    counts: Counter[str] = field(default_factory=Counter)

    @property
    def is_full(self) -> bool:
        return len(self.chosen) >= self.target

    @property
    def size(self) -> int:
        return len(self.chosen)

    def contains(self, card: Card) -> bool:
        return card.name_key in self.names

    def add(self, card: Card) -> None:
        self.chosen.append(card)
        self.names.add(card.name_key)
        for category, predicate in CATEGORY_PREDICATES.items():
            if predicate(card):
                self.counts[category] += 1

    def remove(self, card: Card) -> None:
        self.chosen.remove(card)
        self.names.discard(card.name_key)
        for category, predicate in CATEGORY_PREDICATES.items():
            if predicate(card):
                self.counts[category] -= 1


@dataclass
class AllocationResult:
    """Selected non-land cards in pick order, plus warnings in the order raised."""

    selection: list[Card]
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# ALLOCATION STEPS
# =============================================================================


def _is_unaffordable(config: DeckConfig, card: Card) -> bool:
    if not config.has_budget or config.power != STRICT_BUDGET_POWER:
        return False
    return (card.usd_price or Decimal(0)) > AFFORDABILITY_CEILING_USD


def _take(
    assembly: DeckAssembly,
    ordered: list[Card],
    category: CategoryPass,
    config: DeckConfig,
    warnings: list[str],
) -> None:
    remaining = category.target

    for card in ordered:
        if assembly.is_full or remaining <= 0:
            break
        if assembly.contains(card) or not category.predicate(card):
            continue
        if _is_unaffordable(config, card):
            logger.debug(
                "Skipping %s for %s: over affordability ceiling", card.name, category.label
            )
            continue

        assembly.add(card)
        remaining -= 1

    if remaining > 0:
        warnings.append(f"Could not fully satisfy {category.label} quota; short by {remaining}.")


def _trim_tutors(assembly: DeckAssembly, cap: int, warnings: list[str]) -> set[str]:
    """Remove highest mana value excess tutors; later picks go first on ties."""
    tutors = [(index, c) for index, c in enumerate(assembly.chosen) if _is_tutor(c)]
    if len(tutors) <= cap:
        return set()

    excess = len(tutors) - cap
    ordered = sorted(tutors, key=lambda pair: (-pair[1].mana_value, -pair[0]))
    trimmed: set[str] = set()

    for _, card in ordered[:excess]:
        assembly.remove(card)
        trimmed.add(card.name_key)
        logger.debug("Trimmed tutor %s (mana value %s)", card.name, card.mana_value)

    warnings.append(f"Trimmed tutors to soft cap ({cap}). Use --allow-tutors to permit more.")
    return trimmed


def _over_soft_cap(assembly: DeckAssembly, card: Card, caps: dict[str, int]) -> bool:
    for category, cap in caps.items():
        if cap > 0 and CATEGORY_PREDICATES[category](card) and assembly.counts[category] >= cap:
            return True
    return False


def _fill(
    assembly: DeckAssembly,
    ordered: list[Card],
    config: DeckConfig,
    quotas: Quotas,
    excluded: set[str],
) -> None:
    caps = soft_caps(quotas)

    for card in ordered:
        if assembly.is_full:
            break
        if assembly.contains(card) or card.name_key in excluded:
            continue

        if (
            not config.allow_tutors
            and _is_tutor(card)
            and assembly.counts["tutors"] >= quotas.tutors_soft_cap
        ):
            continue

        # Theme payoffs outrank rigid balance
        if not _is_payoff_or_themed(card) and _over_soft_cap(assembly, card, caps):
            continue

        assembly.add(card)


def _remove_commander(
    assembly: DeckAssembly,
    ordered: list[Card],
    commander: Card,
    excluded: set[str],
    warnings: list[str],
) -> None:
    matches = [c for c in assembly.chosen if is_commander_card(commander, c)]
    if not matches:
        return

    for card in matches:
        assembly.remove(card)
    warnings.append(f"Commander was found in mainboard and removed: {commander.name}")
    logger.warning("Commander %s was selected into its own mainboard; removed", commander.name)

    # Refill by score order to restore the count
    for card in ordered:
        if assembly.is_full:
            break
        if assembly.contains(card) or card.name_key in excluded:
            continue
        if is_commander_card(commander, card):
            continue
        assembly.add(card)


def allocate_nonlands(
    config: DeckConfig,
    quotas: Quotas,
    commander: Card,
    pool: ScoredCandidatePool,
) -> AllocationResult:
    """
    Select up to (99 - land quota) non-land cards from a scored pool.

    Args:
        config: Deck configuration (tutor policy, budget, power)
        quotas: Quota targets and soft caps for the power preset
        commander: The deck's commander
        pool: Candidates in selection order

    Returns:
        AllocationResult with the selection and any warnings
    """
    warnings: list[str] = []
    assembly = DeckAssembly(target=quotas.nonland_budget)
    ordered = [c for c in pool.cards if not c.is_land]

    for category in category_passes(quotas):
        _take(assembly, ordered, category, config, warnings)

    excluded: set[str] = set()
    if not config.allow_tutors:
        excluded = _trim_tutors(assembly, quotas.tutors_soft_cap, warnings)

    _fill(assembly, ordered, config, quotas, excluded)

    if not assembly.is_full:
        warnings.append(
            f"Nonland pool was too small; only selected {assembly.size} nonlands. "
            "Consider raising --max-candidates."
        )

    _remove_commander(assembly, ordered, commander, excluded, warnings)

    for warning in warnings:
        logger.warning("%s", warning)
    logger.info("Selected %d of %d nonland slots", assembly.size, assembly.target)

    return AllocationResult(selection=list(assembly.chosen[: assembly.target]), warnings=warnings)
