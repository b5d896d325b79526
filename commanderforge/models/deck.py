"""
Deck result models.

Summaries produced once a selection is finished: role counts, price,
simulation statistics, mana colour stats and evaluation suggestions.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from commanderforge.models.card import Card


@dataclass(frozen=True, slots=True)
class DeckReport:
    """Role counts, estimated price and average mana value for a card list."""

    total_cards: int
    lands: int
    ramp: int
    draw_total: int
    draw_personal: int
    draw_group: int
    draw_engines: int
    draw_spells: int
    cantrips: int
    removal: int
    wipes: int
    protection: int
    tutors: int
    payoffs: int
    win_cons: int
    estimated_usd: Decimal = Decimal(0)
    average_mana_value: float = 0.0


@dataclass(frozen=True, slots=True)
class SimulationStats:
    """Opening-hand land statistics, as percentages in [0, 100]."""

    trials: int
    keepable_7_pct: float
    keepable_6_pct: float
    at_least_2_lands_in_7_pct: float
    hit_third_land_by_turn_3_pct: float


@dataclass(frozen=True, slots=True)
class ManaColorStats:
    """Colour demand (pip count) and sources (mana producers) for one colour."""

    color: str
    demand: int
    sources: int


@dataclass(frozen=True, slots=True)
class DeckSuggestion:
    """A categorized improvement suggestion. Lower priority sorts first."""

    category: str
    message: str
    priority: int = 0


@dataclass
class DeckResult:
    """A built deck: commander, mainboard and the allocation warnings."""

    commander: Card
    mainboard: list[Card]
    report: DeckReport
    warnings: list[str] = field(default_factory=list)

    @property
    def nonlands(self) -> list[Card]:
        return [c for c in self.mainboard if not c.is_land]

    @property
    def lands(self) -> list[Card]:
        return [c for c in self.mainboard if c.is_land]


@dataclass
class DeckEvaluationResult:
    """An evaluated deck with statistics, suggestions and a 0-100 score."""

    commander: Card
    mainboard: list[Card]
    report: DeckReport
    simulation: SimulationStats
    mana: list[ManaColorStats]
    suggestions: list[DeckSuggestion]
    score: int
    warnings: list[str] = field(default_factory=list)
