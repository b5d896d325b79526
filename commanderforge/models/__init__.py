from commanderforge.models.card import COLOR_SYMBOLS, Card, CardRole
from commanderforge.models.deck import (
    DeckEvaluationResult,
    DeckReport,
    DeckResult,
    DeckSuggestion,
    ManaColorStats,
    SimulationStats,
)
from commanderforge.models.deck_config import DEFAULT_POWER, POWER_PRESETS, DeckConfig
from commanderforge.models.quotas import Quotas, quotas_for_power

__all__ = [
    "COLOR_SYMBOLS",
    "Card",
    "CardRole",
    "DEFAULT_POWER",
    "DeckConfig",
    "DeckEvaluationResult",
    "DeckReport",
    "DeckResult",
    "DeckSuggestion",
    "ManaColorStats",
    "POWER_PRESETS",
    "Quotas",
    "SimulationStats",
    "quotas_for_power",
]
