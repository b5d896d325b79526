from commanderforge.analysis.mana import COLOR_NAMES, analyze_mana
from commanderforge.analysis.report import average_mana_value, build_deck_report, estimated_price
from commanderforge.analysis.simulator import simulate_opening_hands

__all__ = [
    "COLOR_NAMES",
    "analyze_mana",
    "average_mana_value",
    "build_deck_report",
    "estimated_price",
    "simulate_opening_hands",
]
