"""
Colour demand versus colour sources.

Demand is the number of {W}/{U}/{B}/{R}/{G} symbols in the cards' oracle
text. A source is a card whose text adds mana and mentions that colour's
symbol; each card counts at most once per colour. This is a rough text
heuristic, not a mana-cost parse.
"""

import re
from collections.abc import Sequence

from commanderforge.models.card import COLOR_SYMBOLS, Card
from commanderforge.models.deck import ManaColorStats

COLOR_PIP = re.compile(r"\{([WUBRG])\}")

COLOR_NAMES = {
    "W": "White",
    "U": "Blue",
    "B": "Black",
    "R": "Red",
    "G": "Green",
}


def analyze_mana(cards: Sequence[Card]) -> list[ManaColorStats]:
    """
    Count colour demand and sources.

    Returns:
        One ManaColorStats per colour, in WUBRG order
    """
    demand = dict.fromkeys(COLOR_SYMBOLS, 0)
    sources = dict.fromkeys(COLOR_SYMBOLS, 0)

    for card in cards:
        text = card.oracle_text
        for match in COLOR_PIP.finditer(text):
            demand[match.group(1)] += 1

        lowered = text.lower()
        if "add" not in lowered:
            continue
        for symbol in COLOR_SYMBOLS:
            if f"{{{symbol.lower()}}}" in lowered:
                sources[symbol] += 1

    return [ManaColorStats(color=s, demand=demand[s], sources=sources[s]) for s in COLOR_SYMBOLS]
