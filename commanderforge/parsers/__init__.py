from commanderforge.parsers.deck_list import ParsedDeckList, parse_deck_list, parse_names
from commanderforge.parsers.scryfall import (
    ScryfallCard,
    ScryfallFace,
    ScryfallPrices,
    ScryfallSearchPage,
    card_from_record,
    is_probably_commander,
    oracle_text_for,
    parse_price,
)

__all__ = [
    "ParsedDeckList",
    "ScryfallCard",
    "ScryfallFace",
    "ScryfallPrices",
    "ScryfallSearchPage",
    "card_from_record",
    "is_probably_commander",
    "oracle_text_for",
    "parse_deck_list",
    "parse_names",
    "parse_price",
]
