"""
CommanderForge services.

Business logic for deck building, evaluation and card-data access.
"""

from commanderforge.services.allocator import (
    AllocationResult,
    DeckAssembly,
    allocate_nonlands,
)
from commanderforge.services.deck_builder import (
    CardSource,
    CommanderNotDeterminedError,
    build_commander_deck,
    candidate_searches,
    staple_names_for,
)
from commanderforge.services.deck_evaluator import (
    evaluate_cards,
    evaluate_deck_list,
    score_deck,
)
from commanderforge.services.disk_cache import DiskCache
from commanderforge.services.formatters import (
    deck_result_to_dict,
    evaluation_to_dict,
    format_build_report,
    format_card_roles,
    format_category_cards,
    format_deck_list,
    format_evaluation_report,
    to_json,
)
from commanderforge.services.mana_base import (
    CURATED_UTILITY_LANDS,
    ManaBaseError,
    basic_land_stub,
    build_mana_base,
)
from commanderforge.services.scryfall_client import (
    CardLookupError,
    CardNotFoundError,
    ScryfallClient,
)

__all__ = [
    # Allocation
    "AllocationResult",
    "DeckAssembly",
    "allocate_nonlands",
    # Building
    "CardSource",
    "CommanderNotDeterminedError",
    "build_commander_deck",
    "candidate_searches",
    "staple_names_for",
    # Evaluation
    "evaluate_cards",
    "evaluate_deck_list",
    "score_deck",
    # Mana base
    "CURATED_UTILITY_LANDS",
    "ManaBaseError",
    "basic_land_stub",
    "build_mana_base",
    # Card data
    "CardLookupError",
    "CardNotFoundError",
    "DiskCache",
    "ScryfallClient",
    # Output
    "deck_result_to_dict",
    "evaluation_to_dict",
    "format_build_report",
    "format_card_roles",
    "format_category_cards",
    "format_deck_list",
    "format_evaluation_report",
    "to_json",
]
