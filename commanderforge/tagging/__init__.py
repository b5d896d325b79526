from commanderforge.tagging.roles import (
    classify_roles,
    has_draw_instruction,
    is_cantrip,
    is_draw_engine,
    is_draw_spell,
    is_personal_draw,
    mask_draw_payoffs,
)
from commanderforge.tagging.themes import (
    THEME_KEYWORDS,
    THEME_SEARCH_QUERIES,
    classify_themes,
    theme_search_query,
)

__all__ = [
    "THEME_KEYWORDS",
    "THEME_SEARCH_QUERIES",
    "classify_roles",
    "classify_themes",
    "has_draw_instruction",
    "is_cantrip",
    "is_draw_engine",
    "is_draw_spell",
    "is_personal_draw",
    "mask_draw_payoffs",
    "theme_search_query",
]
