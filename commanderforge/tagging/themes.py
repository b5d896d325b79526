"""
Theme tagging.

A requested theme tags a card when any of its keywords appears in the
oracle text. Unknown themes are ignored.
"""

THEME_KEYWORDS: dict[str, tuple[str, ...]] = {
    "lifegain": ("gain life",),
    "punish_lifegain": ("whenever an opponent gains life", "if an opponent would gain life"),
    "group_hug": ("each player draws", "each player may", "each opponent may", "for each player"),
    "tokens": ("create", "token"),
    "graveyard": ("from your graveyard", "return target", "mill"),
    "spellslinger": ("instant or sorcery", "whenever you cast"),
}

# Scryfall search fragments used to gather candidates for each theme
THEME_SEARCH_QUERIES: dict[str, str] = {
    "lifegain": 'o:"gain life"',
    "punish_lifegain": (
        '(o:"whenever an opponent gains life" OR o:"if an opponent would gain life")'
    ),
    "group_hug": '(o:"each player draws" OR o:"each player may" OR o:"each opponent may")',
    "tokens": "(o:create o:token)",
    "graveyard": '(o:"from your graveyard" OR o:mill)',
    "spellslinger": '(o:"instant or sorcery" OR o:"whenever you cast")',
}


def classify_themes(oracle_text: str | None, requested_themes: list[str]) -> tuple[str, ...]:
    """
    Tag a card with every requested theme it matches.

    Args:
        oracle_text: Card rules text
        requested_themes: Theme names from the deck config

    Returns:
        Matching theme names, lower-cased, in request order without duplicates
    """
    lowered = (oracle_text or "").lower()
    tags: list[str] = []

    for theme in requested_themes:
        key = theme.strip().lower()
        keywords = THEME_KEYWORDS.get(key)
        if not keywords or key in tags:
            continue
        if any(k in lowered for k in keywords):
            tags.append(key)

    return tuple(tags)


def theme_search_query(theme: str) -> str | None:
    """Search fragment for a theme, or None for unknown themes."""
    return THEME_SEARCH_QUERIES.get(theme.strip().lower())
