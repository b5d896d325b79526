"""
Role classification from card text.

Derives CardRole tags from oracle text, type line and name. Everything here
is a pure function of its inputs: no lookups, no shared state.

Draw detection is a two-stage pipeline:
1. Mask "when/whenever you draw ..." payoff clauses (those cards reward
   drawing, they don't draw).
2. Scan the masked text for genuine draw instructions.
"""

import re

from commanderforge.models.card import Card, CardRole

# =============================================================================
# PATTERNS
# =============================================================================

TAP_FOR_MANA = re.compile(r"\{T\}:\s*Add\b", re.IGNORECASE)
LIBRARY_SEARCH = re.compile(r"search your library for[^.\n]*", re.IGNORECASE)
LAND_WORD = re.compile(r"\blands?\b", re.IGNORECASE)

DRAW_PAYOFF_TRIGGER = re.compile(r"\b(when|whenever)\s+you\s+draw\b", re.IGNORECASE)
DRAW_PAYOFF_CLAUSE = re.compile(r"\b(when|whenever)\s+you\s+draw\b[^.\n]*[.\n]?", re.IGNORECASE)

DRAW_PHRASE = re.compile(r"\bdraw\b[^.\n]{0,60}\bcards?\b", re.IGNORECASE)
DRAW_REPLACEMENT_PREFIX = re.compile(r"\bif\s+you\s+would\s*$", re.IGNORECASE)
# How far back to look for a replacement-effect lead-in
_PREFIX_WINDOW = 80

TOKEN_CREATION = re.compile(r"create (?:a|an) (\d+)/(\d+)", re.IGNORECASE)
TEAM_PUMP = re.compile(r"creatures you control get \+(2|3|4|5)/\+(2|3|4|5)", re.IGNORECASE)

# Engine detection (evaluator only)
SACRIFICE_TO_DRAW = re.compile(r"\bsacrifice\b[^.\n]*\bdraw\b", re.IGNORECASE)
ONE_SHOT_TRIGGER_DRAW = re.compile(
    r"\b(enters the battlefield|dies|leaves the battlefield)\b[^.\n]*\bdraw\b", re.IGNORECASE
)
ACTIVATED_DRAW = re.compile(r":\s*Draw\b", re.IGNORECASE)
TRIGGERED_DRAW = re.compile(
    r"\b(when|whenever)\b(?![^.\n]*\byou\s+draw\b)[^.\n]{0,160}\bdraw\b", re.IGNORECASE
)
TURN_CYCLE_DRAW = re.compile(r"\bat the beginning\b[^.\n]{0,120}\bdraw\b", re.IGNORECASE)

GROUP_DRAW_PHRASES = ("each player draws", "each opponent draws")
REMOVAL_PHRASES = ("destroy target", "exile target", "counter target")
WIPE_PHRASES = ("destroy all", "exile all")
PROTECTION_PHRASES = ("hexproof", "indestructible", "phase out")
WIN_GAME_PHRASES = (
    "you win the game",
    "target player loses the game",
    "each opponent loses the game",
)
EVASION_PHRASES = (
    "can't be blocked",
    "have flying",
    "have trample",
    "have menace",
    "double strike",
)
MULTI_DRAW_PHRASES = ("draw two", "draw three", "draw x", "each player draws")
# "Draw a card for each ..." scales, so it isn't a single draw
VARIABLE_DRAW_MARKERS = ("for each", "equal to")
DRAW_A_CARD_CLAUSE = re.compile(r"\bdraw a card\b[^.\n]*", re.IGNORECASE)

# Finishers that don't announce themselves in their text
NAMED_WIN_CONS = frozenset(
    {
        "approach of the second sun",
        "thassa's oracle",
        "laboratory maniac",
        "jace, wielder of mysteries",
        "revel in riches",
        "felidar sovereign",
        "test of endurance",
    }
)


def _contains_any(text: str, phrases: tuple[str, ...]) -> bool:
    return any(p in text for p in phrases)


def _is_instant_or_sorcery(type_line: str) -> bool:
    lowered = type_line.lower()
    return "instant" in lowered or "sorcery" in lowered


# =============================================================================
# DRAW PIPELINE
# =============================================================================


def mask_draw_payoffs(oracle_text: str) -> str:
    """Remove "when/whenever you draw ..." clauses up to the end of their sentence."""
    return DRAW_PAYOFF_CLAUSE.sub("", oracle_text or "")


def has_draw_instruction(masked_text: str) -> bool:
    """
    Check payoff-masked text for a genuine draw instruction.

    Impulse draw ("exile the top ... you may play") counts. A "draw ... card"
    phrase preceded by "if you would" is a replacement modifier and does not.
    """
    if not masked_text or not masked_text.strip():
        return False

    lowered = masked_text.lower()
    if "exile the top" in lowered and "you may play" in lowered:
        return True

    for match in DRAW_PHRASE.finditer(masked_text):
        prefix = masked_text[max(0, match.start() - _PREFIX_WINDOW) : match.start()]
        if DRAW_REPLACEMENT_PREFIX.search(prefix):
            continue
        return True

    return False


# =============================================================================
# ROLE CLASSIFIER
# =============================================================================


def _ramp_and_tutor_roles(oracle_text: str) -> set[CardRole]:
    roles: set[CardRole] = set()

    if TAP_FOR_MANA.search(oracle_text):
        roles.add(CardRole.RAMP)

    # Each search sentence decides on its own: lands are ramp, anything else a tutor
    for search in LIBRARY_SEARCH.finditer(oracle_text):
        if LAND_WORD.search(search.group(0)):
            roles.add(CardRole.RAMP)
        else:
            roles.add(CardRole.TUTOR)

    return roles


def _win_con(oracle_text: str, name: str) -> bool:
    lowered = oracle_text.lower()

    if _contains_any(lowered, WIN_GAME_PHRASES):
        return True
    if name.strip().lower() in NAMED_WIN_CONS:
        return True

    token = TOKEN_CREATION.search(oracle_text)
    if token and max(int(token.group(1)), int(token.group(2))) >= 5:
        return True

    if "creatures you control" in lowered:
        if _contains_any(lowered, EVASION_PHRASES) or TEAM_PUMP.search(oracle_text):
            return True

    return "extra turn" in lowered


def is_cantrip(
    roles: set[CardRole] | frozenset[CardRole], oracle_text: str, type_line: str
) -> bool:
    """
    Single "Draw a card" stapled onto an instant or sorcery.

    Only applies to cards already tagged Draw that aren't group draw.
    """
    if CardRole.DRAW not in roles or CardRole.GROUP_DRAW in roles:
        return False
    if not _is_instant_or_sorcery(type_line):
        return False

    clauses = [m.group(0).lower() for m in DRAW_A_CARD_CLAUSE.finditer(oracle_text)]
    if not clauses:
        return False
    if any(_contains_any(clause, VARIABLE_DRAW_MARKERS) for clause in clauses):
        return False

    return not _contains_any(oracle_text.lower(), MULTI_DRAW_PHRASES)


def classify_roles(
    oracle_text: str | None, type_line: str | None, name: str | None = ""
) -> frozenset[CardRole]:
    """
    Classify a card's functional roles from its text.

    Lands always classify as no roles. Unparseable or missing text yields
    the empty set. The cantrip reclassification is applied here so every
    caller sees the same tags.

    Args:
        oracle_text: Rules text (faces joined by newlines)
        type_line: Full type line
        name: Card name, used for the named finisher list

    Returns:
        Frozen set of CardRole tags
    """
    text = oracle_text or ""
    types = type_line or ""

    if "land" in types.lower():
        return frozenset()

    roles = _ramp_and_tutor_roles(text)
    lowered = text.lower()

    # Stage 1: payoff clauses reward drawing and are masked before the draw scan
    if DRAW_PAYOFF_TRIGGER.search(text):
        roles.add(CardRole.PAYOFF)
    masked = mask_draw_payoffs(text)

    # Stage 2: genuine draw on what is left
    if has_draw_instruction(masked):
        roles.add(CardRole.DRAW)
    if _contains_any(masked.lower(), GROUP_DRAW_PHRASES):
        roles.update((CardRole.DRAW, CardRole.GROUP_DRAW))

    if _contains_any(lowered, REMOVAL_PHRASES):
        roles.add(CardRole.REMOVAL)
    if _contains_any(lowered, WIPE_PHRASES):
        roles.add(CardRole.WIPE)

    # Graveyard recursion is counted as protection too (coarse on purpose)
    if _contains_any(lowered, PROTECTION_PHRASES) or (
        "return" in lowered and "from your graveyard" in lowered
    ):
        roles.add(CardRole.PROTECTION)

    if _win_con(text, name or ""):
        roles.add(CardRole.WIN_CON)

    if is_cantrip(roles, text, types):
        roles.add(CardRole.CANTRIP)

    return frozenset(roles)


# =============================================================================
# DRAW ENGINE / DRAW SPELL SPLIT
# =============================================================================


def is_personal_draw(card: Card) -> bool:
    """Draw that is neither group draw nor a cantrip (the allocator's draw-engine bucket)."""
    return (
        card.has_role(CardRole.DRAW)
        and not card.has_role(CardRole.GROUP_DRAW)
        and not card.has_role(CardRole.CANTRIP)
    )


def is_draw_engine(card: Card) -> bool:
    """
    Repeatable or ongoing card draw on a permanent.

    Instants and sorceries are never engines. Sacrifice-to-draw and
    enters/dies/leaves triggers are one-shot, so they don't count either.
    """
    if not is_personal_draw(card) or card.is_land:
        return False
    if _is_instant_or_sorcery(card.type_line):
        return False

    text = card.oracle_text
    if SACRIFICE_TO_DRAW.search(text) or ONE_SHOT_TRIGGER_DRAW.search(text):
        return False

    if ACTIVATED_DRAW.search(text):
        return True
    if "if you would draw" in text.lower():
        return True
    if TRIGGERED_DRAW.search(text):
        return True
    return bool(TURN_CYCLE_DRAW.search(text))


def is_draw_spell(card: Card) -> bool:
    """Draw-tagged card that isn't a cantrip, group draw or engine."""
    return is_personal_draw(card) and not is_draw_engine(card)
