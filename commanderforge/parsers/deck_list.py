"""
Parser for plain-text Commander deck lists.

Accepted line shapes:
    1 Sol Ring
    1 Sol Ring (C21) 263
    Sol Ring

Blank lines, "#" and "//" comments, and Commander:/Mainboard/Deck headers
are skipped. A Sideboard header ends the list.
"""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Groups: (quantity, rest of line)
COUNT_LINE = re.compile(r"^\s*(\d+)\s+(.+?)\s*$")

# Arena-style "(SET) 123" suffix after the card name
ARENA_SUFFIX = re.compile(r"^(.+?)\s+\(([A-Z0-9]+)\)\s+(\S+)$")

# Whole-line section headers
SECTION_HEADERS = frozenset({"deck", "commander", "companion"})

# Commander deck with the commander listed first
FULL_DECK_SIZE = 100

# No single line can usefully ask for more copies than a whole deck holds
MAX_COPIES_PER_LINE = FULL_DECK_SIZE


@dataclass
class ParsedDeckList:
    """Commander name (possibly empty), the mainboard names in list order, and parse notes."""

    commander: str
    mainboard: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _strip_arena_suffix(name: str) -> str:
    match = ARENA_SUFFIX.match(name)
    return match.group(1).strip() if match else name


def _copies(digits: str, name: str, warnings: list[str] | None) -> int:
    # Compare digit counts first so absurd quantities never reach int()
    if len(digits.lstrip("0")) <= len(str(MAX_COPIES_PER_LINE)):
        count = int(digits)
        if count <= MAX_COPIES_PER_LINE:
            return count

    message = f"Quantity {digits} for {name} capped at {MAX_COPIES_PER_LINE}."
    logger.warning("Capped quantity %s for %s at %d", digits, name, MAX_COPIES_PER_LINE)
    if warnings is not None:
        warnings.append(message)
    return MAX_COPIES_PER_LINE


def parse_names(text: str, warnings: list[str] | None = None) -> list[str]:
    """
    Parse a deck list into card names, one entry per copy.

    Args:
        text: Raw deck list text
        warnings: Collects a note for every quantity that had to be capped

    Returns:
        Card names in list order; "4 Forest" yields four entries
    """
    names: list[str] = []

    for raw in (text or "").splitlines():
        line = raw.strip()

        if not line or line.startswith("#") or line.startswith("//"):
            continue

        lowered = line.lower()
        if lowered.startswith("sideboard"):
            break
        if lowered.startswith("commander:") or lowered.startswith("mainboard"):
            continue
        if lowered in SECTION_HEADERS:
            continue

        match = COUNT_LINE.match(line)
        if match:
            name = _strip_arena_suffix(match.group(2).strip())
            names.extend([name] * _copies(match.group(1), name, warnings))
        else:
            names.append(_strip_arena_suffix(line))

    return names


def parse_deck_list(text: str, commander_override: str | None = None) -> ParsedDeckList:
    """
    Split a deck list into commander and mainboard.

    An explicit commander wins and one matching copy is removed from the
    list. Otherwise a 100-entry list is taken to start with its commander.
    Anything else leaves the commander empty for the caller to resolve.
    """
    warnings: list[str] = []
    names = parse_names(text, warnings)

    if commander_override and commander_override.strip():
        commander = commander_override.strip()
        key = commander.lower()
        for index, name in enumerate(names):
            if name.lower() == key:
                del names[index]
                break
        return ParsedDeckList(commander=commander, mainboard=names, warnings=warnings)

    if len(names) == FULL_DECK_SIZE:
        return ParsedDeckList(commander=names[0], mainboard=names[1:], warnings=warnings)

    return ParsedDeckList(commander="", mainboard=names, warnings=warnings)
