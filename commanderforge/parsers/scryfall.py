"""
Scryfall card record normalizer.

Converts raw Scryfall card JSON into the internal Card entity: resolves
double-faced oracle text, parses the USD price and attaches role and
theme tags.

Card objects: https://scryfall.com/docs/api/cards
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field, field_validator

from commanderforge.models.card import COLOR_SYMBOLS, Card
from commanderforge.tagging.roles import classify_roles
from commanderforge.tagging.themes import classify_themes


class ScryfallFace(BaseModel):
    """One face of a multi-faced card."""

    oracle_text: str | None = None
    type_line: str | None = None


class ScryfallPrices(BaseModel):
    """Price strings as returned by Scryfall (all optional)."""

    usd: str | None = None


class ScryfallCard(BaseModel):
    """The subset of a Scryfall card object we read."""

    id: str = ""
    name: str = ""
    oracle_text: str | None = None
    type_line: str | None = ""
    cmc: Decimal = Decimal(0)
    color_identity: list[str] = Field(default_factory=list)
    legalities: dict[str, str] = Field(default_factory=dict)
    prices: ScryfallPrices | None = None
    card_faces: list[ScryfallFace] | None = None

    @field_validator("cmc", mode="before")
    @classmethod
    def _cmc_as_decimal(cls, value: Any) -> Any:
        # Floats go through str() so 0.5 stays 0.5 rather than a binary expansion
        if value is None:
            return Decimal(0)
        if isinstance(value, float):
            return Decimal(str(value))
        return value


class ScryfallSearchPage(BaseModel):
    """A page of /cards/search results."""

    data: list[ScryfallCard] = Field(default_factory=list)
    has_more: bool = False
    next_page: str | None = None


def oracle_text_for(card: ScryfallCard) -> str:
    """
    Oracle text for a card.

    Uses the top-level text when present; otherwise joins the non-blank
    face texts with newlines in face order.
    """
    if card.oracle_text and card.oracle_text.strip():
        return card.oracle_text
    if not card.card_faces:
        return ""
    return "\n".join(
        f.oracle_text for f in card.card_faces if f.oracle_text and f.oracle_text.strip()
    )


def parse_price(value: str | None) -> Decimal | None:
    """Parse a price string. Missing or unparseable prices are None."""
    if not value:
        return None
    try:
        price = Decimal(value.strip())
    except InvalidOperation:
        return None
    return price if price.is_finite() else None


def is_probably_commander(card: ScryfallCard, oracle_text: str) -> bool:
    """
    Heuristic commander eligibility.

    Commander-legal, and either a legendary creature or a card that says it
    can be your commander.
    """
    legal = card.legalities.get("commander", "").lower() == "legal"

    type_line = (card.type_line or "").lower()
    type_ok = "legendary" in type_line and "creature" in type_line
    text_ok = "can be your commander" in oracle_text.lower()

    return legal and (type_ok or text_ok)


def card_from_record(
    record: ScryfallCard | dict[str, Any], themes: list[str] | None = None
) -> Card:
    """
    Normalize a Scryfall record into a tagged Card.

    Args:
        record: Parsed ScryfallCard or raw card JSON
        themes: Requested theme names for theme tagging

    Returns:
        Card with roles and theme tags attached
    """
    card = record if isinstance(record, ScryfallCard) else ScryfallCard.model_validate(record)

    oracle = oracle_text_for(card)
    type_line = card.type_line or ""
    identity = tuple(s.upper() for s in card.color_identity if s.upper() in COLOR_SYMBOLS)

    return Card(
        id=card.id,
        name=card.name,
        oracle_text=oracle,
        type_line=type_line,
        mana_value=card.cmc,
        color_identity=identity,
        is_commander_eligible=is_probably_commander(card, oracle),
        usd_price=parse_price(card.prices.usd if card.prices else None),
        roles=classify_roles(oracle, type_line, card.name),
        theme_tags=classify_themes(oracle, themes or []),
    )
