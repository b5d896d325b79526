"""Shared test fixtures."""

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from commanderforge.models.card import Card
from commanderforge.parsers.scryfall import ScryfallCard
from commanderforge.services.scryfall_client import CardNotFoundError
from commanderforge.tagging.roles import classify_roles


class FakeCardSource:
    """
    In-memory card source.

    Named lookups come from `cards` (case-insensitive). A search returns the
    records of the first `searches` key found inside the query, or nothing.
    """

    def __init__(
        self,
        cards: dict[str, dict[str, Any]] | None = None,
        searches: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.cards = {name.lower(): record for name, record in (cards or {}).items()}
        self.searches = searches or {}
        self.named_calls: list[str] = []
        self.search_calls: list[tuple[str, int]] = []

    async def get_card_named(self, name: str) -> ScryfallCard:
        self.named_calls.append(name)
        record = self.cards.get(name.lower())
        if record is None:
            raise CardNotFoundError(name)
        return ScryfallCard.model_validate(record)

    async def search(self, query: str, max_cards: int) -> list[ScryfallCard]:
        self.search_calls.append((query, max_cards))
        for fragment, records in self.searches.items():
            if fragment in query:
                return [ScryfallCard.model_validate(r) for r in records[:max_cards]]
        return []


def scryfall_record(
    name: str,
    oracle_text: str = "",
    type_line: str = "Artifact",
    cmc: float = 2.0,
    color_identity: list[str] | None = None,
    usd: str | None = None,
    commander_legal: bool = True,
) -> dict[str, Any]:
    """Minimal Scryfall card JSON."""
    return {
        "object": "card",
        "id": f"id-{name.lower().replace(' ', '-')}",
        "name": name,
        "oracle_text": oracle_text,
        "type_line": type_line,
        "cmc": cmc,
        "color_identity": color_identity or [],
        "legalities": {"commander": "legal" if commander_legal else "not_legal"},
        "prices": {"usd": usd},
    }


@pytest.fixture
def make_card() -> Callable[..., Card]:
    """Factory for tagged cards; roles are classified from the text."""

    def _make(
        name: str,
        oracle_text: str = "",
        type_line: str = "Artifact",
        mana_value: int | str | Decimal = 2,
        color_identity: tuple[str, ...] = (),
        usd_price: str | Decimal | None = None,
        theme_tags: tuple[str, ...] = (),
        is_commander_eligible: bool = False,
    ) -> Card:
        return Card(
            id=f"id-{name.lower().replace(' ', '-')}",
            name=name,
            oracle_text=oracle_text,
            type_line=type_line,
            mana_value=Decimal(mana_value),
            color_identity=color_identity,
            is_commander_eligible=is_commander_eligible,
            usd_price=Decimal(usd_price) if usd_price is not None else None,
            roles=classify_roles(oracle_text, type_line, name),
            theme_tags=theme_tags,
        )

    return _make


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """Factory for raw Scryfall card JSON."""
    return scryfall_record


@pytest.fixture
def fake_source() -> type[FakeCardSource]:
    """The in-memory card source class."""
    return FakeCardSource


@pytest.fixture
def commander(make_card: Callable[..., Card]) -> Card:
    """A white-blue legendary commander."""
    return make_card(
        "Test Commander",
        oracle_text="Flying",
        type_line="Legendary Creature — Human Wizard",
        mana_value=3,
        color_identity=("W", "U"),
        is_commander_eligible=True,
    )
