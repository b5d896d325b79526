"""
Tests for the scored candidate pool.

INVARIANT: Ordering is score descending, then name, and depends only on
the inputs.
"""

from decimal import Decimal

import pytest

from commanderforge.filtering.scored_pool import (
    ScoredCard,
    build_scored_pool,
    fnv1a_32,
    name_jitter,
    score_card,
    score_terms,
)
from commanderforge.models.deck_config import DeckConfig

# =============================================================================
# JITTER
# =============================================================================


class TestJitter:
    def test_fnv1a_reference_values(self) -> None:
        assert fnv1a_32(b"") == 0x811C9DC5
        assert fnv1a_32(b"a") == 0xE40C292C
        assert fnv1a_32(b"foobar") == 0xBF9CF968

    def test_jitter_bounds(self) -> None:
        for name in ["Sol Ring", "Arcane Signet", "Rhystic Study", "Cultivate", "x"]:
            assert 0.0 <= name_jitter(name) <= 0.016

    def test_jitter_ignores_case(self) -> None:
        assert name_jitter("Sol Ring") == name_jitter("SOL RING")


# =============================================================================
# SCORING
# =============================================================================


class TestScoreTerms:
    """Additive score terms."""

    def test_cheap_ramp(self, make_card, commander) -> None:
        card = make_card("Sol Ring", "{T}: Add {C}{C}.", mana_value=1)
        config = DeckConfig(commander="x")
        terms = score_terms(config, card)

        assert terms["mana_value"] == pytest.approx(5 * 0.35)
        assert terms["ramp"] == pytest.approx(2.2)
        assert score_card(config, commander, card).score == pytest.approx(
            1.75 + 2.2 + name_jitter("Sol Ring")
        )

    def test_expensive_card_gets_no_mana_bonus(self, make_card) -> None:
        card = make_card("Big Thing", type_line="Creature — Giant", mana_value=8)
        assert score_terms(DeckConfig(commander="x"), card)["mana_value"] == 0.0

    def test_cantrip_draw_is_down_weighted(self, make_card) -> None:
        card = make_card("Opt", "Scry 1.\nDraw a card.", type_line="Instant", mana_value=1)
        assert score_terms(DeckConfig(commander="x"), card)["draw"] == pytest.approx(0.35)

    def test_variable_draw_keeps_full_weight(self, make_card) -> None:
        card = make_card(
            "Collective Unconscious",
            "Draw a card for each creature you control.",
            type_line="Sorcery",
            mana_value=6,
        )
        assert score_terms(DeckConfig(commander="x"), card)["draw"] == pytest.approx(2.0)

    def test_theme_bonus_per_tag(self, make_card) -> None:
        card = make_card("Themed", theme_tags=("tokens", "lifegain"))
        assert score_terms(DeckConfig(commander="x"), card)["themes"] == pytest.approx(2.8)

    def test_tutor_penalty_unless_allowed(self, make_card, commander) -> None:
        card = make_card(
            "Demonic Tutor",
            "Search your library for a card, put that card into your hand, then shuffle.",
            type_line="Sorcery",
        )
        strict = DeckConfig(commander="x")
        relaxed = DeckConfig(commander="x", allow_tutors=True)

        assert score_terms(strict, card)["tutor"] == -1.0
        assert "tutor" not in score_terms(relaxed, card)

        penalized = score_card(strict, commander, card)
        allowed = score_card(relaxed, commander, card)
        assert allowed.score - penalized.score == pytest.approx(1.0)

    def test_price_penalty_only_with_budget(self, make_card) -> None:
        card = make_card("Pricey", usd_price="10")

        assert "price" not in score_terms(DeckConfig(commander="x"), card)
        budget = DeckConfig(commander="x", budget_usd=Decimal(100))
        assert score_terms(budget, card)["price"] == pytest.approx(-0.5)

    def test_price_penalty_is_capped(self, make_card) -> None:
        card = make_card("Very Pricey", usd_price="400")
        config = DeckConfig(commander="x", budget_usd=Decimal(50))
        assert score_terms(config, card)["price"] == pytest.approx(-2.0)

    def test_score_is_sum_of_terms(self, make_card, commander) -> None:
        card = make_card("Murder", "Destroy target creature.", type_line="Instant", mana_value=3)
        config = DeckConfig(commander="x")

        expected = sum(score_terms(config, card).values())
        assert score_card(config, commander, card).score == pytest.approx(expected)


# =============================================================================
# POOL
# =============================================================================


class TestScoredPool:
    """Ordering."""

    def test_sorted_by_score_descending(self, make_card, commander) -> None:
        cards = [
            make_card("Vanilla", type_line="Creature — Bear"),
            make_card("Sol Ring", "{T}: Add {C}{C}.", mana_value=1),
            make_card("Murder", "Destroy target creature.", type_line="Instant", mana_value=3),
        ]
        pool = build_scored_pool(DeckConfig(commander="x"), commander, cards)

        assert [c.name for c in pool.cards] == ["Sol Ring", "Murder", "Vanilla"]
        scores = [s.score for s in pool.scored_cards]
        assert scores == sorted(scores, reverse=True)

    def test_ties_break_by_name(self, make_card) -> None:
        a = ScoredCard(card=make_card("alpha"), score=1.0)
        b = ScoredCard(card=make_card("Beta"), score=1.0)
        assert sorted([b, a]) == [a, b]

    def test_same_input_same_order(self, make_card, commander) -> None:
        cards = [make_card(f"Card {i}", type_line="Creature") for i in range(30)]
        config = DeckConfig(commander="x")

        first = build_scored_pool(config, commander, cards).cards
        second = build_scored_pool(config, commander, list(reversed(cards))).cards
        assert [c.name for c in first] == [c.name for c in second]

    def test_empty_pool(self, commander) -> None:
        assert build_scored_pool(DeckConfig(commander="x"), commander, []).cards == []
