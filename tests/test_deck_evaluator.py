"""Tests for the deck evaluation service."""

import pytest

from commanderforge.models.deck import DeckReport, SimulationStats
from commanderforge.models.deck_config import DeckConfig
from commanderforge.models.quotas import UPGRADED_QUOTAS
from commanderforge.services.deck_builder import CommanderNotDeterminedError
from commanderforge.services.deck_evaluator import (
    deck_size_suggestions,
    evaluate_cards,
    evaluate_deck_list,
    land_suggestions,
    quota_suggestions,
    score_deck,
)
from commanderforge.services.scryfall_client import CardNotFoundError


def _report(**overrides) -> DeckReport:
    counts = {
        "total_cards": 99,
        "lands": 37,
        "ramp": 11,
        "draw_total": 10,
        "draw_personal": 8,
        "draw_group": 0,
        "draw_engines": 8,
        "draw_spells": 0,
        "cantrips": 2,
        "removal": 10,
        "wipes": 3,
        "protection": 4,
        "tutors": 0,
        "payoffs": 0,
        "win_cons": 2,
    }
    counts.update(overrides)
    return DeckReport(**counts)


def _simulation(two_in_7: float = 90.0) -> SimulationStats:
    return SimulationStats(
        trials=1000,
        keepable_7_pct=80.0,
        keepable_6_pct=75.0,
        at_least_2_lands_in_7_pct=two_in_7,
        hit_third_land_by_turn_3_pct=85.0,
    )


# =============================================================================
# SCORE
# =============================================================================


class TestScoreDeck:
    """Penalty arithmetic."""

    def test_sound_deck_scores_100(self) -> None:
        assert score_deck(UPGRADED_QUOTAS, _report(), _simulation()) == 100

    def test_land_penalty(self) -> None:
        assert score_deck(UPGRADED_QUOTAS, _report(), _simulation(two_in_7=70.0)) == 85

    def test_deficit_penalties_are_capped(self) -> None:
        report = _report(draw_engines=0, removal=0)
        # 7 missing engines -> capped at 10, 10 missing removal -> capped at 10
        assert score_deck(UPGRADED_QUOTAS, report, _simulation()) == 80

    def test_small_deficit(self) -> None:
        assert score_deck(UPGRADED_QUOTAS, _report(draw_engines=5), _simulation()) == 96

    def test_ramp_excess(self) -> None:
        assert score_deck(UPGRADED_QUOTAS, _report(ramp=17), _simulation()) == 96
        assert score_deck(UPGRADED_QUOTAS, _report(ramp=40), _simulation()) == 88

    def test_never_below_zero(self) -> None:
        report = _report(draw_engines=0, removal=0, ramp=60)
        score = score_deck(UPGRADED_QUOTAS, report, _simulation(two_in_7=0.0))
        assert 0 <= score <= 100


# =============================================================================
# SUGGESTIONS
# =============================================================================


class TestSuggestions:
    def test_group_hug_only_when_themed(self) -> None:
        plain = quota_suggestions(UPGRADED_QUOTAS, _report(), DeckConfig(commander="x"))
        hug = quota_suggestions(
            UPGRADED_QUOTAS, _report(), DeckConfig(commander="x", themes=["group_hug"])
        )

        assert not any(s.category == "GroupHug" for s in plain)
        assert [s.category for s in hug] == ["GroupHug"]

    def test_low_interaction(self) -> None:
        suggestions = quota_suggestions(
            UPGRADED_QUOTAS, _report(removal=4, wipes=1), DeckConfig(commander="x")
        )
        messages = [s.message for s in suggestions]
        assert "Removal is low (4). Target ~10+." in messages
        assert "Board wipes are low (1). Target ~3." in messages

    def test_land_message(self) -> None:
        [suggestion] = land_suggestions(_simulation(two_in_7=72.24))
        assert suggestion.message == (
            "Opening 7 has <80% chance of 2+ lands (72.2%). Consider +1-2 lands."
        )

    def test_deck_size(self) -> None:
        assert deck_size_suggestions(99) == []
        [suggestion] = deck_size_suggestions(98)
        assert suggestion.category == "DeckSize"


# =============================================================================
# EVALUATION
# =============================================================================


def _mainboard(make_card) -> list:
    cards = [make_card(f"Plains {i}", type_line="Basic Land", mana_value=0) for i in range(37)]
    cards += [
        make_card(f"Rock {i}", "{T}: Add {C}.", mana_value=2) for i in range(11)
    ]
    cards += [make_card(f"Filler {i}", type_line="Creature — Bear") for i in range(51)]
    return cards


class TestEvaluateCards:
    def test_structure(self, make_card, commander) -> None:
        result = evaluate_cards(
            DeckConfig(commander="Test Commander"),
            commander,
            _mainboard(make_card),
            trials=500,
            seed=1,
        )

        assert result.report.total_cards == 99
        assert result.report.lands == 37
        assert result.simulation.trials == 500
        assert 0 <= result.score <= 100

        categories = [s.category for s in result.suggestions]
        assert "Draw" in categories
        assert "WinCons" in categories
        assert "DeckSize" not in categories

    def test_eligible_commander_has_no_warnings(self, make_card, commander) -> None:
        result = evaluate_cards(
            DeckConfig(commander="x"), commander, _mainboard(make_card), trials=100, seed=1
        )
        assert result.warnings == []

    def test_ineligible_commander_warns(self, make_card) -> None:
        bears = make_card("Grizzly Bears", type_line="Creature — Bear")
        result = evaluate_cards(
            DeckConfig(commander="x"),
            bears,
            _mainboard(make_card),
            trials=100,
            seed=1,
            warnings=["Quantity 500 for Forest capped at 100."],
        )

        assert result.warnings == [
            "Quantity 500 for Forest capped at 100.",
            "Commander may not be a legal commander (heuristic): Grizzly Bears",
        ]

    def test_suggestions_sorted_by_priority(self, make_card, commander) -> None:
        mainboard = _mainboard(make_card)[:-1]
        result = evaluate_cards(
            DeckConfig(commander="x"), commander, mainboard, trials=200, seed=1
        )

        priorities = [s.priority for s in result.suggestions]
        assert priorities == sorted(priorities)
        assert result.suggestions[0].category == "DeckSize"


class TestEvaluateDeckList:
    """Parsing plus card lookups."""

    @pytest.fixture
    def source(self, fake_source, make_record):
        return fake_source(
            cards={
                "Test Commander": make_record(
                    "Test Commander",
                    "Flying",
                    type_line="Legendary Creature — Human",
                    color_identity=["W"],
                ),
                "Plains": make_record("Plains", type_line="Basic Land — Plains", cmc=0),
                "Sol Ring": make_record("Sol Ring", "{T}: Add {C}{C}.", cmc=1),
            }
        )

    @pytest.mark.asyncio
    async def test_hundred_card_list(self, source) -> None:
        deck = "1 Test Commander\n1 Sol Ring\n98 Plains"
        result = await evaluate_deck_list(deck, DeckConfig(), source, trials=200, seed=1)

        assert result.commander.name == "Test Commander"
        assert len(result.mainboard) == 99
        assert result.report.lands == 98

    @pytest.mark.asyncio
    async def test_repeated_names_fetched_once(self, source) -> None:
        deck = "1 Test Commander\n1 Sol Ring\n98 Plains"
        await evaluate_deck_list(deck, DeckConfig(), source, trials=100, seed=1)
        assert source.named_calls.count("Plains") == 1

    @pytest.mark.asyncio
    async def test_explicit_commander(self, source) -> None:
        deck = "1 Sol Ring\n98 Plains"
        config = DeckConfig(commander="Test Commander")
        result = await evaluate_deck_list(deck, config, source, trials=100, seed=1)

        assert result.commander.name == "Test Commander"
        assert len(result.mainboard) == 99

    @pytest.mark.asyncio
    async def test_capped_quantity_is_reported(self, source) -> None:
        deck = "1 Sol Ring\n99999999999999999999 Plains"
        config = DeckConfig(commander="Test Commander")
        result = await evaluate_deck_list(deck, config, source, trials=100, seed=1)

        assert len(result.mainboard) == 101
        assert result.warnings == ["Quantity 99999999999999999999 for Plains capped at 100."]

    @pytest.mark.asyncio
    async def test_missing_commander(self, source) -> None:
        with pytest.raises(CommanderNotDeterminedError):
            await evaluate_deck_list("1 Sol Ring\n98 Plains", DeckConfig(), source)

    @pytest.mark.asyncio
    async def test_unknown_card_propagates(self, source) -> None:
        deck = "1 Test Commander\n1 Mystery Card\n98 Plains"
        with pytest.raises(CardNotFoundError):
            await evaluate_deck_list(deck, DeckConfig(), source, trials=100, seed=1)
