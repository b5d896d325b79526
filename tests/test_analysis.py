"""Tests for opening-hand simulation, colour analysis and deck reports."""

from decimal import Decimal
from math import comb

import pytest

from commanderforge.analysis.mana import analyze_mana
from commanderforge.analysis.report import average_mana_value, build_deck_report, estimated_price
from commanderforge.analysis.simulator import simulate_opening_hands


def _deck(make_card, lands: int, total: int) -> list:
    cards = [make_card(f"Land {i}", type_line="Basic Land", mana_value=0) for i in range(lands)]
    cards += [make_card(f"Spell {i}", type_line="Creature") for i in range(total - lands)]
    return cards


def _at_least(k: int, deck_size: int, lands: int, drawn: int) -> float:
    """Exact hypergeometric P(X >= k)."""
    total = comb(deck_size, drawn)
    hits = sum(comb(lands, x) * comb(deck_size - lands, drawn - x) for x in range(k, drawn + 1))
    return hits / total


# =============================================================================
# SIMULATOR
# =============================================================================


class TestSimulateOpeningHands:
    """Monte Carlo land statistics."""

    def test_converges_to_hypergeometric(self, make_card) -> None:
        deck = _deck(make_card, lands=37, total=99)
        stats = simulate_opening_hands(deck, trials=20000, seed=1)

        expected_two_in_7 = _at_least(2, 99, 37, 7) * 100
        expected_three_in_10 = _at_least(3, 99, 37, 10) * 100
        assert stats.at_least_2_lands_in_7_pct == pytest.approx(expected_two_in_7, abs=1.5)
        assert stats.hit_third_land_by_turn_3_pct == pytest.approx(expected_three_in_10, abs=1.5)

    def test_percentages_in_range(self, make_card) -> None:
        stats = simulate_opening_hands(_deck(make_card, 30, 99), trials=2000, seed=3)
        for pct in (
            stats.keepable_7_pct,
            stats.keepable_6_pct,
            stats.at_least_2_lands_in_7_pct,
            stats.hit_third_land_by_turn_3_pct,
        ):
            assert 0.0 <= pct <= 100.0

    def test_same_seed_same_result(self, make_card) -> None:
        deck = _deck(make_card, 36, 99)
        assert simulate_opening_hands(deck, trials=3000, seed=5) == simulate_opening_hands(
            deck, trials=3000, seed=5
        )

    def test_chunked_trials(self, make_card) -> None:
        stats = simulate_opening_hands(_deck(make_card, 37, 99), trials=12500, seed=2)
        assert stats.trials == 12500

    def test_all_lands(self, make_card) -> None:
        stats = simulate_opening_hands(_deck(make_card, 99, 99), trials=500, seed=1)
        assert stats.keepable_7_pct == 0.0
        assert stats.at_least_2_lands_in_7_pct == 100.0
        assert stats.hit_third_land_by_turn_3_pct == 100.0

    def test_no_lands(self, make_card) -> None:
        stats = simulate_opening_hands(_deck(make_card, 0, 99), trials=500, seed=1)
        assert stats.at_least_2_lands_in_7_pct == 0.0
        assert stats.keepable_6_pct == 0.0

    def test_small_deck_caps_depth(self, make_card) -> None:
        stats = simulate_opening_hands(_deck(make_card, 5, 5), trials=100, seed=1)
        assert stats.hit_third_land_by_turn_3_pct == 100.0
        assert stats.keepable_7_pct == 0.0

    def test_empty_deck_or_no_trials(self, make_card) -> None:
        empty = simulate_opening_hands([], trials=100, seed=1)
        no_trials = simulate_opening_hands(_deck(make_card, 37, 99), trials=0, seed=1)

        assert empty.at_least_2_lands_in_7_pct == 0.0
        assert no_trials.trials == 0
        assert no_trials.keepable_7_pct == 0.0


# =============================================================================
# MANA
# =============================================================================


class TestAnalyzeMana:
    def test_demand_and_sources(self, make_card) -> None:
        cards = [
            make_card("Azorius Signet", "{1}, {T}: Add {W}{U}."),
            make_card("Wrath", "{W}{W}: Destroy all creatures.", type_line="Sorcery"),
        ]
        stats = {m.color: m for m in analyze_mana(cards)}

        assert stats["W"].demand == 3
        assert stats["U"].demand == 1
        assert stats["W"].sources == 1
        assert stats["U"].sources == 1
        assert stats["B"].sources == 0

    def test_wubrg_order(self) -> None:
        assert [m.color for m in analyze_mana([])] == ["W", "U", "B", "R", "G"]

    def test_source_counted_once_per_card(self, make_card) -> None:
        card = make_card("Rock", "{T}: Add {G}.\n{T}: Add {G}{G}.")
        stats = {m.color: m for m in analyze_mana([card])}
        assert stats["G"].sources == 1
        assert stats["G"].demand == 3


# =============================================================================
# REPORT
# =============================================================================


class TestDeckReport:
    """Role tallies for a card list."""

    def test_counts(self, make_card) -> None:
        cards = [
            make_card("Forest", type_line="Basic Land", mana_value=0),
            make_card("Sol Ring", "{T}: Add {C}{C}.", mana_value=1, usd_price="2.50"),
            make_card("Study Engine", "{1}, {T}: Draw a card.", mana_value=3),
            make_card("Divination", "Draw two cards.", type_line="Sorcery", mana_value=3),
            make_card("Opt", "Scry 1.\nDraw a card.", type_line="Instant", mana_value=1),
            make_card("Vision Skeins", "Each player draws two cards.", type_line="Instant"),
            make_card("Murder", "Destroy target creature.", type_line="Instant", mana_value=3),
        ]
        report = build_deck_report(cards)

        assert report.total_cards == 7
        assert report.lands == 1
        assert report.ramp == 1
        assert report.draw_total == 4
        assert report.draw_personal == 2
        assert report.draw_engines == 1
        assert report.draw_spells == 1
        assert report.cantrips == 1
        assert report.draw_group == 1
        assert report.removal == 1
        assert report.estimated_usd == Decimal("2.50")

    def test_average_mana_value_ignores_lands(self, make_card) -> None:
        cards = [
            make_card("Forest", type_line="Basic Land", mana_value=0),
            make_card("A", mana_value=2),
            make_card("B", mana_value=4),
        ]
        assert average_mana_value(cards) == pytest.approx(3.0)
        assert average_mana_value([cards[0]]) == 0.0

    def test_unknown_prices_count_as_zero(self, make_card) -> None:
        cards = [make_card("A", usd_price="1.25"), make_card("B")]
        assert estimated_price(cards) == Decimal("1.25")

    def test_empty(self) -> None:
        report = build_deck_report([])
        assert report.total_cards == 0
        assert report.estimated_usd == Decimal(0)
