"""
Role count aggregation for a finished card list.
"""

from collections.abc import Sequence
from decimal import Decimal

from commanderforge.models.card import Card, CardRole
from commanderforge.models.deck import DeckReport
from commanderforge.tagging.roles import is_draw_engine, is_draw_spell, is_personal_draw


def _count_role(cards: Sequence[Card], role: CardRole) -> int:
    return sum(1 for c in cards if c.has_role(role))


def estimated_price(cards: Sequence[Card]) -> Decimal:
    """Sum of known prices; unknown prices count as zero."""
    return sum((c.usd_price or Decimal(0) for c in cards), Decimal(0))


def average_mana_value(cards: Sequence[Card]) -> float:
    """Average mana value over non-land cards (0.0 when there are none)."""
    nonlands = [c for c in cards if not c.is_land]
    if not nonlands:
        return 0.0
    return float(sum(c.mana_value for c in nonlands)) / len(nonlands)


def build_deck_report(cards: Sequence[Card]) -> DeckReport:
    """
    Tally role counts, price and average mana value.

    draw_personal counts the allocator's draw-engine bucket (draw that is
    neither group draw nor a cantrip); draw_engines and draw_spells split
    that bucket by whether the draw repeats.
    """
    return DeckReport(
        total_cards=len(cards),
        lands=sum(1 for c in cards if c.is_land),
        ramp=_count_role(cards, CardRole.RAMP),
        draw_total=_count_role(cards, CardRole.DRAW),
        draw_personal=sum(1 for c in cards if is_personal_draw(c)),
        draw_group=_count_role(cards, CardRole.GROUP_DRAW),
        draw_engines=sum(1 for c in cards if is_draw_engine(c)),
        draw_spells=sum(1 for c in cards if is_draw_spell(c)),
        cantrips=_count_role(cards, CardRole.CANTRIP),
        removal=_count_role(cards, CardRole.REMOVAL),
        wipes=_count_role(cards, CardRole.WIPE),
        protection=_count_role(cards, CardRole.PROTECTION),
        tutors=_count_role(cards, CardRole.TUTOR),
        payoffs=_count_role(cards, CardRole.PAYOFF),
        win_cons=_count_role(cards, CardRole.WIN_CON),
        estimated_usd=estimated_price(cards),
        average_mana_value=average_mana_value(cards),
    )
