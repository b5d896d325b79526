"""
Output formatting service.

Renders build and evaluation results as human-readable reports, deck.txt
lists and JSON documents.
"""

import json
from collections.abc import Callable, Iterable
from dataclasses import asdict
from decimal import Decimal
from typing import Any

from commanderforge.models.card import Card, CardRole
from commanderforge.models.deck import DeckEvaluationResult, DeckReport, DeckResult
from commanderforge.tagging.roles import is_draw_engine, is_draw_spell

# Category listing buckets: key, title, predicate (in display order)
CARD_BUCKETS: tuple[tuple[str, str, Callable[[Card], bool]], ...] = (
    ("lands", "Lands", lambda c: c.is_land),
    ("ramp", "Ramp", lambda c: c.has_role(CardRole.RAMP)),
    ("draw_engines", "Draw Engines", is_draw_engine),
    ("draw_spells", "Draw Spells", is_draw_spell),
    ("cantrips", "Cantrips", lambda c: c.has_role(CardRole.CANTRIP)),
    ("group_draw", "Group Draw", lambda c: c.has_role(CardRole.GROUP_DRAW)),
    ("removal", "Removal", lambda c: c.has_role(CardRole.REMOVAL)),
    ("wipes", "Board Wipes", lambda c: c.has_role(CardRole.WIPE)),
    ("protection", "Protection", lambda c: c.has_role(CardRole.PROTECTION)),
    ("tutors", "Tutors", lambda c: c.has_role(CardRole.TUTOR)),
    ("payoffs", "Payoffs", lambda c: c.has_role(CardRole.PAYOFF)),
    ("wincons", "Wincons", lambda c: c.has_role(CardRole.WIN_CON)),
)

# Role labels for the per-card listing, in display order
ROLE_LABELS: tuple[tuple[CardRole, str], ...] = (
    (CardRole.RAMP, "Ramp"),
    (CardRole.DRAW, "Draw"),
    (CardRole.CANTRIP, "Cantrip"),
    (CardRole.GROUP_DRAW, "GroupDraw"),
    (CardRole.REMOVAL, "Removal"),
    (CardRole.WIPE, "Wipe"),
    (CardRole.PROTECTION, "Protection"),
    (CardRole.TUTOR, "Tutor"),
    (CardRole.PAYOFF, "Payoff"),
    (CardRole.WIN_CON, "WinCon"),
    (CardRole.NARROW_HATE, "NarrowHate"),
)


def group_by_name(cards: Iterable[Card]) -> list[tuple[str, int, Card]]:
    """
    Group cards by case-insensitive name.

    Returns:
        (display name, count, first card) tuples, sorted by name
    """
    groups: dict[str, list[Card]] = {}
    for card in cards:
        groups.setdefault(card.name_key, []).append(card)
    return [
        (members[0].name, len(members), members[0])
        for _, members in sorted(groups.items(), key=lambda item: item[0])
    ]


def _breakdown_lines(report: DeckReport, include_spells: bool) -> list[str]:
    lines = [
        "Breakdown:",
        f"  Lands:        {report.lands}",
        f"  Ramp:         {report.ramp}",
        f"  Draw (total): {report.draw_total}",
        f"    - Engines:  {report.draw_engines}",
    ]
    if include_spells:
        lines.append(f"    - Spells:   {report.draw_spells}")
    lines += [
        f"    - Cantrips: {report.cantrips}",
        f"    - Group:    {report.draw_group}",
        f"  Removal:      {report.removal}",
        f"  Wipes:        {report.wipes}",
        f"  Protection:   {report.protection}",
        f"  Tutors:       {report.tutors}",
        f"  Payoffs:      {report.payoffs}",
        f"  Wincons:      {report.win_cons}",
    ]
    return lines


# =============================================================================
# HUMAN REPORTS
# =============================================================================


def format_build_report(result: DeckResult, show_price: bool = False) -> str:
    """Human-readable summary of a built deck."""
    report = result.report
    lines = [
        f"Commander: {result.commander.name}",
        f"Cards: {len(result.mainboard) + 1} (Commander + {len(result.mainboard)})",
        f"Avg mana value (nonlands): {report.average_mana_value:.2f}",
        "",
        *_breakdown_lines(report, include_spells=False),
    ]

    if show_price:
        lines.append(f"  Est. USD:     {report.estimated_usd:.2f}")

    if result.warnings:
        lines += ["", "Warnings:"]
        lines += [f"  - {w}" for w in result.warnings]

    return "\n".join(lines)


def format_evaluation_report(result: DeckEvaluationResult) -> str:
    """Human-readable evaluation: score, breakdown, simulation and suggestions."""
    report = result.report
    sim = result.simulation
    lines = [
        f"Commander: {result.commander.name}",
        f"Score: {result.score}/100",
        f"Avg mana value (nonlands): {report.average_mana_value:.2f}",
        "",
        *_breakdown_lines(report, include_spells=True),
        "",
        "Mana (demand / sources):",
        *(f"  {m.color}: {m.demand} / {m.sources}" for m in result.mana),
        "",
        f"Opening Hand / Land Drops ({sim.trials} simulated shuffles):",
        f"  Keepable 7:               {sim.keepable_7_pct:.1f}%",
        f"  Keepable 6:               {sim.keepable_6_pct:.1f}%",
        f"  2+ lands in opening 7:    {sim.at_least_2_lands_in_7_pct:.1f}%",
        f"  Hit 3rd land by T3 (OTP): {sim.hit_third_land_by_turn_3_pct:.1f}%",
        "",
        "Suggestions:",
    ]

    if not result.suggestions:
        lines.append("  (none) Looks structurally sound.")
    else:
        lines += [f"  - [{s.category}] {s.message}" for s in result.suggestions]

    if result.warnings:
        lines += ["", "Warnings:"]
        lines += [f"  - {w}" for w in result.warnings]

    return "\n".join(lines)


def normalize_bucket_key(key: str) -> str:
    return key.strip().lower().replace("-", "_").replace(" ", "_")


def format_category_cards(cards: list[Card], only: Iterable[str] | None = None) -> str:
    """
    List the cards counted in each category.

    Args:
        cards: Mainboard cards
        only: Bucket keys to include (all when empty); unknown keys are reported and ignored
    """
    requested = {normalize_bucket_key(k) for k in (only or []) if k.strip()}
    known = {key for key, _, _ in CARD_BUCKETS}
    unknown = sorted(requested - known)
    include_all = not requested

    header = "Cards counted per category:"
    if not include_all:
        header += f" (filtered: {', '.join(sorted(requested & known))})"
    lines = [header]
    if unknown:
        lines.append(f"(ignored unknown buckets: {', '.join(unknown)})")

    for key, title, predicate in CARD_BUCKETS:
        if not include_all and key not in requested:
            continue

        matches = [c for c in cards if predicate(c)]
        lines += ["", f"{title} ({len(matches)}):"]
        if not matches:
            lines.append("  (none)")
            continue
        for name, count, _ in group_by_name(matches):
            suffix = f" x{count}" if count > 1 else ""
            lines.append(f"  - {name}{suffix}")

    return "\n".join(lines)


def card_role_labels(card: Card) -> list[str]:
    """Role labels for a card, with Land and the derived draw kind."""
    labels = ["Land"] if card.is_land else []
    labels += [label for role, label in ROLE_LABELS if card.has_role(role)]
    if is_draw_engine(card):
        labels.append("DrawEngine")
    elif is_draw_spell(card):
        labels.append("DrawSpell")
    return labels


def format_card_roles(cards: list[Card]) -> str:
    """Every card (grouped by name) with the roles it was tagged with."""
    lines = ["Per-card roles (grouped):"]
    for name, count, sample in group_by_name(cards):
        labels = card_role_labels(sample)
        role_text = ", ".join(labels) if labels else "(no roles)"
        suffix = f" x{count}" if count > 1 else ""
        lines.append(f"- {name}{suffix}: {role_text}")
    return "\n".join(lines)


# =============================================================================
# DECK LIST
# =============================================================================


def format_deck_list(result: DeckResult) -> str:
    """deck.txt: commander first, then "N Name" grouped and alphabetical."""
    lines = [f"1 {result.commander.name}"]
    mainboard = [c for c in result.mainboard if c.name_key != result.commander.name_key]
    lines += [f"{count} {name}" for name, count, _ in group_by_name(mainboard)]
    return "\n".join(lines) + "\n"


# =============================================================================
# JSON
# =============================================================================


def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "name": card.name,
        "oracle_text": card.oracle_text,
        "type_line": card.type_line,
        "mana_value": float(card.mana_value),
        "color_identity": list(card.color_identity),
        "is_commander_eligible": card.is_commander_eligible,
        "usd_price": float(card.usd_price) if card.usd_price is not None else None,
        "roles": [role.value for role, _ in ROLE_LABELS if card.has_role(role)],
        "theme_tags": list(card.theme_tags),
    }


def report_to_dict(report: DeckReport) -> dict[str, Any]:
    data = asdict(report)
    data["estimated_usd"] = float(report.estimated_usd)
    return data


def deck_result_to_dict(result: DeckResult) -> dict[str, Any]:
    return {
        "commander": card_to_dict(result.commander),
        "mainboard": [card_to_dict(c) for c in result.mainboard],
        "report": report_to_dict(result.report),
        "warnings": list(result.warnings),
    }


def evaluation_to_dict(result: DeckEvaluationResult) -> dict[str, Any]:
    return {
        "commander": card_to_dict(result.commander),
        "mainboard": [card_to_dict(c) for c in result.mainboard],
        "report": report_to_dict(result.report),
        "simulation": asdict(result.simulation),
        "mana": [asdict(m) for m in result.mana],
        "suggestions": [asdict(s) for s in result.suggestions],
        "score": result.score,
        "warnings": list(result.warnings),
    }


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(data: dict[str, Any]) -> str:
    """Indented JSON document."""
    return json.dumps(data, indent=2, default=_json_default)
