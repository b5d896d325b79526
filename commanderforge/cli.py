"""
Command-line interface.

    commanderforge build --commander "Name" [options]
    commanderforge eval --deck deck.txt [--commander "Name"] [options]
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

from commanderforge.config import DEFAULT_MAX_CANDIDATES, settings
from commanderforge.models.deck_config import DEFAULT_POWER, POWER_PRESETS, DeckConfig
from commanderforge.services.deck_builder import (
    CardSource,
    CommanderNotDeterminedError,
    build_commander_deck,
)
from commanderforge.services.deck_evaluator import evaluate_deck_list
from commanderforge.services.disk_cache import DiskCache
from commanderforge.services.formatters import (
    deck_result_to_dict,
    evaluation_to_dict,
    format_build_report,
    format_card_roles,
    format_category_cards,
    format_deck_list,
    format_evaluation_report,
    to_json,
)
from commanderforge.services.scryfall_client import CardLookupError, ScryfallClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _budget(value: str) -> Decimal:
    try:
        budget = Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"Invalid --budget value: {value}") from e
    if not budget.is_finite() or budget < 0:
        raise argparse.ArgumentTypeError(f"Invalid --budget value: {value}")
    return budget


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--theme", default="", help='Comma-separated themes, e.g. "group_hug,lifegain"'
    )
    parser.add_argument(
        "--power",
        default=DEFAULT_POWER,
        help=f"Power preset: {', '.join(sorted(POWER_PRESETS))} (default: {DEFAULT_POWER})",
    )
    parser.add_argument("--output", type=Path, help="Write the deck list / report to this file")
    parser.add_argument("--output-json", type=Path, help="Write a JSON document to this file")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commanderforge",
        description="Commander deck tools (Scryfall-backed)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    build = commands.add_parser("build", help="Generate a 99-card mainboard and report")
    build.add_argument("--commander", required=True, help="Commander card name")
    _add_common_options(build)
    build.add_argument("--budget", type=_budget, help="Budget cap in USD")
    build.add_argument("--no-stax", action="store_true", help="Exclude stax-like cards (heuristic)")
    build.add_argument(
        "--no-infinite", action="store_true", help="Exclude known infinite combo pieces"
    )
    build.add_argument("--allow-tutors", action="store_true", help="Lift the tutor soft cap")
    build.add_argument("--seed", type=int, default=0, help="Seed for basic land colours")
    build.add_argument(
        "--max-candidates",
        type=int,
        default=DEFAULT_MAX_CANDIDATES,
        help=f"Cap on fetched candidates (default: {DEFAULT_MAX_CANDIDATES})",
    )

    evaluate = commands.add_parser(
        "eval", aliases=["evaluate"], help="Evaluate an existing deck list"
    )
    evaluate.add_argument("--deck", type=Path, help="Deck list file (stdin when omitted)")
    evaluate.add_argument(
        "--commander", default="", help="Commander name, if not first in the list"
    )
    _add_common_options(evaluate)
    evaluate.add_argument("--show-cards", action="store_true", help="List cards per category")
    evaluate.add_argument("--show-cards-for", default="", help="Only these categories (CSV)")
    evaluate.add_argument("--show-card-roles", action="store_true", help="List roles per card")

    return parser


def _write(path: Path, text: str, label: str) -> None:
    path.write_text(text, encoding="utf-8")
    print(f"Wrote {label}: {path}")


async def run_build(args: argparse.Namespace, source: CardSource) -> int:
    """Build a deck and print its report."""
    config = DeckConfig.from_theme_csv(
        args.theme,
        commander=args.commander,
        power=args.power,
        budget_usd=args.budget,
        no_stax=args.no_stax,
        no_infinite=args.no_infinite,
        allow_tutors=args.allow_tutors,
        seed=args.seed,
        max_candidates=args.max_candidates,
    )

    result = await build_commander_deck(config, source)
    print(format_build_report(result, show_price=config.has_budget))

    if args.output:
        _write(args.output, format_deck_list(result), "deck list")
    if args.output_json:
        _write(args.output_json, to_json(deck_result_to_dict(result)), "JSON")

    return EXIT_OK


def _read_deck_text(args: argparse.Namespace) -> str | None:
    if args.deck:
        if not args.deck.exists():
            logger.error("Deck file not found: %s", args.deck)
            return None
        return args.deck.read_text(encoding="utf-8")

    text = sys.stdin.read()
    if not text.strip():
        logger.error("Missing --deck deck.txt (or provide deck text via stdin)")
        return None
    return text


async def run_eval(args: argparse.Namespace, source: CardSource) -> int:
    """Evaluate a deck list and print the report."""
    deck_text = _read_deck_text(args)
    if deck_text is None:
        return EXIT_USAGE

    config = DeckConfig.from_theme_csv(args.theme, commander=args.commander, power=args.power)
    result = await evaluate_deck_list(deck_text, config, source)

    sections = [format_evaluation_report(result)]
    if args.show_cards or args.show_cards_for:
        only = [k for k in args.show_cards_for.split(",") if k.strip()]
        sections.append(format_category_cards(result.mainboard, only))
    if args.show_card_roles:
        sections.append(format_card_roles(result.mainboard))

    report_text = "\n\n".join(sections)
    print(report_text)

    if args.output:
        _write(args.output, report_text, "evaluation report")
    if args.output_json:
        _write(args.output_json, to_json(evaluation_to_dict(result)), "JSON")

    return EXIT_OK


async def run(args: argparse.Namespace, source: CardSource) -> int:
    """Dispatch a parsed command, mapping known failures to exit codes."""
    try:
        if args.command == "build":
            return await run_build(args, source)
        return await run_eval(args, source)
    except CommanderNotDeterminedError as e:
        logger.error("%s", e)
        return EXIT_USAGE
    except CardLookupError as e:
        logger.error("Card lookup failed: %s", e)
        return EXIT_FAILURE


async def _run_with_scryfall(args: argparse.Namespace) -> int:
    async with ScryfallClient(cache=DiskCache(settings.cache_dir)) as client:
        return await run(args, client)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return asyncio.run(_run_with_scryfall(args))


if __name__ == "__main__":
    sys.exit(main())
