"""
Deck API endpoints.

Build a deck around a commander, or evaluate an existing deck list.
"""

from collections.abc import AsyncGenerator
from dataclasses import asdict
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from commanderforge.config import DEFAULT_MAX_CANDIDATES, settings
from commanderforge.models.deck_config import DEFAULT_POWER, DeckConfig
from commanderforge.services.deck_builder import (
    CardSource,
    CommanderNotDeterminedError,
    build_commander_deck,
)
from commanderforge.services.deck_evaluator import evaluate_deck_list
from commanderforge.services.disk_cache import DiskCache
from commanderforge.services.formatters import report_to_dict
from commanderforge.services.scryfall_client import (
    CardLookupError,
    CardNotFoundError,
    ScryfallClient,
)

router = APIRouter(prefix="/decks", tags=["decks"])


async def get_card_source() -> AsyncGenerator[CardSource, None]:
    """Scryfall client for one request, backed by the shared disk cache."""
    async with ScryfallClient(cache=DiskCache(settings.cache_dir)) as client:
        yield client


# =============================================================================
# SCHEMAS
# =============================================================================


class BuildRequest(BaseModel):
    """Request model for building a deck."""

    commander: str = Field(min_length=1)
    themes: list[str] = Field(default_factory=list)
    power: str = DEFAULT_POWER
    budget_usd: Decimal | None = Field(default=None, ge=0)
    no_stax: bool = False
    no_infinite: bool = False
    allow_tutors: bool = False
    seed: int = 0
    max_candidates: int = DEFAULT_MAX_CANDIDATES


class EvaluateRequest(BaseModel):
    """Request model for evaluating a deck list."""

    deck: str = Field(min_length=1)
    commander: str | None = None
    themes: list[str] = Field(default_factory=list)
    power: str = DEFAULT_POWER


class ReportResponse(BaseModel):
    """Role counts for a card list."""

    total_cards: int
    lands: int
    ramp: int
    draw_total: int
    draw_personal: int
    draw_group: int
    draw_engines: int
    draw_spells: int
    cantrips: int
    removal: int
    wipes: int
    protection: int
    tutors: int
    payoffs: int
    win_cons: int
    estimated_usd: float
    average_mana_value: float


class SimulationResponse(BaseModel):
    trials: int
    keepable_7_pct: float
    keepable_6_pct: float
    at_least_2_lands_in_7_pct: float
    hit_third_land_by_turn_3_pct: float


class ManaResponse(BaseModel):
    color: str
    demand: int
    sources: int


class SuggestionResponse(BaseModel):
    category: str
    message: str
    priority: int


class BuildResponse(BaseModel):
    """Response model for a built deck."""

    commander: str
    mainboard: list[str]
    report: ReportResponse
    warnings: list[str]


class EvaluateResponse(BaseModel):
    """Response model for a deck evaluation."""

    commander: str
    mainboard: list[str]
    report: ReportResponse
    simulation: SimulationResponse
    mana: list[ManaResponse]
    suggestions: list[SuggestionResponse]
    score: int = Field(ge=0, le=100)
    warnings: list[str]


def _lookup_failed(e: CardLookupError) -> HTTPException:
    if isinstance(e, CardNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.post("/build", response_model=BuildResponse)
async def build_deck(
    request: BuildRequest,
    source: Annotated[CardSource, Depends(get_card_source)],
) -> BuildResponse:
    """
    Build a 99-card mainboard for a commander.

    Returns 404 if the commander doesn't exist, 502 if Scryfall fails.
    """
    config = DeckConfig(**request.model_dump())

    try:
        result = await build_commander_deck(config, source)
    except CommanderNotDeterminedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except CardLookupError as e:
        raise _lookup_failed(e) from e

    return BuildResponse(
        commander=result.commander.name,
        mainboard=[c.name for c in result.mainboard],
        report=ReportResponse(**report_to_dict(result.report)),
        warnings=result.warnings,
    )


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_deck(
    request: EvaluateRequest,
    source: Annotated[CardSource, Depends(get_card_source)],
) -> EvaluateResponse:
    """
    Evaluate a deck list.

    Returns 400 if no commander can be determined, 404 for an unknown card,
    502 if Scryfall fails.
    """
    config = DeckConfig(
        commander=request.commander or "",
        themes=request.themes,
        power=request.power,
    )

    try:
        result = await evaluate_deck_list(request.deck, config, source)
    except CommanderNotDeterminedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except CardLookupError as e:
        raise _lookup_failed(e) from e

    return EvaluateResponse(
        commander=result.commander.name,
        mainboard=[c.name for c in result.mainboard],
        report=ReportResponse(**report_to_dict(result.report)),
        simulation=SimulationResponse(**asdict(result.simulation)),
        mana=[ManaResponse(color=m.color, demand=m.demand, sources=m.sources) for m in result.mana],
        suggestions=[
            SuggestionResponse(category=s.category, message=s.message, priority=s.priority)
            for s in result.suggestions
        ],
        score=result.score,
        warnings=result.warnings,
    )
