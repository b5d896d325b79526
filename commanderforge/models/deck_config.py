from dataclasses import dataclass, field
from decimal import Decimal

from commanderforge.config import (
    DEFAULT_MAX_CANDIDATES,
    DEFAULT_SEED,
    MAX_MAX_CANDIDATES,
    MIN_MAX_CANDIDATES,
)

POWER_PRESETS = frozenset({"precon", "upgraded", "optimized", "cedh_adjacent"})
DEFAULT_POWER = "upgraded"


@dataclass
class DeckConfig:
    """
    Parameters for building or evaluating a Commander deck.

    Attributes:
        commander: Commander card name (may be empty for evaluation)
        themes: Requested theme names (e.g. "lifegain", "group_hug")
        power: Power preset, one of POWER_PRESETS
        budget_usd: Optional budget ceiling in USD
        no_stax: Exclude stax-like cards (text heuristic)
        no_infinite: Exclude a small denylist of infinite-combo pieces
        allow_tutors: Lift the tutor soft cap
        seed: Seed for mana base basic-land colour choice (0 = default)
        max_candidates: Cap on fetched candidate cards
    """

    commander: str = ""
    themes: list[str] = field(default_factory=list)
    power: str = DEFAULT_POWER
    budget_usd: Decimal | None = None
    no_stax: bool = False
    no_infinite: bool = False
    allow_tutors: bool = False
    seed: int = 0
    max_candidates: int = DEFAULT_MAX_CANDIDATES

    def __post_init__(self) -> None:
        """Normalize themes, power preset and candidate cap."""
        self.commander = (self.commander or "").strip()
        self.themes = _normalize_themes(self.themes)

        power = (self.power or "").strip().lower()
        self.power = power if power in POWER_PRESETS else DEFAULT_POWER

        self.max_candidates = max(MIN_MAX_CANDIDATES, min(MAX_MAX_CANDIDATES, self.max_candidates))

    @classmethod
    def from_theme_csv(cls, theme_csv: str, **kwargs: object) -> "DeckConfig":
        """Build a config from a comma-separated theme string."""
        themes = [t for t in (theme_csv or "").split(",") if t.strip()]
        return cls(themes=themes, **kwargs)  # type: ignore[arg-type]

    @property
    def effective_seed(self) -> int:
        """Seed actually used for random choices."""
        return self.seed or DEFAULT_SEED

    @property
    def has_budget(self) -> bool:
        return self.budget_usd is not None


def _normalize_themes(themes: list[str] | None) -> list[str]:
    seen: list[str] = []
    for theme in themes or []:
        normalized = theme.strip().lower()
        if normalized and normalized not in seen:
            seen.append(normalized)
    return seen
