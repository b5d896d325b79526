from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

# The five colour identity symbols, in WUBRG order
COLOR_SYMBOLS: tuple[str, ...] = ("W", "U", "B", "R", "G")


class CardRole(str, Enum):
    """Functional role a card can play in a Commander deck.

    Roles are not exclusive: a card carries a set of them.
    """

    RAMP = "ramp"
    DRAW = "draw"
    GROUP_DRAW = "group_draw"
    CANTRIP = "cantrip"
    REMOVAL = "removal"
    WIPE = "wipe"
    PROTECTION = "protection"
    TUTOR = "tutor"
    PAYOFF = "payoff"
    WIN_CON = "win_con"
    NARROW_HATE = "narrow_hate"


@dataclass(frozen=True, slots=True)
class Card:
    """
    A normalized card ready for classification, scoring and selection.

    Attributes:
        id: Scryfall card id (or "basic:<name>" for generated basic lands)
        name: Card name
        oracle_text: Rules text; double-faced cards have their faces joined by newlines
        type_line: Full type line
        mana_value: Converted mana cost (Decimal, some costs are fractional)
        color_identity: Colour identity symbols, subset of WUBRG
        is_commander_eligible: Heuristic commander legality
        usd_price: Market price in USD, None when unknown
        roles: Functional role tags
        theme_tags: Requested themes this card matches
    """

    id: str
    name: str
    oracle_text: str = ""
    type_line: str = ""
    mana_value: Decimal = Decimal(0)
    color_identity: tuple[str, ...] = ()
    is_commander_eligible: bool = False
    usd_price: Decimal | None = None
    roles: frozenset[CardRole] = field(default_factory=frozenset)
    theme_tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        invalid = [c for c in self.color_identity if c not in COLOR_SYMBOLS]
        if invalid:
            raise ValueError(f"Invalid color identity symbols for {self.name!r}: {invalid}")

    @property
    def is_land(self) -> bool:
        """True if the type line contains Land."""
        return "land" in self.type_line.lower()

    @property
    def name_key(self) -> str:
        """Case-insensitive name used for singleton checks."""
        return self.name.lower()

    def has_role(self, role: CardRole) -> bool:
        """Check whether the card carries a role tag."""
        return role in self.roles
