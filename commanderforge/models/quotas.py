"""
Role quotas per power preset.

Targets are what the allocator tries to reach for each category; soft caps
bound how far the fill pass may over-concentrate a category.
"""

from dataclasses import dataclass

from commanderforge.config import MAINBOARD_SIZE


@dataclass(frozen=True)
class Quotas:
    """Composition targets for one power preset."""

    lands: int

    ramp: int
    draw_engines: int
    group_draw: int

    removal: int
    wipes: int
    protection: int

    payoffs: int

    tutors_soft_cap: int

    # Soft caps (avoid the "oops all ramp" problem)
    ramp_soft_cap: int
    draw_engines_soft_cap: int
    group_draw_soft_cap: int
    cantrips_soft_cap: int
    removal_soft_cap: int
    wipes_soft_cap: int
    protection_soft_cap: int

    # Minimum number of clear finishers
    win_cons_min: int

    @property
    def nonland_budget(self) -> int:
        """Non-land slots in the 99-card mainboard."""
        return MAINBOARD_SIZE - self.lands


PRECON_QUOTAS = Quotas(
    lands=38,
    ramp=10,
    draw_engines=6,
    group_draw=6,
    removal=8,
    wipes=3,
    protection=3,
    payoffs=18,
    tutors_soft_cap=2,
    ramp_soft_cap=14,
    draw_engines_soft_cap=10,
    group_draw_soft_cap=10,
    cantrips_soft_cap=10,
    removal_soft_cap=11,
    wipes_soft_cap=4,
    protection_soft_cap=5,
    win_cons_min=2,
)

UPGRADED_QUOTAS = Quotas(
    lands=37,
    ramp=11,
    draw_engines=7,
    group_draw=6,
    removal=10,
    wipes=3,
    protection=4,
    payoffs=20,
    tutors_soft_cap=4,
    ramp_soft_cap=15,
    draw_engines_soft_cap=11,
    group_draw_soft_cap=10,
    cantrips_soft_cap=12,
    removal_soft_cap=13,
    wipes_soft_cap=4,
    protection_soft_cap=6,
    win_cons_min=2,
)

OPTIMIZED_QUOTAS = Quotas(
    lands=36,
    ramp=12,
    draw_engines=8,
    group_draw=6,
    removal=12,
    wipes=3,
    protection=5,
    payoffs=22,
    tutors_soft_cap=6,
    ramp_soft_cap=16,
    draw_engines_soft_cap=12,
    group_draw_soft_cap=10,
    cantrips_soft_cap=12,
    removal_soft_cap=15,
    wipes_soft_cap=4,
    protection_soft_cap=7,
    win_cons_min=2,
)

# Presets with their own table; everything else (including cedh_adjacent)
# uses the upgraded numbers.
_PRESET_QUOTAS: dict[str, Quotas] = {
    "precon": PRECON_QUOTAS,
    "optimized": OPTIMIZED_QUOTAS,
}


def quotas_for_power(power: str) -> Quotas:
    """Look up the quota table for a power preset, defaulting to upgraded."""
    return _PRESET_QUOTAS.get((power or "").strip().lower(), UPGRADED_QUOTAS)
