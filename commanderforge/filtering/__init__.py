"""
Candidate filtering and scoring.

Candidate pool: colour identity, stax/infinite exclusions, singleton dedupe.
Scored pool: additive scoring and the total selection order.
"""

from commanderforge.filtering.candidate_pool import (
    INFINITE_COMBO_DENYLIST,
    STAX_PHRASES,
    CandidatePool,
    CandidatePoolMetrics,
    build_candidate_pool,
    dedupe_by_name,
    is_commander_card,
    passes_filters,
    within_color_identity,
)
from commanderforge.filtering.scored_pool import (
    ScoredCandidatePool,
    ScoredCard,
    build_scored_pool,
    fnv1a_32,
    name_jitter,
    score_card,
    score_terms,
)

__all__ = [
    # Candidate pool
    "CandidatePool",
    "CandidatePoolMetrics",
    "INFINITE_COMBO_DENYLIST",
    "STAX_PHRASES",
    "build_candidate_pool",
    "dedupe_by_name",
    "is_commander_card",
    "passes_filters",
    "within_color_identity",
    # Scored pool
    "ScoredCandidatePool",
    "ScoredCard",
    "build_scored_pool",
    "fnv1a_32",
    "name_jitter",
    "score_card",
    "score_terms",
]
