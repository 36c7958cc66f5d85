"""
Relevance scoring for the discovery engine
Strict-AND term matching with tiered match-quality weights
"""

import logging
from typing import Iterable, List, Sequence

from pydantic import BaseModel, ConfigDict

from .models import ScoredMatch

logger = logging.getLogger(__name__)


class ScoringWeights(BaseModel):
    """Weight table used by the scorer"""

    model_config = ConfigDict(frozen=True)

    exact: int = 90
    prefix: int = 45
    boundary: int = 30
    substring: int = 18

    # Shorter haystacks earn up to length_bonus_max extra points,
    # losing one point per length_bonus_step characters.
    length_bonus_max: int = 18
    length_bonus_step: int = 18

    def length_bonus(self, length: int) -> int:
        step = max(1, self.length_bonus_step)
        return max(0, min(self.length_bonus_max, self.length_bonus_max - length // step))


DEFAULT_WEIGHTS = ScoringWeights()


def score_text(haystack: str, terms: Sequence[str], weights: ScoringWeights = DEFAULT_WEIGHTS) -> int:
    """
    Score a normalized haystack against query terms

    Every term must match (strict AND); a single missing term returns 0.

    Args:
        haystack: Precomputed normalized searchable text
        terms: Normalized query terms
        weights: Weight table to apply

    Returns:
        Non-negative integer score, 0 meaning excluded
    """
    terms = [term for term in terms if term]
    if not terms:
        return 0

    haystack = haystack or ""
    score = 0

    for term in terms:
        if haystack == term:
            score += weights.exact
        elif haystack.startswith(term):
            score += weights.prefix
        elif f" {term}" in haystack:
            score += weights.boundary
        elif term in haystack:
            score += weights.substring
        else:
            return 0

    score += weights.length_bonus(len(haystack))
    return score


class RelevanceScorer:
    """Scores entities against query terms with a bound weight table"""

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS):
        self.weights = weights

    def score(self, haystack: str, terms: Sequence[str]) -> int:
        return score_text(haystack, terms, self.weights)

    def score_many(self, entities: Iterable, terms: Sequence[str]) -> List[ScoredMatch]:
        """Score entities by their search_text, dropping excluded ones"""
        matches: List[ScoredMatch] = []
        if not terms:
            return matches

        for entity in entities:
            score = self.score(entity.search_text, terms)
            if score > 0:
                matches.append(ScoredMatch(entity=entity, score=score))

        logger.debug(f"Scored candidates: {len(matches)} matched terms {list(terms)}")
        return matches
