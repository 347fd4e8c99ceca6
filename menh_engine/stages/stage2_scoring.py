"""
Stage 2: Weighted Scoring
=========================
Deterministic per-candidate scoring against a reference element.

Terms:
- Relation score: count of each relation kind times its weight
- Adjacent flow: generating/clashing links between neighbouring digits
- Static balance (toggle): how evenly the five elements are spread
- Completeness (toggle): bonus when all five elements appear
"""

from typing import Dict, Hashable, List, Optional

from ..models.analysis_config import ScoringConfig, Toggles, UserProfile
from ..models.schemas import (
    ElementRelation,
    Mode,
    RelationCounts,
    ScoreBreakdown,
    ScoringResult,
)
from .element_model import DEFAULT_ELEMENT_MODEL, ElementModel


class WeightedScoringStage:
    """
    Stage 2: Count element relations for a candidate and score them.
    """

    def __init__(self, element_model: Optional[ElementModel] = None):
        self.model = element_model or DEFAULT_ELEMENT_MODEL

    def process(
        self,
        candidate: str,
        user: UserProfile,
        scoring: ScoringConfig,
        mode: Mode = Mode.COMPATIBILITY,
        toggles: Optional[Toggles] = None,
    ) -> ScoringResult:
        """
        Score a single candidate.

        Args:
            candidate: Digit string
            user: User profile (reference element in Compatibility mode)
            scoring: Relation weights and optional term weights
            mode: Compatibility or AbsoluteBalance
            toggles: Optional score terms

        Returns:
            ScoringResult with relation counts, score and breakdown
        """
        toggles = toggles or Toggles()
        elements = self.model.elements_of(candidate)

        element_counts: Dict[Hashable, int] = {e: 0 for e in self.model.elements}
        for element in elements:
            element_counts[element] += 1

        reference = self._reference_element(elements, element_counts, user, mode)
        counts = RelationCounts.from_relations(
            [self.model.relation(element, reference) for element in elements]
        )

        relation_score = sum(
            counts.get(relation) * scoring.weight_for(relation)
            for relation in ElementRelation
        )

        adjacent_score = self._adjacent_score(elements)
        adjacent_term = scoring.adjacent_weight * adjacent_score

        balance_term = 0.0
        if toggles.toggle_static_balance:
            balance_term = scoring.static_balance_weight * (
                2 * self._balance(element_counts, len(elements)) - 1
            )

        completeness_term = 0.0
        if toggles.toggle_completeness and all(c > 0 for c in element_counts.values()):
            completeness_term = scoring.completeness_bonus

        score = relation_score + adjacent_term + balance_term + completeness_term

        return ScoringResult(
            counts=counts,
            score=score,
            reference_element=reference,
            element_counts=element_counts,
            breakdown=ScoreBreakdown(
                relation_score=relation_score,
                adjacent_score=adjacent_score,
                adjacent_term=adjacent_term,
                balance_term=balance_term,
                completeness_term=completeness_term,
            ),
        )

    # =========================================================================
    # Sub-scoring functions
    # =========================================================================

    def _reference_element(
        self,
        elements: List[Hashable],
        element_counts: Dict[Hashable, int],
        user: UserProfile,
        mode: Mode,
    ) -> Hashable:
        """User's menh, or the candidate's dominant element in AbsoluteBalance"""
        if mode == Mode.COMPATIBILITY or not elements:
            if not self.model.is_known(user.user_menh):
                raise ValueError(f"Unknown user element: {user.user_menh!r}")
            return user.user_menh

        # most frequent element, ties go to the one seen first
        top = max(element_counts.values())
        for element in elements:
            if element_counts[element] == top:
                return element
        return elements[0]

    def _adjacent_score(self, elements: List[Hashable]) -> int:
        return sum(
            self.model.pair_value(a, b)
            for a, b in zip(elements, elements[1:])
        )

    def _balance(self, element_counts: Dict[Hashable, int], length: int) -> float:
        """1.0 for a perfectly even spread, 0.0 when one element holds every digit"""
        if length == 0:
            return 0.0
        n = len(element_counts)
        ideal = length / n
        deviation = sum(abs(count - ideal) for count in element_counts.values())
        max_deviation = 2 * length * (n - 1) / n
        return 1 - deviation / max_deviation
