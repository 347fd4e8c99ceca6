"""
Stage 3: Filters
================
Rejects candidates that break a custom rule or a relation threshold.
Checks run in a fixed order and the first violation is reported.

Filters:
- Blacklisted digits, required prefix, required suffix (custom rules)
- Relation thresholds (khac, bi_khac, sinh, cung, total negative, any kind)
- Every element present, total positive digits capped (optional)
- Digit parity and half-sum balance (optional)
"""

from typing import Callable, List, Optional, Tuple

from ..models.analysis_config import FilterConfig
from ..models.schemas import ElementRelation, FilterReason, FilterResult, RelationCounts

Check = Callable[[RelationCounts, FilterConfig, str], Optional[str]]


class FilterStage:
    """
    Stage 3: Apply custom rules and relation thresholds.
    """

    def __init__(self):
        self.checks: List[Tuple[FilterReason, Check]] = [
            (FilterReason.BLACKLIST, self._check_blacklist),
            (FilterReason.PREFIX, self._check_prefix),
            (FilterReason.SUFFIX, self._check_suffix),
            (FilterReason.KHAC_MAX, self._check_khac_max),
            (FilterReason.BI_KHAC_MAX, self._check_bi_khac_max),
            (FilterReason.SINH_MIN, self._check_sinh_min),
            (FilterReason.CUNG_MIN, self._check_cung_min),
            (FilterReason.TONG_MAX, self._check_tong_max),
            (FilterReason.ANY_MAX, self._check_any_max),
            (FilterReason.COMPLETENESS, self._check_completeness),
            (FilterReason.POSITIVE_MAX, self._check_positive_max),
            (FilterReason.PARITY, self._check_parity),
        ]

    def process(
        self, counts: RelationCounts, filters: FilterConfig, candidate: str
    ) -> FilterResult:
        """
        Apply all filters to a scored candidate.

        Args:
            counts: Relation counts from the scoring stage
            filters: Thresholds and custom rules
            candidate: Digit string

        Returns:
            FilterResult with pass/fail status and the first violated rule
        """
        checks_performed = 0

        for reason, check in self.checks:
            checks_performed += 1
            message = check(counts, filters, candidate)
            if message is not None:
                return FilterResult(
                    passed=False,
                    checked_filters=checks_performed,
                    rejection_reason=message,
                    rejected_by=reason,
                )

        return FilterResult(passed=True, checked_filters=checks_performed)

    # =========================================================================
    # Custom rules
    # =========================================================================

    def _check_blacklist(self, counts, filters, candidate):
        if not filters.toggle_blacklist_filter:
            return None
        blacklist = filters.blacklist
        for digit in candidate:
            if digit in blacklist:
                return f"Contains blacklisted digit: {digit}"
        return None

    def _check_prefix(self, counts, filters, candidate):
        if not filters.toggle_prefix_filter or not filters.prefix_value:
            return None
        if not candidate.startswith(filters.prefix_value):
            return f"Does not start with {filters.prefix_value}"
        return None

    def _check_suffix(self, counts, filters, candidate):
        if not filters.toggle_suffix_filter or not filters.suffix_value:
            return None
        if not candidate.endswith(filters.suffix_value):
            return f"Does not end with {filters.suffix_value}"
        return None

    # =========================================================================
    # Relation thresholds
    # =========================================================================

    def _check_khac_max(self, counts, filters, candidate):
        if counts.khac > filters.filter_khac_max:
            return f"Too many khac digits: {counts.khac} > {filters.filter_khac_max}"
        return None

    def _check_bi_khac_max(self, counts, filters, candidate):
        if counts.bi_khac > filters.filter_bi_khac_max:
            return f"Too many bi khac digits: {counts.bi_khac} > {filters.filter_bi_khac_max}"
        return None

    def _check_sinh_min(self, counts, filters, candidate):
        if counts.sinh < filters.filter_sinh_min:
            return f"Too few sinh digits: {counts.sinh} < {filters.filter_sinh_min}"
        return None

    def _check_cung_min(self, counts, filters, candidate):
        if counts.cung < filters.filter_cung_min:
            return f"Too few cung digits: {counts.cung} < {filters.filter_cung_min}"
        return None

    def _check_tong_max(self, counts, filters, candidate):
        if counts.negative > filters.filter_tong_max:
            return f"Too many negative digits: {counts.negative} > {filters.filter_tong_max}"
        return None

    def _check_any_max(self, counts, filters, candidate):
        for relation in ElementRelation:
            value = counts.get(relation)
            if value > filters.filter_any_max:
                return f"Relation {relation.value} dominates: {value} > {filters.filter_any_max}"
        return None

    def _check_completeness(self, counts, filters, candidate):
        if not filters.toggle_completeness_filter:
            return None
        # each relation kind belongs to exactly one element
        missing = [r.value for r in ElementRelation if counts.get(r) == 0]
        if missing:
            return f"Missing element for: {', '.join(missing)}"
        return None

    def _check_positive_max(self, counts, filters, candidate):
        if not filters.toggle_positive_filter:
            return None
        positive = counts.sinh + counts.cung
        if positive > filters.filter_positive_max:
            return f"Too many positive digits: {positive} > {filters.filter_positive_max}"
        return None

    # =========================================================================
    # Parity
    # =========================================================================

    def _check_parity(self, counts, filters, candidate):
        if not filters.toggle_parity_filter:
            return None

        even = sum(1 for d in candidate if int(d) % 2 == 0)
        if not filters.parity_even_min <= even <= filters.parity_even_max:
            return (
                f"Even digit count {even} outside "
                f"{filters.parity_even_min}-{filters.parity_even_max}"
            )

        half = len(candidate) // 2
        for label, part in (("first", candidate[:half]), ("second", candidate[half:])):
            total = sum(int(d) for d in part)
            if total % 8 == 0:
                return f"Digit sum of {label} half is a multiple of 8: {total}"

        return None
