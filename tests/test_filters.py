"""Tests for the filter stage and its evaluation order."""

import pytest

from menh_engine.models.analysis_config import FilterConfig
from menh_engine.models.schemas import FilterReason, RelationCounts
from menh_engine.stages.stage3_filters import FilterStage

from tests.conftest import PARITY_OK_15, PASS_13, PASS_15

DEFAULTS = dict(
    filter_khac_max=1,
    filter_bi_khac_max=2,
    filter_sinh_min=2,
    filter_cung_min=2,
    filter_tong_max=3,
    filter_any_max=4,
)
GOOD_COUNTS = RelationCounts(sinh=3, cung=3, bi_khac=2, sinh_xuat=1, khac=1)


def make_filters(**overrides) -> FilterConfig:
    return FilterConfig(**dict(DEFAULTS, **overrides))


@pytest.fixture
def stage() -> FilterStage:
    return FilterStage()


class TestThresholds:
    def test_passes(self, stage) -> None:
        result = stage.process(GOOD_COUNTS, make_filters(), PASS_13)
        assert result.passed
        assert result.rejected_by is None
        assert result.checked_filters == len(stage.checks)

    @pytest.mark.parametrize(
        "counts, reason",
        [
            (RelationCounts(sinh=3, cung=3, khac=2, sinh_xuat=2), FilterReason.KHAC_MAX),
            (RelationCounts(sinh=3, cung=3, bi_khac=3, sinh_xuat=1), FilterReason.BI_KHAC_MAX),
            (RelationCounts(sinh=1, cung=4, bi_khac=2, sinh_xuat=3), FilterReason.SINH_MIN),
            (RelationCounts(sinh=4, cung=1, bi_khac=2, sinh_xuat=3), FilterReason.CUNG_MIN),
            (RelationCounts(sinh=2, cung=2, sinh_xuat=6), FilterReason.ANY_MAX),
        ],
    )
    def test_each_threshold(self, stage, counts, reason) -> None:
        result = stage.process(counts, make_filters(), PASS_13)
        assert not result.passed
        assert result.rejected_by == reason
        assert result.rejection_reason

    def test_tong_max(self, stage) -> None:
        result = stage.process(GOOD_COUNTS, make_filters(filter_tong_max=2), PASS_13)
        assert result.rejected_by == FilterReason.TONG_MAX

    def test_limits_are_inclusive(self, stage) -> None:
        counts = RelationCounts(sinh=2, cung=2, bi_khac=2, khac=1, sinh_xuat=3)
        assert stage.process(counts, make_filters(filter_any_max=3), PASS_13).passed

    def test_first_violation_reported(self, stage) -> None:
        # violates khac_max, sinh_min and any_max
        counts = RelationCounts(sinh=0, cung=2, khac=8)
        result = stage.process(counts, make_filters(), PASS_13)
        assert result.rejected_by == FilterReason.KHAC_MAX
        assert result.checked_filters == 4


class TestCustomRules:
    def test_blacklist(self, stage) -> None:
        filters = make_filters(toggle_blacklist_filter=True, blacklist_digits="9")
        result = stage.process(GOOD_COUNTS, filters, PASS_13)
        assert result.rejected_by == FilterReason.BLACKLIST
        assert "9" in result.rejection_reason

    def test_blacklist_ignores_non_digits(self, stage) -> None:
        filters = make_filters(toggle_blacklist_filter=True, blacklist_digits="a, b")
        assert filters.blacklist == frozenset()
        assert stage.process(GOOD_COUNTS, filters, PASS_13).passed

    def test_blacklist_separated_digits(self) -> None:
        filters = make_filters(toggle_blacklist_filter=True, blacklist_digits="4, 7")
        assert filters.blacklist == frozenset({"4", "7"})

    def test_prefix(self, stage) -> None:
        assert stage.process(
            GOOD_COUNTS, make_filters(toggle_prefix_filter=True, prefix_value="096"), PASS_13
        ).passed
        result = stage.process(
            GOOD_COUNTS, make_filters(toggle_prefix_filter=True, prefix_value="098"), PASS_13
        )
        assert result.rejected_by == FilterReason.PREFIX

    def test_suffix(self, stage) -> None:
        assert stage.process(
            GOOD_COUNTS, make_filters(toggle_suffix_filter=True, suffix_value="34"), PASS_13
        ).passed
        result = stage.process(
            GOOD_COUNTS, make_filters(toggle_suffix_filter=True, suffix_value="99"), PASS_13
        )
        assert result.rejected_by == FilterReason.SUFFIX

    def test_disabled_rules_skipped(self, stage) -> None:
        filters = make_filters(
            toggle_blacklist_filter=False,
            blacklist_digits="0123456789",
            toggle_prefix_filter=False,
            prefix_value="111",
            toggle_suffix_filter=False,
            suffix_value="999",
        )
        assert stage.process(GOOD_COUNTS, filters, PASS_13).passed

    def test_empty_prefix_is_no_rule(self, stage) -> None:
        filters = make_filters(toggle_prefix_filter=True, prefix_value="")
        assert stage.process(GOOD_COUNTS, filters, PASS_13).passed

    def test_rule_order(self, stage) -> None:
        filters = make_filters(
            toggle_blacklist_filter=True,
            blacklist_digits="0",
            toggle_prefix_filter=True,
            prefix_value="1",
            toggle_suffix_filter=True,
            suffix_value="1",
        )
        bad_counts = RelationCounts(khac=10)
        assert stage.process(bad_counts, filters, PASS_13).rejected_by == FilterReason.BLACKLIST

        filters = filters.model_copy(update={"blacklist_digits": "5"})
        assert stage.process(bad_counts, filters, PASS_13).rejected_by == FilterReason.PREFIX

        filters = filters.model_copy(update={"prefix_value": "09"})
        assert stage.process(bad_counts, filters, PASS_13).rejected_by == FilterReason.SUFFIX

        filters = filters.model_copy(update={"suffix_value": "4"})
        assert stage.process(bad_counts, filters, PASS_13).rejected_by == FilterReason.KHAC_MAX


class TestParity:
    def test_off_by_default(self, stage) -> None:
        # six even digits would fail the rule
        assert stage.process(GOOD_COUNTS, make_filters(), PASS_13).passed

    def test_even_count_out_of_range(self, stage) -> None:
        result = stage.process(GOOD_COUNTS, make_filters(toggle_parity_filter=True), PASS_13)
        assert result.rejected_by == FilterReason.PARITY
        assert "Even digit count 6" in result.rejection_reason

    def test_half_sum_multiple_of_eight(self, stage) -> None:
        # 0+7+6+6+5 == 24
        result = stage.process(GOOD_COUNTS, make_filters(toggle_parity_filter=True), PASS_15)
        assert result.rejected_by == FilterReason.PARITY
        assert "first half" in result.rejection_reason

    def test_passes(self, stage) -> None:
        assert stage.process(GOOD_COUNTS, make_filters(toggle_parity_filter=True), PARITY_OK_15).passed

    def test_custom_even_range(self, stage) -> None:
        filters = make_filters(toggle_parity_filter=True, parity_even_min=6, parity_even_max=6)
        # PASS_13 halves: 0+9+6+6+7 == 28, 8+1+2+3+4 == 18
        assert stage.process(GOOD_COUNTS, filters, PASS_13).passed


class TestElementRules:
    # no Moc digit, so nothing is bi_khac for Kim
    MISSING_ELEMENT = RelationCounts(sinh=4, cung=4, khac=1, sinh_xuat=1)

    def test_off_by_default(self, stage) -> None:
        assert stage.process(self.MISSING_ELEMENT, make_filters(), PASS_13).passed

    def test_missing_element_rejected(self, stage) -> None:
        filters = make_filters(toggle_completeness_filter=True)
        result = stage.process(self.MISSING_ELEMENT, filters, PASS_13)
        assert result.rejected_by == FilterReason.COMPLETENESS
        assert "bi_khac" in result.rejection_reason

    def test_all_elements_present(self, stage) -> None:
        filters = make_filters(toggle_completeness_filter=True)
        assert stage.process(GOOD_COUNTS, filters, PASS_13).passed

    def test_positive_max(self, stage) -> None:
        filters = make_filters(toggle_positive_filter=True)
        result = stage.process(self.MISSING_ELEMENT, filters, PASS_13)
        assert result.rejected_by == FilterReason.POSITIVE_MAX
        assert "8 > 5" in result.rejection_reason

    def test_positive_max_inclusive(self, stage) -> None:
        # sinh 3 + cung 3
        filters = make_filters(toggle_positive_filter=True, filter_positive_max=6)
        assert stage.process(GOOD_COUNTS, filters, PASS_13).passed
        filters = make_filters(toggle_positive_filter=True, filter_positive_max=5)
        assert stage.process(GOOD_COUNTS, filters, PASS_13).rejected_by == FilterReason.POSITIVE_MAX

    def test_run_after_any_max(self, stage) -> None:
        filters = make_filters(toggle_completeness_filter=True, toggle_positive_filter=True)
        counts = RelationCounts(sinh=5, cung=5)
        assert stage.process(counts, filters, PASS_13).rejected_by == FilterReason.ANY_MAX

    def test_completeness_before_positive(self, stage) -> None:
        filters = make_filters(toggle_completeness_filter=True, toggle_positive_filter=True)
        result = stage.process(self.MISSING_ELEMENT, filters, PASS_13)
        assert result.rejected_by == FilterReason.COMPLETENESS
