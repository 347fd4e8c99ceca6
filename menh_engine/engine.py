"""
Menh Scoring Engine - Main Orchestrator
=======================================
Orchestrates the pipeline for every candidate:
  Stage 1: Parser -> Stage 2: Weighted Scoring -> Stage 3: Filters

Key properties:
- Scoring and filtering are pure, so large batches fan out to a thread pool
- Ranking is score descending, ties kept in input order
- Only malformed configuration raises; rejected numbers are reported as data
"""

import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Mapping, Optional, Tuple, Union

import structlog

from .config.settings import RUNTIME_CONFIG
from .errors import ConfigError
from .models.analysis_config import AnalysisConfig, load_config
from .models.schemas import (
    AnalysisResult,
    BatchAnalysisResult,
    FilterReason,
    FilterResult,
    InvalidResult,
    Mode,
    QuickCheckResult,
    ScoringResult,
    ValidResult,
)
from .stages.element_model import ElementModel
from .stages.stage1_parser import CandidateParser
from .stages.stage2_scoring import WeightedScoringStage
from .stages.stage3_filters import FilterStage

logger = structlog.get_logger(__name__)

ConfigInput = Union[AnalysisConfig, Mapping[str, Any]]


class NumberAnalysisEngine:
    """
    Main engine that runs candidates through parsing, scoring and filtering.
    """

    def __init__(
        self,
        config: ConfigInput,
        element_model: Optional[ElementModel] = None,
        max_workers: Optional[int] = None,
        parallel_threshold: Optional[int] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Analysis configuration (validated here)
            element_model: Element tables (uses the default Ngu Hanh tables if not provided)
            max_workers: Thread pool size for large batches
            parallel_threshold: Minimum batch size before the pool is used

        Raises:
            ConfigError: if the configuration is malformed, or user_menh is not
                an element of element_model in Compatibility mode
        """
        self.config = load_config(config)

        self.max_workers = max_workers or RUNTIME_CONFIG["max_workers"]
        self.parallel_threshold = (
            parallel_threshold
            if parallel_threshold is not None
            else RUNTIME_CONFIG["parallel_threshold"]
        )

        # Read-only views of the configuration for the stages
        self.user = self.config.user_profile
        self.scoring = self.config.scoring_config
        self.filters = self.config.filter_config
        self.toggles = self.config.toggles

        # Initialize stages
        self.parser = CandidateParser(
            min_digits=self.config.min_digits,
            max_digits=self.config.max_digits,
        )
        self.scorer = WeightedScoringStage(element_model)
        self.filter = FilterStage()

        if self.config.mode == Mode.COMPATIBILITY and not self.scorer.model.is_known(
            self.user.user_menh
        ):
            raise ConfigError(
                f"user_menh {self.user.user_menh.value!r} is not an element of the element model"
            )

    def evaluate(self, candidate: str) -> Tuple[ScoringResult, FilterResult]:
        """Score and filter one well-formed candidate"""
        scoring = self.scorer.process(
            candidate,
            user=self.user,
            scoring=self.scoring,
            mode=self.config.mode,
            toggles=self.toggles,
        )
        verdict = self.filter.process(scoring.counts, self.filters, candidate)
        return scoring, verdict

    def analyze(self, raw_text: str) -> List[AnalysisResult]:
        """
        Rank every candidate in the text that passes the filters.

        Args:
            raw_text: One phone number per line

        Returns:
            Surviving candidates, score descending, ties in input order
        """
        return self.analyze_batch(raw_text).results

    def analyze_batch(self, raw_text: str) -> BatchAnalysisResult:
        """
        Rank candidates and collect rejection statistics.

        Args:
            raw_text: One phone number per line

        Returns:
            BatchAnalysisResult with ranked results and counts
        """
        start_time = time.time()

        candidates = self.parser.process(raw_text)
        evaluated = self._evaluate_all(candidates)

        survivors = []
        rejected_by: Counter = Counter()
        for index, (candidate, (scoring, verdict)) in enumerate(zip(candidates, evaluated)):
            if verdict.passed:
                survivors.append((index, candidate, scoring.score))
            else:
                rejected_by[verdict.rejected_by.value] += 1

        # score descending, parse order ascending
        survivors.sort(key=lambda item: (-item[2], item[0]))
        results = [
            AnalysisResult(number=candidate, score=score)
            for _, candidate, score in survivors
        ]

        total_time = (time.time() - start_time) * 1000

        batch = BatchAnalysisResult(
            processed=self.parser.count_lines(raw_text),
            parsed=len(candidates),
            passed=len(results),
            rejected=len(candidates) - len(results),
            rejected_by=dict(rejected_by),
            processing_time_ms=round(total_time, 2),
            results=results,
        )

        logger.debug(
            "batch_analyzed",
            mode=self.config.mode.value,
            user_menh=self.config.user_menh.value,
            processed=batch.processed,
            parsed=batch.parsed,
            passed=batch.passed,
            rejected_by=batch.rejected_by,
            processing_time_ms=batch.processing_time_ms,
        )

        return batch

    def quick_check(self, number: str) -> QuickCheckResult:
        """
        Verdict for a single number.

        Args:
            number: Phone number as typed by the user

        Returns:
            ValidResult with the score, or InvalidResult naming the reason
        """
        candidate = self.parser.normalize(number) if isinstance(number, str) else None
        if candidate is None:
            logger.debug("quick_check", number=number, verdict=FilterReason.FORMAT.value)
            return InvalidResult(
                reason=FilterReason.FORMAT.value,
                detail=(
                    f"Expected {self.config.min_digits}-{self.config.max_digits} digits"
                    if self.config.min_digits != self.config.max_digits
                    else f"Expected {self.config.min_digits} digits"
                ),
            )

        scoring, verdict = self.evaluate(candidate)
        if not verdict.passed:
            logger.debug("quick_check", number=candidate, verdict=verdict.rejected_by.value)
            return InvalidResult(
                reason=verdict.rejected_by.value,
                detail=verdict.rejection_reason,
            )

        logger.debug("quick_check", number=candidate, verdict="valid", score=scoring.score)
        return ValidResult(score=scoring.score)

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _evaluate_all(self, candidates: List[str]) -> List[Tuple[ScoringResult, FilterResult]]:
        """Evaluate candidates, in parallel for large batches, in input order"""
        if self.max_workers <= 1 or len(candidates) < self.parallel_threshold:
            return [self.evaluate(candidate) for candidate in candidates]

        # map() yields results in submission order
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self.evaluate, candidates))


# =============================================================================
# Convenience Functions
# =============================================================================

def analyze(raw_text: str, config: ConfigInput) -> List[AnalysisResult]:
    """
    Rank the candidates in raw_text that pass every filter.

    Raises:
        ConfigError: if the configuration is malformed
    """
    return NumberAnalysisEngine(config).analyze(raw_text)


def analyze_batch(raw_text: str, config: ConfigInput) -> BatchAnalysisResult:
    """Like analyze(), with rejection statistics"""
    return NumberAnalysisEngine(config).analyze_batch(raw_text)


def quick_check_single_number(number: str, config: ConfigInput) -> QuickCheckResult:
    """
    Check a single number.

    Raises:
        ConfigError: if the configuration is malformed
    """
    return NumberAnalysisEngine(config).quick_check(number)


def format_results(results: List[AnalysisResult]) -> str:
    """Export format: one "<number>  score=<score>" line per result"""
    return "\n".join(f"{r.number}  score={r.score:.2f}" for r in results)
