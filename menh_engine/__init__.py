"""
Menh Scoring Engine - Ngu Hanh phone number analysis
=====================================================
A three-stage pipeline for ranking phone numbers against a user's menh:
  Stage 1: Parser (raw text -> candidate numbers)
  Stage 2: Weighted Scoring (element relation counts -> score)
  Stage 3: Filters (custom rules and relation thresholds)
"""

from .engine import (
    NumberAnalysisEngine,
    analyze,
    analyze_batch,
    format_results,
    quick_check_single_number,
)
from .errors import ConfigError, ElementTableError, MenhEngineError
from .models.analysis_config import AnalysisConfig, create_default_analysis_config

__version__ = "1.0.0"
