"""
Configuration settings for the Menh Scoring Engine
"""

from typing import Dict, List, Any
import os

# =============================================================================
# ELEMENT TABLES (Ngu Hanh)
# =============================================================================

# Element labels. Kept as plain strings so the tables stay data, the
# ``Element`` enum in models.schemas uses the same values.
KIM = "Kim"
MOC = "Moc"
THUY = "Thuy"
HOA = "Hoa"
THO = "Tho"

DIGIT_ELEMENT_TABLE: Dict[str, str] = {
    "0": THO,
    "1": THUY,
    "2": THO,
    "3": MOC,
    "4": MOC,
    "5": THO,
    "6": KIM,
    "7": KIM,
    "8": THO,
    "9": HOA,
}

# element -> the element it generates
GENERATING_CYCLE: Dict[str, str] = {
    KIM: THUY,
    THUY: MOC,
    MOC: HOA,
    HOA: THO,
    THO: KIM,
}

# element -> the element it clashes
CLASHING_CYCLE: Dict[str, str] = {
    KIM: MOC,
    MOC: THO,
    THO: THUY,
    THUY: HOA,
    HOA: KIM,
}

# Accepted spellings for a user's menh (compared after accent folding)
ELEMENT_ALIASES: Dict[str, str] = {
    "kim": KIM,
    "moc": MOC,
    "thuy": THUY,
    "hoa": HOA,
    "tho": THO,
}

# Flow between neighbouring digits: ADJACENT_PAIR_VALUES[left][right]
ADJACENT_PAIR_VALUES: Dict[str, Dict[str, int]] = {
    THUY: {THUY: 0, THO: -1, MOC: 1, KIM: 0, HOA: -1},
    THO: {THUY: 1, THO: 0, MOC: -1, KIM: 0, HOA: 1},
    MOC: {THUY: 0, THO: 1, MOC: 0, KIM: -1, HOA: 1},
    KIM: {THUY: 1, THO: 0, MOC: 1, KIM: 0, HOA: -1},
    HOA: {THUY: -1, THO: 1, MOC: 0, KIM: 1, HOA: 0},
}

# =============================================================================
# DEFAULT SCORING WEIGHTS
# =============================================================================

DEFAULT_WEIGHTS: Dict[str, float] = {
    "score_sinh": 3.0,
    "score_cung": 2.0,
    "score_bi_khac": 1.0,
    "score_sinh_xuat": -1.0,
    "score_khac": -3.0,
}

DEFAULT_TUNABLES: Dict[str, float] = {
    "static_balance_weight": 2.0,
    "completeness_bonus": 2.0,
    "adjacent_weight": 0.0,
}

# =============================================================================
# DEFAULT FILTER THRESHOLDS
# =============================================================================

DEFAULT_THRESHOLDS: Dict[str, int] = {
    "filter_khac_max": 1,
    "filter_bi_khac_max": 2,
    "filter_sinh_min": 2,
    "filter_cung_min": 2,
    "filter_tong_max": 3,
    "filter_any_max": 4,
}

DEFAULT_TOGGLES: Dict[str, bool] = {
    "toggle_static_balance": False,
    "toggle_completeness": False,
}

DEFAULT_CUSTOM_FILTERS: Dict[str, Any] = {
    "toggle_prefix_filter": False,
    "prefix_value": "",
    "toggle_suffix_filter": False,
    "suffix_value": "",
    "toggle_blacklist_filter": False,
    "blacklist_digits": "",
    "toggle_completeness_filter": False,
    "toggle_positive_filter": False,
    "filter_positive_max": 5,
    "toggle_parity_filter": False,
    "parity_even_min": 4,
    "parity_even_max": 5,
}

# =============================================================================
# PARSER
# =============================================================================

PARSER_CONFIG: Dict[str, Any] = {
    "min_digits": 10,
    "max_digits": 10,
    # stripped from inside a token before validation
    "separators": [" ", "\t", ".", "-", "(", ")"],
}

# =============================================================================
# RUNTIME
# =============================================================================

RUNTIME_CONFIG: Dict[str, Any] = {
    "max_workers": int(os.getenv("MENH_MAX_WORKERS", "4")),
    "parallel_threshold": int(os.getenv("MENH_PARALLEL_THRESHOLD", "5000")),
    "log_level": os.getenv("LOG_LEVEL", "WARNING"),
    "log_json": os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes"),
}

SUPPORTED_MODES: List[str] = ["Compatibility", "AbsoluteBalance"]
