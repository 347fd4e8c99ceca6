"""
Analysis Configuration Models
"""

import unicodedata
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..config.settings import (
    DEFAULT_CUSTOM_FILTERS,
    DEFAULT_THRESHOLDS,
    DEFAULT_TOGGLES,
    DEFAULT_TUNABLES,
    DEFAULT_WEIGHTS,
    ELEMENT_ALIASES,
    PARSER_CONFIG,
)
from ..errors import ConfigError
from .schemas import Element, ElementRelation, Mode


def fold_element_name(value: str) -> str:
    """Lowercase and strip Vietnamese diacritics ("Thủy" -> "thuy")"""
    decomposed = unicodedata.normalize("NFD", value.strip())
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn").lower()


def parse_element(value: Any) -> Element:
    """Resolve a user-supplied menh name to an Element"""
    if isinstance(value, Element):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unknown menh: {value!r}")
    label = ELEMENT_ALIASES.get(fold_element_name(value))
    if label is None:
        raise ValueError(f"Unknown menh: {value!r}")
    return Element(label)


# =============================================================================
# Stage records
# =============================================================================

class UserProfile(BaseModel):
    """The user's governing element (a label of the active element model)"""
    user_menh: Any

    class Config:
        frozen = True


class ScoringConfig(BaseModel):
    """Weights for each relation kind plus the optional score terms"""
    score_sinh: float
    score_cung: float
    score_bi_khac: float
    score_sinh_xuat: float
    score_khac: float
    static_balance_weight: float = DEFAULT_TUNABLES["static_balance_weight"]
    completeness_bonus: float = DEFAULT_TUNABLES["completeness_bonus"]
    adjacent_weight: float = DEFAULT_TUNABLES["adjacent_weight"]

    class Config:
        frozen = True
        allow_inf_nan = False

    def weight_for(self, relation: ElementRelation) -> float:
        return getattr(self, f"score_{relation.value}")


class Toggles(BaseModel):
    """Optional score terms"""
    toggle_static_balance: bool = False
    toggle_completeness: bool = False

    class Config:
        frozen = True


class FilterConfig(BaseModel):
    """Thresholds and custom rules for the filter stage"""
    filter_khac_max: int = Field(..., ge=0)
    filter_bi_khac_max: int = Field(..., ge=0)
    filter_sinh_min: int = Field(..., ge=0)
    filter_cung_min: int = Field(..., ge=0)
    filter_tong_max: int = Field(..., ge=0)
    filter_any_max: int = Field(..., ge=0)

    toggle_prefix_filter: bool = False
    prefix_value: str = ""
    toggle_suffix_filter: bool = False
    suffix_value: str = ""
    toggle_blacklist_filter: bool = False
    blacklist_digits: str = ""

    toggle_completeness_filter: bool = False
    toggle_positive_filter: bool = False
    filter_positive_max: int = Field(DEFAULT_CUSTOM_FILTERS["filter_positive_max"], ge=0)

    toggle_parity_filter: bool = False
    parity_even_min: int = Field(DEFAULT_CUSTOM_FILTERS["parity_even_min"], ge=0)
    parity_even_max: int = Field(DEFAULT_CUSTOM_FILTERS["parity_even_max"], ge=0)

    class Config:
        frozen = True

    @property
    def blacklist(self) -> FrozenSet[str]:
        """Forbidden digits; anything that is not a digit is ignored"""
        return frozenset(c for c in self.blacklist_digits if "0" <= c <= "9")


# =============================================================================
# Complete configuration record
# =============================================================================

class AnalysisConfig(BaseModel):
    """Complete analysis configuration, one flat record as sent by callers"""
    mode: Mode
    user_menh: Element

    # Scoring weights
    score_sinh: float
    score_cung: float
    score_bi_khac: float
    score_sinh_xuat: float
    score_khac: float

    # Filter thresholds
    filter_khac_max: int = Field(..., ge=0)
    filter_bi_khac_max: int = Field(..., ge=0)
    filter_sinh_min: int = Field(..., ge=0)
    filter_cung_min: int = Field(..., ge=0)
    filter_tong_max: int = Field(..., ge=0)
    filter_any_max: int = Field(..., ge=0)

    # Toggles
    toggle_static_balance: bool
    toggle_completeness: bool

    # Custom filters
    toggle_prefix_filter: bool
    prefix_value: str
    toggle_suffix_filter: bool
    suffix_value: str
    toggle_blacklist_filter: bool
    blacklist_digits: str

    # Extra tunables
    static_balance_weight: float = DEFAULT_TUNABLES["static_balance_weight"]
    completeness_bonus: float = DEFAULT_TUNABLES["completeness_bonus"]
    adjacent_weight: float = DEFAULT_TUNABLES["adjacent_weight"]
    toggle_completeness_filter: bool = DEFAULT_CUSTOM_FILTERS["toggle_completeness_filter"]
    toggle_positive_filter: bool = DEFAULT_CUSTOM_FILTERS["toggle_positive_filter"]
    filter_positive_max: int = Field(DEFAULT_CUSTOM_FILTERS["filter_positive_max"], ge=0)
    toggle_parity_filter: bool = DEFAULT_CUSTOM_FILTERS["toggle_parity_filter"]
    parity_even_min: int = Field(DEFAULT_CUSTOM_FILTERS["parity_even_min"], ge=0)
    parity_even_max: int = Field(DEFAULT_CUSTOM_FILTERS["parity_even_max"], ge=0)
    min_digits: int = Field(PARSER_CONFIG["min_digits"], ge=1)
    max_digits: int = Field(PARSER_CONFIG["max_digits"], ge=1)

    class Config:
        frozen = True
        allow_inf_nan = False

    @field_validator("user_menh", mode="before")
    @classmethod
    def _resolve_menh(cls, value: Any) -> Element:
        return parse_element(value)

    @field_validator("prefix_value", "suffix_value", "blacklist_digits", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def _check_ranges(self) -> "AnalysisConfig":
        if self.min_digits > self.max_digits:
            raise ValueError("min_digits must not exceed max_digits")
        if self.parity_even_min > self.parity_even_max:
            raise ValueError("parity_even_min must not exceed parity_even_max")
        return self

    @property
    def user_profile(self) -> UserProfile:
        return UserProfile(user_menh=self.user_menh)

    @property
    def scoring_config(self) -> ScoringConfig:
        return ScoringConfig(**self.model_dump(include=set(ScoringConfig.model_fields)))

    @property
    def filter_config(self) -> FilterConfig:
        return FilterConfig(**self.model_dump(include=set(FilterConfig.model_fields)))

    @property
    def toggles(self) -> Toggles:
        return Toggles(**self.model_dump(include=set(Toggles.model_fields)))


def load_config(data: Union[AnalysisConfig, Mapping[str, Any]]) -> AnalysisConfig:
    """
    Validate caller-supplied configuration.

    Raises:
        ConfigError: if the data is not a mapping or fails validation
    """
    if isinstance(data, AnalysisConfig):
        return data
    if not isinstance(data, Mapping):
        raise ConfigError(
            f"Configuration must be a mapping, got {type(data).__name__}"
        )
    try:
        return AnalysisConfig.model_validate(dict(data))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from exc


def create_default_analysis_config(
    user_menh: Union[str, Element] = "Kim",
    mode: Union[str, Mode] = Mode.COMPATIBILITY,
    overrides: Optional[Dict[str, Any]] = None,
) -> AnalysisConfig:
    """
    Factory function to create an analysis config with the default weights
    and thresholds
    """
    data: Dict[str, Any] = {"mode": mode, "user_menh": user_menh}
    data.update(DEFAULT_WEIGHTS)
    data.update(DEFAULT_THRESHOLDS)
    data.update(DEFAULT_TOGGLES)
    data.update(DEFAULT_CUSTOM_FILTERS)
    data.update(DEFAULT_TUNABLES)
    data["min_digits"] = PARSER_CONFIG["min_digits"]
    data["max_digits"] = PARSER_CONFIG["max_digits"]

    if overrides:
        data.update(overrides)

    return load_config(data)
