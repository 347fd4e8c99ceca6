"""
Pydantic schemas for the Menh Scoring Engine
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..config.settings import KIM, MOC, THUY, HOA, THO


# =============================================================================
# ENUMS
# =============================================================================

class Element(str, Enum):
    """The five Ngu Hanh elements"""
    KIM = KIM
    MOC = MOC
    THUY = THUY
    HOA = HOA
    THO = THO

    def __hash__(self):
        # hash like the plain label so Element.KIM and "Kim" share dict slots
        return hash(self.value)


class ElementRelation(str, Enum):
    """Relation of a digit's element to the reference element.

    Values double as the suffix of the matching weight and threshold
    fields (``score_sinh``, ``filter_khac_max``, ...).
    """
    SAME = "cung"
    GENERATES = "sinh"
    GENERATED_BY = "sinh_xuat"
    CLASHES = "khac"
    CLASHED_BY = "bi_khac"

    @property
    def inverse(self) -> "ElementRelation":
        return _INVERSE_RELATIONS[self]


_INVERSE_RELATIONS = {
    ElementRelation.SAME: ElementRelation.SAME,
    ElementRelation.GENERATES: ElementRelation.GENERATED_BY,
    ElementRelation.GENERATED_BY: ElementRelation.GENERATES,
    ElementRelation.CLASHES: ElementRelation.CLASHED_BY,
    ElementRelation.CLASHED_BY: ElementRelation.CLASHES,
}


class Mode(str, Enum):
    """Scoring mode"""
    COMPATIBILITY = "Compatibility"
    ABSOLUTE_BALANCE = "AbsoluteBalance"


class FilterReason(str, Enum):
    """Reason a candidate was rejected, in evaluation order"""
    BLACKLIST = "blacklist"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    KHAC_MAX = "khac_max"
    BI_KHAC_MAX = "bi_khac_max"
    SINH_MIN = "sinh_min"
    CUNG_MIN = "cung_min"
    TONG_MAX = "tong_max"
    ANY_MAX = "any_max"
    COMPLETENESS = "completeness"
    POSITIVE_MAX = "positive_max"
    PARITY = "parity"
    FORMAT = "format"


# =============================================================================
# STAGE RESULT SCHEMAS
# =============================================================================

class RelationCounts(BaseModel):
    """Per-relation digit counts for one candidate"""
    sinh: int = Field(0, ge=0)
    cung: int = Field(0, ge=0)
    bi_khac: int = Field(0, ge=0)
    sinh_xuat: int = Field(0, ge=0)
    khac: int = Field(0, ge=0)

    class Config:
        frozen = True

    @classmethod
    def from_relations(cls, relations: List[ElementRelation]) -> "RelationCounts":
        tally = {relation.value: 0 for relation in ElementRelation}
        for relation in relations:
            tally[relation.value] += 1
        return cls(**tally)

    def get(self, relation: ElementRelation) -> int:
        return getattr(self, relation.value)

    def as_dict(self) -> Dict[str, int]:
        return {relation.value: self.get(relation) for relation in ElementRelation}

    @property
    def total(self) -> int:
        return self.sinh + self.cung + self.bi_khac + self.sinh_xuat + self.khac

    @property
    def negative(self) -> int:
        """Digits in an unfavorable relation (khac + bi_khac)"""
        return self.khac + self.bi_khac


class ScoreBreakdown(BaseModel):
    """Additive terms that make up a candidate's score"""
    relation_score: float = 0
    adjacent_score: float = 0
    adjacent_term: float = 0
    balance_term: float = 0
    completeness_term: float = 0


class ScoringResult(BaseModel):
    """Result from the scoring stage"""
    counts: RelationCounts
    score: float
    reference_element: Optional[Any] = None
    element_counts: Dict[Any, int] = Field(default_factory=dict)
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)


class FilterResult(BaseModel):
    """Result from the filter stage"""
    passed: bool
    checked_filters: int = 0
    rejection_reason: Optional[str] = None
    rejected_by: Optional[FilterReason] = None


# =============================================================================
# OUTPUT SCHEMAS
# =============================================================================

class AnalysisResult(BaseModel):
    """A surviving candidate and its score"""
    number: str
    score: float

    class Config:
        frozen = True


class ValidResult(BaseModel):
    """Quick check verdict for a number that passed every filter"""
    kind: Literal["Valid"] = "Valid"
    score: float

    class Config:
        frozen = True

    def to_wire(self) -> Dict[str, Dict[str, Any]]:
        return {"Valid": {"score": self.score}}


class InvalidResult(BaseModel):
    """Quick check verdict for a malformed or rejected number"""
    kind: Literal["Invalid"] = "Invalid"
    reason: str
    detail: Optional[str] = None

    class Config:
        frozen = True

    def to_wire(self) -> Dict[str, Dict[str, Any]]:
        return {"Invalid": {"reason": self.reason}}


QuickCheckResult = Annotated[
    Union[ValidResult, InvalidResult], Field(discriminator="kind")
]


class BatchAnalysisResult(BaseModel):
    """Result from batch analysis"""
    processed: int
    parsed: int
    passed: int
    rejected: int
    rejected_by: Dict[str, int] = Field(default_factory=dict)
    processing_time_ms: float = 0
    results: List[AnalysisResult] = Field(default_factory=list)
