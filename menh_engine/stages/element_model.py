"""
Element Model
=============
Fixed Ngu Hanh domain data: which element each digit belongs to, and how
any two elements relate through the generating (sinh) and clashing (khac)
cycles.

Neighbouring digits also carry a flow value, looked up per ordered
element pair.

The tables are injected so tests can swap in abstract labels; the default
model uses the tables in config.settings.
"""

from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional

from ..config.settings import (
    ADJACENT_PAIR_VALUES,
    CLASHING_CYCLE,
    DIGIT_ELEMENT_TABLE,
    GENERATING_CYCLE,
)
from ..errors import ElementTableError
from ..models.schemas import Element, ElementRelation

DIGITS = "0123456789"


class ElementModel:
    """
    Digit classification and element relations.
    """

    def __init__(
        self,
        digit_table: Mapping[str, Hashable],
        generating: Mapping[Hashable, Hashable],
        clashing: Mapping[Hashable, Hashable],
        pair_values: Optional[Mapping[Hashable, Mapping[Hashable, int]]] = None,
    ):
        """
        Build and validate the model.

        Args:
            digit_table: digit character -> element
            generating: element -> the element it generates
            clashing: element -> the element it clashes
            pair_values: left element -> right element -> flow value of a
                neighbouring digit pair (every pair scores 0 if omitted)

        Raises:
            ElementTableError: if the tables are incomplete or inconsistent
        """
        self.digit_table: Dict[str, Hashable] = dict(digit_table)
        self.generating: Dict[Hashable, Hashable] = dict(generating)
        self.clashing: Dict[Hashable, Hashable] = dict(clashing)
        self.elements: List[Hashable] = list(self.generating)
        self.pair_values: Dict[Hashable, Dict[Hashable, int]] = {
            a: dict(row) for a, row in (pair_values or {}).items()
        }

        self._validate()

        # 25 ordered pairs, computed once
        self._relations: Dict[tuple, ElementRelation] = {
            (a, b): self._derive_relation(a, b)
            for a in self.elements
            for b in self.elements
        }

    def element_of(self, digit: str) -> Hashable:
        """Element of a single digit character"""
        try:
            return self.digit_table[digit]
        except KeyError:
            raise ValueError(f"Not a digit: {digit!r}") from None

    def elements_of(self, candidate: str) -> List[Hashable]:
        return [self.element_of(d) for d in candidate]

    def relation(self, source: Hashable, reference: Hashable) -> ElementRelation:
        """Relation of ``source`` as seen against ``reference``"""
        try:
            return self._relations[(source, reference)]
        except KeyError:
            raise ValueError(
                f"Unknown element pair: {source!r}, {reference!r}"
            ) from None

    def roles(self, reference: Hashable) -> Dict[ElementRelation, Hashable]:
        """Which element plays each relation role against ``reference``"""
        return {self.relation(e, reference): e for e in self.elements}

    def pair_value(self, left: Hashable, right: Hashable) -> int:
        """Flow value of ``left`` immediately followed by ``right``"""
        if not self.pair_values:
            return 0
        return self.pair_values[left][right]

    def is_known(self, element: Any) -> bool:
        return element in self.generating

    # =========================================================================
    # Helpers
    # =========================================================================

    def _derive_relation(self, a: Hashable, b: Hashable) -> ElementRelation:
        if a == b:
            return ElementRelation.SAME
        if self.generating[a] == b:
            return ElementRelation.GENERATES
        if self.generating[b] == a:
            return ElementRelation.GENERATED_BY
        if self.clashing[a] == b:
            return ElementRelation.CLASHES
        return ElementRelation.CLASHED_BY

    def _validate(self):
        missing = [d for d in DIGITS if d not in self.digit_table]
        if missing:
            raise ElementTableError(f"Digit table is missing digits: {''.join(missing)}")

        elements = set(self.elements)
        if len(elements) != 5:
            raise ElementTableError(
                f"Expected 5 elements in the generating cycle, got {len(elements)}"
            )
        for name, cycle in (("generating", self.generating), ("clashing", self.clashing)):
            if set(cycle) != elements or set(cycle.values()) != elements:
                raise ElementTableError(
                    f"The {name} cycle must map the five elements onto themselves"
                )
            if any(cycle[e] == e for e in elements):
                raise ElementTableError(f"The {name} cycle maps an element to itself")

        unknown = set(self.digit_table.values()) - elements
        if unknown:
            raise ElementTableError(f"Digit table uses unknown elements: {sorted(map(str, unknown))}")

        if self.pair_values:
            if set(self.pair_values) != elements or any(
                set(row) != elements for row in self.pair_values.values()
            ):
                raise ElementTableError("Pair values must cover all 25 ordered element pairs")

        # every ordered pair of distinct elements must be linked by exactly one cycle
        for a in elements:
            for b in elements:
                if a == b:
                    continue
                links = sum((
                    self.generating[a] == b,
                    self.generating[b] == a,
                    self.clashing[a] == b,
                    self.clashing[b] == a,
                ))
                if links != 1:
                    raise ElementTableError(
                        f"Elements {a!r} and {b!r} are linked {links} times by the cycles"
                    )


def create_default_element_model(
    digit_table: Optional[Mapping[str, str]] = None,
    generating: Optional[Mapping[str, str]] = None,
    clashing: Optional[Mapping[str, str]] = None,
    pair_values: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> ElementModel:
    """Element model over the Element enum, from the tables in settings"""
    return ElementModel(
        digit_table={d: Element(e) for d, e in (digit_table or DIGIT_ELEMENT_TABLE).items()},
        generating=_as_elements((generating or GENERATING_CYCLE).items()),
        clashing=_as_elements((clashing or CLASHING_CYCLE).items()),
        pair_values={
            Element(a): {Element(b): value for b, value in row.items()}
            for a, row in (pair_values or ADJACENT_PAIR_VALUES).items()
        },
    )


def _as_elements(pairs: Iterable[tuple]) -> Dict[Element, Element]:
    return {Element(a): Element(b) for a, b in pairs}


DEFAULT_ELEMENT_MODEL = create_default_element_model()
