"""
Stage 1: Parser
===============
Turns a raw text blob into candidate phone numbers.

- One candidate per line
- Blank lines and malformed tokens are dropped silently
- Input order and duplicates are preserved
"""

from typing import Iterable, List, Optional

from ..config.settings import PARSER_CONFIG


class CandidateParser:
    """
    Stage 1: Extract well-formed candidate numbers from raw text.
    """

    def __init__(
        self,
        min_digits: Optional[int] = None,
        max_digits: Optional[int] = None,
        separators: Optional[Iterable[str]] = None,
    ):
        self.min_digits = min_digits if min_digits is not None else PARSER_CONFIG["min_digits"]
        self.max_digits = max_digits if max_digits is not None else PARSER_CONFIG["max_digits"]
        self._strip_table = str.maketrans(
            "", "", "".join(separators if separators is not None else PARSER_CONFIG["separators"])
        )

    def process(self, raw_text: str) -> List[str]:
        """Stage entry point, same as parse()"""
        return self.parse(raw_text)

    def parse(self, raw_text: str) -> List[str]:
        """
        Parse raw text into an ordered list of candidate numbers.

        Args:
            raw_text: Text with one phone number per line

        Returns:
            Candidate digit strings in order of appearance
        """
        candidates = []
        for line in raw_text.splitlines():
            candidate = self.normalize(line)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def count_lines(self, raw_text: str) -> int:
        """Number of non-blank lines"""
        return sum(1 for line in raw_text.splitlines() if line.strip())

    def normalize(self, token: str) -> Optional[str]:
        """Return the digit string for a well-formed token, else None"""
        if not token:
            return None
        digits = token.strip().translate(self._strip_table)
        if not digits or not self._is_ascii_digits(digits):
            return None
        if not self.min_digits <= len(digits) <= self.max_digits:
            return None
        return digits

    def _is_ascii_digits(self, value: str) -> bool:
        # str.isdigit() also accepts superscripts and other scripts' digits
        return all("0" <= c <= "9" for c in value)
