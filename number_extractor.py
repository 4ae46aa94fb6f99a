import re
from typing import Iterable, List, Tuple
from dataclasses import dataclass

_WHITESPACE_RE = re.compile(r'\s+')


def normalize_text(text: str) -> str:
    """Collapse whitespace runs (newlines included) to a single space and trim."""
    return _WHITESPACE_RE.sub(' ', text).strip()


@dataclass(frozen=True)
class ExtractedNumber:
    """Class to hold a number found in OCR text."""
    value: int
    start: int
    end: int
    raw_text: str


class NumberExtractor:
    """Extracts the 2-3 digit values a blood pressure display shows."""

    # Greedy 2-3 digit chunks: values run together by OCR ("12080") split into 120 and 80
    NUMBER_PATTERN = re.compile(r'\d{2,3}')

    def extract_numbers(self, text: str) -> List[ExtractedNumber]:
        """
        Extract all 2-3 digit numbers from text, splitting longer runs.

        Args:
            text: OCR extracted text

        Returns:
            List[ExtractedNumber]: Numbers in left-to-right order
        """
        return [
            ExtractedNumber(
                value=int(match.group(0)),
                start=match.start(),
                end=match.end(),
                raw_text=match.group(0)
            )
            for match in self.NUMBER_PATTERN.finditer(text)
        ]

    @staticmethod
    def in_range(numbers: Iterable[ExtractedNumber],
                 value_range: Tuple[int, int]) -> List[ExtractedNumber]:
        """Numbers within an inclusive (min, max) range, order preserved."""
        min_val, max_val = value_range
        return [n for n in numbers if min_val <= n.value <= max_val]

    @staticmethod
    def distinct_values(numbers: Iterable[ExtractedNumber],
                        value_range: Tuple[int, int]) -> List[int]:
        """
        Deduplicate values within a range.

        Args:
            numbers: Extracted numbers
            value_range: Inclusive (min, max) bounds

        Returns:
            List[int]: Distinct values in order of first appearance
        """
        min_val, max_val = value_range
        seen = []
        for number in numbers:
            if min_val <= number.value <= max_val and number.value not in seen:
                seen.append(number.value)
        return seen
