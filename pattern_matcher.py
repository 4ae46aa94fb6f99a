import re
from typing import Dict
from enum import Enum

from number_extractor import ExtractedNumber


class Label(Enum):
    """Labels printed next to the values on a blood pressure display."""
    SYS = "SYS"
    DIA = "DIA"
    PUL = "PUL"


class PatternMatcher:
    """Finds the values printed next to SYS/DIA/PUL labels."""

    # Label, then up to ten separator characters (spaces, ':', 'mmHg', '/min'), then the value.
    # Matched against an upper-cased copy of the text.
    PATTERNS = [
        (Label.SYS, re.compile(r'(?<![A-Z])SYS[^\d]{0,10}?(\d{2,3})')),
        (Label.DIA, re.compile(r'(?<![A-Z])DIA[^\d]{0,10}?(\d{2,3})')),
        (Label.PUL, re.compile(r'(?<![A-Z])PUL[^\d]{0,10}?(\d{2,3})')),
    ]

    def find_labels(self, text: str) -> Dict[Label, ExtractedNumber]:
        """
        Search text for each label independently.

        Args:
            text: OCR text; matching is case-insensitive

        Returns:
            Dict[Label, ExtractedNumber]: First value found for each label.
            Labels without a value are absent.
        """
        upper = text.upper()
        found = {}
        for label, pattern in self.PATTERNS:
            match = pattern.search(upper)
            if match:
                found[label] = ExtractedNumber(
                    value=int(match.group(1)),
                    start=match.start(1),
                    end=match.end(1),
                    raw_text=match.group(0)
                )
        return found
