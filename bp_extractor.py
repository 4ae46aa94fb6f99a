"""
Blood pressure extraction from OCR text.

The same extractor serves every OCR engine: engine adapters pass the
recognised text in unchanged and get an ExtractionResult back.

Tiers, highest confidence first:

1. Labels: values printed after SYS, DIA and PUL.
2. Range search: the first combination of three different digit runs, in
   input order, that fits the systolic/diastolic/pulse ranges.
3. Sorted fallback: distinct plausible values sorted descending, on the
   assumption that systolic > diastolic > pulse on a home monitor.

No tier ever returns a reading that breaks the range and order rules.
"""

import logging
from typing import Dict, List, Optional

from number_extractor import ExtractedNumber, NumberExtractor, normalize_text
from pattern_matcher import Label, PatternMatcher
from readings import (
    DIASTOLIC_RANGE,
    LABEL_CONFIDENCE,
    PLAUSIBLE_RANGE,
    PULSE_RANGE,
    RANGE_SEARCH_CONFIDENCE,
    SINGLE_VALUE_CONFIDENCE,
    SORTED_CONFIDENCE,
    SYSTOLIC_RANGE,
    TWO_VALUE_CONFIDENCE,
    BloodPressureReading,
    ExtractionResult,
    ExtractionTier,
    SystolicDiastolicReading,
    SystolicReading,
    in_range,
    is_valid_pressure,
    is_valid_triple,
    pulse_range_for,
)

logger = logging.getLogger(__name__)

# Per-pool cap for the range search; bounds it at MAX_POOL_SIZE ** 3 combinations
MAX_POOL_SIZE = 12


class InvalidInputTypeError(TypeError):
    """Raised when extract() is given something other than text."""


class BloodPressureTextExtractor:
    """Infers systolic, diastolic and pulse from recognised display text."""

    def __init__(self, max_pool_size: int = MAX_POOL_SIZE):
        if not isinstance(max_pool_size, int) or max_pool_size < 1:
            raise ValueError(f"max_pool_size must be a positive integer, got {max_pool_size!r}")
        self.max_pool_size = max_pool_size
        self.number_extractor = NumberExtractor()
        self.pattern_matcher = PatternMatcher()

    def extract(self, text: str) -> ExtractionResult:
        """
        Extract a blood pressure reading from OCR text.

        Args:
            text: Full text recognised by an OCR engine

        Returns:
            ExtractionResult: A reading from the first tier that succeeds,
            or None when the text holds no usable values

        Raises:
            InvalidInputTypeError: If text is not a str
        """
        if not isinstance(text, str):
            raise InvalidInputTypeError(
                f"expected OCR text as str, got {type(text).__name__}"
            )

        normalized = normalize_text(text)
        logger.debug("Normalized text: %r", normalized)
        if not normalized:
            return None

        labelled = self._from_labels(self.pattern_matcher.find_labels(normalized))
        if labelled is not None:
            return labelled

        numbers = self.number_extractor.extract_numbers(normalized)
        logger.debug("Extracted numbers: %s", [n.value for n in numbers])
        if not numbers:
            return None

        searched = self._range_search(numbers)
        if searched is not None:
            return searched

        return self._sorted_fallback(numbers)

    def _from_labels(self, labels: Dict[Label, ExtractedNumber]) -> Optional[BloodPressureReading]:
        if len(labels) < len(Label):
            logger.debug("Labels found: %s", sorted(label.value for label in labels))
            return None

        systolic = labels[Label.SYS].value
        diastolic = labels[Label.DIA].value
        pulse = labels[Label.PUL].value
        if not is_valid_triple(systolic, diastolic, pulse,
                               pulse_range_for(ExtractionTier.LABELS)):
            logger.debug("Labelled values %d/%d pulse %d out of range", systolic, diastolic, pulse)
            return None

        logger.debug("Label match: %d/%d pulse %d", systolic, diastolic, pulse)
        return BloodPressureReading(
            systolic=systolic,
            diastolic=diastolic,
            pulse=pulse,
            confidence=LABEL_CONFIDENCE,
            tier=ExtractionTier.LABELS
        )

    def _range_search(self, numbers: List[ExtractedNumber]) -> Optional[BloodPressureReading]:
        """
        First valid (systolic, diastolic, pulse) combination in input order.

        Each value must come from a different digit run, so one number on the
        display can't fill two roles.
        """
        systolic_pool = NumberExtractor.in_range(numbers, SYSTOLIC_RANGE)[:self.max_pool_size]
        diastolic_pool = NumberExtractor.in_range(numbers, DIASTOLIC_RANGE)[:self.max_pool_size]
        pulse_pool = NumberExtractor.in_range(numbers, PULSE_RANGE)[:self.max_pool_size]

        for sys_num in systolic_pool:
            for dia_num in diastolic_pool:
                if dia_num.start == sys_num.start or dia_num.value >= sys_num.value:
                    continue
                for pul_num in pulse_pool:
                    if pul_num.start in (sys_num.start, dia_num.start):
                        continue
                    if is_valid_triple(sys_num.value, dia_num.value, pul_num.value):
                        logger.debug("Range search match: %d/%d pulse %d",
                                     sys_num.value, dia_num.value, pul_num.value)
                        return BloodPressureReading(
                            systolic=sys_num.value,
                            diastolic=dia_num.value,
                            pulse=pul_num.value,
                            confidence=RANGE_SEARCH_CONFIDENCE,
                            tier=ExtractionTier.RANGE_SEARCH
                        )
        return None

    def _sorted_fallback(self, numbers: List[ExtractedNumber]) -> ExtractionResult:
        """
        Distinct values sorted descending. A full triple here means the pool
        cap kept the range search from seeing it.
        """
        values = NumberExtractor.distinct_values(numbers, PLAUSIBLE_RANGE)
        ordered = sorted(values, reverse=True)
        logger.debug("Sorted fallback values: %s", ordered)

        if len(ordered) >= 3:
            systolic, diastolic, pulse = ordered[:3]
            if is_valid_triple(systolic, diastolic, pulse):
                return BloodPressureReading(
                    systolic=systolic,
                    diastolic=diastolic,
                    pulse=pulse,
                    confidence=SORTED_CONFIDENCE,
                    tier=ExtractionTier.SORTED_FALLBACK
                )
        elif len(ordered) == 2:
            systolic, diastolic = ordered
            if is_valid_pressure(systolic, diastolic):
                return SystolicDiastolicReading(
                    systolic=systolic,
                    diastolic=diastolic,
                    confidence=TWO_VALUE_CONFIDENCE,
                    tier=ExtractionTier.SORTED_FALLBACK
                )
        elif len(ordered) == 1:
            if in_range(ordered[0], SYSTOLIC_RANGE):
                return SystolicReading(
                    systolic=ordered[0],
                    confidence=SINGLE_VALUE_CONFIDENCE,
                    tier=ExtractionTier.SORTED_FALLBACK
                )

        logger.debug("No reading found")
        return None


_default_extractor = BloodPressureTextExtractor()


def extract(text: str) -> ExtractionResult:
    """Extract a reading with the default extractor. See BloodPressureTextExtractor.extract."""
    return _default_extractor.extract(text)
