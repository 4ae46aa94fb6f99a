from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

# Confidence assigned by each extraction tier
LABEL_CONFIDENCE = 0.9
RANGE_SEARCH_CONFIDENCE = 0.7
TWO_VALUE_CONFIDENCE = 0.6
SORTED_CONFIDENCE = 0.5
SINGLE_VALUE_CONFIDENCE = 0.3

# Inclusive (min, max) bounds
SYSTOLIC_RANGE = (80, 250)
DIASTOLIC_RANGE = (40, 150)
PULSE_RANGE = (40, 200)
WIDE_PULSE_RANGE = (30, 250)  # label tier only
PLAUSIBLE_RANGE = (30, 250)


class ExtractionTier(Enum):
    """Which stage of the extractor produced a reading."""
    LABELS = "labels"
    RANGE_SEARCH = "range_search"
    SORTED_FALLBACK = "sorted_fallback"


_PULSE_RANGE_BY_TIER = {
    ExtractionTier.LABELS: WIDE_PULSE_RANGE,
}


def pulse_range_for(tier: ExtractionTier) -> Tuple[int, int]:
    """Pulse bounds a reading from the given tier must satisfy."""
    return _PULSE_RANGE_BY_TIER.get(tier, PULSE_RANGE)


class BloodPressureLevel(Enum):
    NORMAL = "normal"
    ELEVATED = "elevated"
    STAGE_1 = "stage_1"
    STAGE_2 = "stage_2"
    CRISIS = "crisis"


def in_range(value: int, bounds: Tuple[int, int]) -> bool:
    min_val, max_val = bounds
    return min_val <= value <= max_val


def is_valid_pressure(systolic: int, diastolic: int) -> bool:
    """Check the systolic/diastolic pair against the range and order rules."""
    return (systolic > diastolic
            and in_range(systolic, SYSTOLIC_RANGE)
            and in_range(diastolic, DIASTOLIC_RANGE))


def is_valid_triple(systolic: int,
                    diastolic: int,
                    pulse: int,
                    pulse_range: Tuple[int, int] = PULSE_RANGE) -> bool:
    """
    Check a full reading.

    Args:
        systolic: Systolic pressure in mmHg
        diastolic: Diastolic pressure in mmHg
        pulse: Pulse in beats per minute
        pulse_range: Bounds for the pulse; see pulse_range_for

    Returns:
        bool: True if the reading may be returned to a caller
    """
    return is_valid_pressure(systolic, diastolic) and in_range(pulse, pulse_range)


def _check_confidence(confidence: float) -> None:
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"confidence must be within [0, 1], got {confidence}")


@dataclass(frozen=True)
class BloodPressureReading:
    """Systolic, diastolic and pulse read from one display."""
    systolic: int
    diastolic: int
    pulse: int
    confidence: float
    tier: ExtractionTier

    def __post_init__(self):
        _check_confidence(self.confidence)
        if not is_valid_triple(self.systolic, self.diastolic, self.pulse,
                               pulse_range_for(self.tier)):
            raise ValueError(
                f"invalid reading {self.systolic}/{self.diastolic} pulse {self.pulse}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'systolic': self.systolic,
            'diastolic': self.diastolic,
            'pulse': self.pulse,
            'confidence': self.confidence,
            'tier': self.tier.value,
        }


@dataclass(frozen=True)
class SystolicDiastolicReading:
    """Two-value reading: the pulse could not be determined."""
    systolic: int
    diastolic: int
    confidence: float
    tier: ExtractionTier

    def __post_init__(self):
        _check_confidence(self.confidence)
        if not is_valid_pressure(self.systolic, self.diastolic):
            raise ValueError(f"invalid reading {self.systolic}/{self.diastolic}")

    @property
    def pulse(self) -> None:
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'systolic': self.systolic,
            'diastolic': self.diastolic,
            'pulse': None,
            'confidence': self.confidence,
            'tier': self.tier.value,
        }


@dataclass(frozen=True)
class SystolicReading:
    """Single-value reading, treated as the systolic pressure."""
    systolic: int
    confidence: float
    tier: ExtractionTier

    def __post_init__(self):
        _check_confidence(self.confidence)
        if not in_range(self.systolic, SYSTOLIC_RANGE):
            raise ValueError(f"invalid systolic value {self.systolic}")

    @property
    def diastolic(self) -> None:
        return None

    @property
    def pulse(self) -> None:
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'systolic': self.systolic,
            'diastolic': None,
            'pulse': None,
            'confidence': self.confidence,
            'tier': self.tier.value,
        }


Reading = Union[BloodPressureReading, SystolicDiastolicReading, SystolicReading]
ExtractionResult = Optional[Reading]


def classify_level(systolic: int, diastolic: Optional[int] = None) -> BloodPressureLevel:
    """
    Classify a pressure pair into a display level.

    Either value crossing a threshold is enough to move up a level.

    Args:
        systolic: Systolic pressure in mmHg
        diastolic: Diastolic pressure in mmHg, or None if unknown

    Returns:
        BloodPressureLevel: Level for the pair
    """
    dia = diastolic if diastolic is not None else 0
    if systolic >= 180 or dia >= 120:
        return BloodPressureLevel.CRISIS
    if systolic >= 140 or dia >= 90:
        return BloodPressureLevel.STAGE_2
    if systolic >= 130 or dia >= 85:
        return BloodPressureLevel.STAGE_1
    if systolic >= 120:
        return BloodPressureLevel.ELEVATED
    return BloodPressureLevel.NORMAL
