import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd
import pytesseract

from bp_extractor import BloodPressureTextExtractor
from readings import ExtractionResult

logger = logging.getLogger(__name__)


class OCRError(RuntimeError):
    """Raised when Tesseract cannot be run on an image."""


@dataclass(frozen=True)
class OCRReading:
    """OCR output for one image together with the reading extracted from it."""
    text: str
    engine_confidence: float
    result: ExtractionResult
    source: str = 'tesseract'


class OCREngine:
    """
    Wrapper for Tesseract OCR on blood pressure monitor photos.

    Common Tesseract Page Segmentation Modes (PSM) (--psm option):
      3    Fully automatic page segmentation, but no OSD.
      6    Assume a single uniform block of text.
      7    Treat the image as a single text line.
     11    Sparse text. Find as much text as possible in no particular order.
           (Default here: monitor displays scatter values and labels.)
    """

    SOURCE = 'tesseract'

    def __init__(self,
                 config: Optional[Dict[str, str]] = None,
                 extractor: Optional[BloodPressureTextExtractor] = None):
        """
        Initialize OCR engine with optional Tesseract configuration.

        Args:
            config: Dictionary of Tesseract configuration parameters, merged
                    over the defaults. Example: `{'--psm': '7'}`
            extractor: Extractor the recognised text is handed to
        """
        default_config = {
            '--oem': '3',  # Default engine, LSTM where available
            '--psm': '11',
            # Digits plus the letters of SYS/DIA/PUL/mmHg/min
            'tessedit_char_whitelist': '0123456789SYDIAPULmHgin/:',
        }

        if config:
            self.config = {**default_config, **config}
        else:
            self.config = default_config
        self.extractor = extractor or BloodPressureTextExtractor()

        logger.debug("OCREngine initialized with config: %s", self.config)

    def set_psm(self, psm_value: str):
        """
        Switch the page segmentation mode, e.g. to '7' for a display cropped
        to a single line of digits.

        Args:
            psm_value: PSM value as str or int; stored as str
        """
        self.config['--psm'] = str(psm_value)
        logger.debug("Tesseract PSM updated to %s", psm_value)

    def _build_config_str(self) -> str:
        """
        Render the config dict as a Tesseract command-line string.

        Keys starting with '--' are engine flags ('--psm 11'); anything else
        is a Tesseract variable passed as '-c name=value'.
        """
        return ' '.join(
            f'{key} {value}' if key.startswith('--') else f'-c {key}={value}'
            for key, value in self.config.items()
        )

    def extract_text(self, image: np.ndarray) -> str:
        """
        Extract text from an image.

        Args:
            image: Image as numpy array

        Returns:
            str: Extracted text

        Raises:
            OCRError: If Tesseract fails or is not installed
        """
        config_str = self._build_config_str()
        logger.debug("Using Tesseract config: '%s'", config_str)
        try:
            text = pytesseract.image_to_string(image, config=config_str)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            logger.error("Error during OCR: %s", e)
            raise OCRError(f"Tesseract failed: {e}") from e
        return text.strip()

    def get_confidence(self, image: np.ndarray) -> float:
        """
        Mean word confidence for an image.

        Args:
            image: Image as numpy array

        Returns:
            float: Confidence score (0-100), 0.0 when no words were found
        """
        try:
            data = pytesseract.image_to_data(
                image,
                config=self._build_config_str(),
                output_type=pytesseract.Output.DATAFRAME
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            logger.error("Error getting confidence: %s", e)
            raise OCRError(f"Tesseract failed: {e}") from e

        if data is None or data.empty:
            return 0.0

        # Page/block/line rows carry conf -1; only word rows (word_num > 0) count
        conf = pd.to_numeric(data['conf'], errors='coerce')
        text = data['text'].fillna('').astype(str).str.strip()
        words = conf[(conf >= 0) & (data['word_num'] > 0) & (text != '')]
        return float(words.mean()) if not words.empty else 0.0

    def extract_with_confidence(self, image: np.ndarray) -> Tuple[str, float]:
        """
        Extract text and confidence score from image.

        Returns:
            Tuple[str, float]: (extracted text, confidence score)
        """
        text = self.extract_text(image)
        confidence = self.get_confidence(image)
        return text, confidence

    def read_blood_pressure(self, image: np.ndarray) -> OCRReading:
        """
        OCR an image and extract a blood pressure reading from the text.

        Args:
            image: Photo of a monitor display as numpy array

        Returns:
            OCRReading: Raw text, engine confidence and the extraction result
        """
        text, confidence = self.extract_with_confidence(image)
        logger.info("Recognised text: %r (confidence %.1f)", text, confidence)
        return OCRReading(
            text=text,
            engine_confidence=confidence,
            result=self.extractor.extract(text),
            source=self.SOURCE
        )
