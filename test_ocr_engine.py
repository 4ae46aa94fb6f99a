import shutil

import cv2
import numpy as np
import pandas as pd
import pytest
import pytesseract

from ocr_engine import OCREngine, OCRError, OCRReading
from readings import ExtractionTier


def create_test_image(text="SYS 153 DIA 102 PUL 88"):
    """Create a white image with a monitor-like line of text."""
    img = np.ones((200, 900, 3), dtype=np.uint8) * 255
    cv2.putText(img, text, (30, 120), cv2.FONT_HERSHEY_SIMPLEX, 1.5, (0, 0, 0), 3)
    return img


@pytest.fixture
def fake_tesseract(monkeypatch):
    """Replace Tesseract calls with canned output."""
    calls = {}

    def image_to_string(image, config=''):
        calls['string_config'] = config
        return "SYS 153\nDIA 102\nPUL 88\n\x0c"

    def image_to_data(image, config='', output_type=None):
        calls['data_config'] = config
        return pd.DataFrame({
            'level': [1, 5, 5, 5, 5],
            'word_num': [0, 1, 2, 3, 4],
            'conf': [-1, 90, 80, -1, 70],
            'text': [None, 'SYS', '153', 'x', ' '],
        })

    monkeypatch.setattr(pytesseract, 'image_to_string', image_to_string)
    monkeypatch.setattr(pytesseract, 'image_to_data', image_to_data)
    return calls


def test_config_merge():
    """Provided options override the defaults."""
    engine = OCREngine({'--psm': '7'})
    assert engine.config['--psm'] == '7'
    assert engine.config['--oem'] == '3'
    assert 'tessedit_char_whitelist' in engine.config

    engine.set_psm(6)
    assert engine.config['--psm'] == '6'

    config_str = engine._build_config_str()
    assert '--psm 6' in config_str
    assert '-c tessedit_char_whitelist=0123456789' in config_str


def test_config_string_format():
    """Flags render as '--name value', variables as '-c name=value', in dict order."""
    engine = OCREngine()
    engine.config = {'--oem': '1', '--psm': 7, 'load_system_dawg': '0'}
    assert engine._build_config_str() == '--oem 1 --psm 7 -c load_system_dawg=0'


def test_extract_with_confidence(fake_tesseract):
    engine = OCREngine()
    text, confidence = engine.extract_with_confidence(create_test_image())

    assert text == "SYS 153\nDIA 102\nPUL 88"
    assert confidence == pytest.approx(85.0)
    assert '--psm 11' in fake_tesseract['string_config']


def test_confidence_without_words(monkeypatch):
    monkeypatch.setattr(pytesseract, 'image_to_data',
                        lambda image, config='', output_type=None: pd.DataFrame(
                            {'word_num': [0], 'conf': [-1], 'text': [None]}))
    assert OCREngine().get_confidence(create_test_image()) == 0.0


def test_read_blood_pressure(fake_tesseract):
    reading = OCREngine().read_blood_pressure(create_test_image())

    assert isinstance(reading, OCRReading)
    assert reading.source == 'tesseract'
    assert reading.result.tier == ExtractionTier.LABELS
    assert (reading.result.systolic, reading.result.diastolic, reading.result.pulse) == (153, 102, 88)


def test_tesseract_failure(monkeypatch):
    def missing(image, config=''):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, 'image_to_string', missing)
    with pytest.raises(OCRError):
        OCREngine().extract_text(create_test_image())


@pytest.mark.skipif(shutil.which('tesseract') is None, reason="tesseract not installed")
def test_real_tesseract():
    """Run the real engine; OCR quality is not asserted."""
    reading = OCREngine().read_blood_pressure(create_test_image())
    assert isinstance(reading.text, str)
    assert 0 <= reading.engine_confidence <= 100
