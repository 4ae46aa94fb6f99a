import argparse
import json
import logging
import os
import sys
from typing import List, Optional

import cv2

from bp_extractor import extract
from ocr_engine import OCREngine, OCRError
from readings import ExtractionResult, classify_level

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg')


def find_images(folder_path: str) -> List[str]:
    """Image files in a folder, sorted by name."""
    return sorted(
        os.path.join(folder_path, f) for f in os.listdir(folder_path)
        if f.lower().endswith(IMAGE_EXTENSIONS)
    )


def format_result(result: ExtractionResult) -> str:
    """Human readable block for one extraction result."""
    if result is None:
        return "No blood pressure reading found."

    lines = [f"  Systolic: {result.systolic} mmHg"]
    if result.diastolic is not None:
        lines.append(f"  Diastolic: {result.diastolic} mmHg")
    if result.pulse is not None:
        lines.append(f"  Pulse: {result.pulse} /min")
    lines.append(f"  Confidence: {result.confidence:.2f}")
    lines.append(f"  Tier: {result.tier.value}")
    lines.append(f"  Level: {classify_level(result.systolic, result.diastolic).value}")
    return "\n".join(lines)


def result_to_json(name: str, result: ExtractionResult, **extra) -> str:
    payload = {'input': name, 'reading': result.to_dict() if result is not None else None}
    if result is not None:
        payload['level'] = classify_level(result.systolic, result.diastolic).value
    payload.update(extra)
    return json.dumps(payload)


def process_folder(folder_path: str, engine: OCREngine, as_json: bool = False) -> int:
    """
    OCR every image in a folder and print the readings.

    Returns:
        int: Number of images a reading was found for
    """
    image_files = find_images(folder_path)
    if not image_files:
        print("No image files found in the folder.")
        return 0

    found = 0
    for image_path in image_files:
        img = cv2.imread(image_path)
        if img is None:
            logger.warning("Skipping %s: could not read image", image_path)
            continue

        try:
            reading = engine.read_blood_pressure(img)
        except OCRError as e:
            logger.error("Skipping %s: %s", image_path, e)
            continue

        if reading.result is not None:
            found += 1

        if as_json:
            print(result_to_json(image_path, reading.result,
                                 text=reading.text,
                                 engine_confidence=reading.engine_confidence))
        else:
            print(f"\n---\nImage: {image_path}")
            print(f"Recognised text: {reading.text!r}")
            print(format_result(reading.result))
    return found


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Read blood pressure values from monitor photos or OCR text."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('folder', nargs='?', help="Folder of monitor photos")
    source.add_argument('--text', help="OCR text to extract a reading from")
    parser.add_argument('--json', action='store_true', help="Print one JSON object per input")
    parser.add_argument('--psm', help="Tesseract page segmentation mode")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s'
    )

    if args.text is not None:
        result = extract(args.text)
        if args.json:
            print(result_to_json('text', result))
        else:
            print(format_result(result))
        return 0

    if not os.path.exists(args.folder):
        print(f"Error: Folder not found at {args.folder}")
        return 1
    if not os.path.isdir(args.folder):
        print(f"Error: Path provided is not a folder: {args.folder}")
        return 1

    engine = OCREngine({'--psm': args.psm} if args.psm else None)
    process_folder(args.folder, engine, as_json=args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
