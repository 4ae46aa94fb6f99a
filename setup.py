from setuptools import setup

setup(
    name="bp_ocr_reader",
    version="0.1.0",
    py_modules=[
        "bp_extractor",
        "bpread",
        "number_extractor",
        "ocr_engine",
        "pattern_matcher",
        "readings",
    ],
    install_requires=[
        "numpy",
        "opencv-python",
        "pandas",
        "pytesseract",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
)
