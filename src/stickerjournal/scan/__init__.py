"""Scan pipeline: OCR a photographed page and turn it into a templated entry."""

from .ocr import OCRClient
from .oracle import HttpOcrOracle, LocalOcrOracle, OcrOracle
from .pipeline import ScanPhase, ScanPipeline, ScanState, parse_data_uri, read_image_file, reduce
from .template import ScannedTemplate, build_scanned_template

__all__ = [
    "HttpOcrOracle",
    "LocalOcrOracle",
    "OCRClient",
    "OcrOracle",
    "ScanPhase",
    "ScanPipeline",
    "ScanState",
    "ScannedTemplate",
    "build_scanned_template",
    "parse_data_uri",
    "read_image_file",
    "reduce",
]
