"""Artifact producers invoked by the archival pipeline."""

from link_archiver.services.preservation.image_archiver import ImageArchiver
from link_archiver.services.preservation.monolith_archiver import MonolithArchiver
from link_archiver.services.preservation.pdf_archiver import PdfArchiver
from link_archiver.services.preservation.preview_generator import PreviewGenerator
from link_archiver.services.preservation.readability_extractor import ReadabilityExtractor
from link_archiver.services.preservation.screenshot_pdf_capturer import ScreenshotPdfCapturer

__all__ = [
    "ImageArchiver",
    "MonolithArchiver",
    "PdfArchiver",
    "PreviewGenerator",
    "ReadabilityExtractor",
    "ScreenshotPdfCapturer",
]
