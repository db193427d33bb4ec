"""Image-to-text collaborator for image documents (.jpg plans).

The client only depends on the ImageTextExtractor protocol. The Tesseract
adapter needs the optional "ocr" extra (Pillow + pytesseract) and a tesseract
binary on PATH.
"""

import io
from typing import Protocol, runtime_checkable

from dsbmobile.errors import OcrError
from dsbmobile.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class ImageTextExtractor(Protocol):
    def extract_text(self, image: bytes) -> str:
        """Return the recognized text; raise OcrError on failure."""
        ...


class TesseractImageTextExtractor:
    """Runs Tesseract over raw image bytes."""

    def __init__(self, language: str = "deu") -> None:
        self.language = language

    def extract_text(self, image: bytes) -> str:
        # Imported here so the client works without the "ocr" extra
        # as long as images are disabled or another extractor is injected.
        from PIL import Image, UnidentifiedImageError
        import pytesseract

        try:
            with Image.open(io.BytesIO(image)) as picture:
                text = pytesseract.image_to_string(picture, lang=self.language)
        except UnidentifiedImageError as e:
            raise OcrError(f"Image data could not be read: {e}") from e
        except pytesseract.TesseractError as e:
            raise OcrError(f"Tesseract failed: {e}") from e
        except pytesseract.TesseractNotFoundError as e:
            raise OcrError("Tesseract binary not found on PATH") from e

        log.debug("image_text_extracted", chars=len(text), language=self.language)
        return text
