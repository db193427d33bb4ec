"""
Tesseract adapter tests (skipped without the "ocr" extra).
"""
import io

import pytest

from dsbmobile.errors import OcrError
from dsbmobile.ocr import ImageTextExtractor, TesseractImageTextExtractor

pytesseract = pytest.importorskip("pytesseract")
Image = pytest.importorskip("PIL.Image")


def jpeg_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), "white").save(buffer, format="JPEG")
    return buffer.getvalue()


class TestTesseractExtractor:

    def test_satisfies_protocol(self):
        assert isinstance(TesseractImageTextExtractor(), ImageTextExtractor)

    def test_runs_tesseract_with_language(self, monkeypatch):
        seen = {}

        def fake_image_to_string(image, lang):
            seen["lang"] = lang
            seen["size"] = image.size
            return "5a Entfall"

        monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

        text = TesseractImageTextExtractor(language="deu").extract_text(jpeg_bytes())

        assert text == "5a Entfall"
        assert seen == {"lang": "deu", "size": (8, 8)}

    def test_unreadable_image(self):
        with pytest.raises(OcrError, match="could not be read"):
            TesseractImageTextExtractor().extract_text(b"definitely not an image")

    def test_missing_binary(self, monkeypatch):
        def missing(image, lang):
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(pytesseract, "image_to_string", missing)

        with pytest.raises(OcrError, match="not found"):
            TesseractImageTextExtractor().extract_text(jpeg_bytes())
