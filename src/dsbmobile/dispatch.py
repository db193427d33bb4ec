"""DocumentDispatcher - routes leaf URLs to the timetable parser or OCR.

Classification is a pure suffix rule. Processing is sequential in leaf order;
a failing document becomes a failed DocumentResult and the rest continue.
"""

import asyncio

import httpx

from dsbmobile.errors import (
    DocumentError,
    DocumentFetchError,
    DocumentParseError,
    InvalidImageResponseError,
    OcrError,
    PermanentError,
    TransientError,
)
from dsbmobile.logging import get_logger
from dsbmobile.models import (
    ColumnMapping,
    DocumentKind,
    DocumentRef,
    DocumentResult,
    LessonRecord,
)
from dsbmobile.ocr import ImageTextExtractor
from dsbmobile.pages.timetable import parse_timetable
from dsbmobile.session import DSBSession

log = get_logger(__name__)


def classify(url: str, images_enabled: bool = True) -> DocumentKind:
    """Classify a leaf URL by suffix.

    ".htm" pages are timetables, except ".html" and "news.htm" pages;
    ".jpg" files are images when image processing is enabled.
    """
    if url.endswith(".htm") and not url.endswith("news.htm"):
        return DocumentKind.TABLE
    if url.endswith(".jpg") and images_enabled:
        return DocumentKind.IMAGE
    return DocumentKind.IGNORED


class DocumentDispatcher:
    """Fetches and parses the documents a menu tree points to."""

    def __init__(
        self,
        session: DSBSession,
        mapping: ColumnMapping,
        image_extractor: ImageTextExtractor | None = None,
    ) -> None:
        self.session = session
        self.mapping = mapping
        self.image_extractor = image_extractor

    async def dispatch(
        self, urls: list[str], images_enabled: bool = True
    ) -> list[DocumentResult]:
        """Process every table/image URL in order.

        Args:
            urls: Leaf URLs from the menu tree.
            images_enabled: Whether .jpg documents go through OCR.

        Returns:
            One result per processed document, in input order. Ignored URLs
            have no entry.
        """
        results: list[DocumentResult] = []
        for url in urls:
            kind = classify(url, images_enabled)
            if kind is DocumentKind.IGNORED:
                log.debug("document_ignored", url=url)
                continue
            results.append(await self.process(DocumentRef(url=url, kind=kind)))
        return results

    async def process(self, ref: DocumentRef) -> DocumentResult:
        """Process one document, turning DocumentError into a failed result."""
        try:
            if ref.kind is DocumentKind.TABLE:
                value: list[LessonRecord] | str = await self._process_table(ref.url)
            elif ref.kind is DocumentKind.IMAGE:
                value = await self._process_image(ref.url)
            else:
                raise ValueError(f"Cannot process ignored document {ref.url}")
        except DocumentError as e:
            log.warning(
                "document_failed",
                url=ref.url,
                kind=ref.kind.value,
                error=str(e),
                type=type(e).__name__,
            )
            return DocumentResult(ref=ref, error=f"{type(e).__name__}: {e}")

        log.info("document_processed", url=ref.url, kind=ref.kind.value)
        return DocumentResult(ref=ref, value=value)

    async def _fetch(self, url: str) -> httpx.Response:
        try:
            return await self.session.get(url)
        except (TransientError, PermanentError) as e:
            raise DocumentFetchError(f"Download failed: {e}", url=url) from e

    async def _process_table(self, url: str) -> list[LessonRecord]:
        response = await self._fetch(url)
        try:
            return parse_timetable(response.content, self.mapping, url=url)
        except DocumentParseError:
            raise
        except Exception as e:
            raise DocumentParseError(f"Malformed timetable markup: {e}", url=url) from e

    async def _process_image(self, url: str) -> str:
        if self.image_extractor is None:
            raise OcrError("No image text extractor configured", url=url)

        response = await self._fetch(url)
        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image"):
            raise InvalidImageResponseError(
                f"Invalid image response (content-type {content_type!r})", url=url
            )

        try:
            # OCR is CPU bound; keep the event loop free
            return await asyncio.to_thread(
                self.image_extractor.extract_text, response.content
            )
        except OcrError as e:
            e.url = e.url or url
            raise
        except Exception as e:
            raise OcrError(f"Image text extraction failed: {e}", url=url) from e
