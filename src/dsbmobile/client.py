"""DSBClient - fetches all substitution entries for one DSBmobile account.

Flow per call: build AuthRequest -> encode -> POST GetData -> decode ->
collect menu leaves -> dispatch each document -> drop failures -> collapse.
Protocol errors (DecodeError, ApiError, EmptyResultError, transport errors)
abort the call; document errors only drop that document.
"""

from collections.abc import Sequence

from dsbmobile.codec import PayloadCodec
from dsbmobile.config import DSBConfig, get_config
from dsbmobile.dispatch import DocumentDispatcher
from dsbmobile.logging import get_logger
from dsbmobile.menu import collect_leaves
from dsbmobile.models import AuthRequest, ColumnMapping, DocumentResult, LessonRecord
from dsbmobile.ocr import ImageTextExtractor, TesseractImageTextExtractor
from dsbmobile.session import DSBSession
from dsbmobile.utils import Clock, IdProvider, format_timestamp, new_app_id, utc_now

log = get_logger(__name__)

# Records of one timetable document, or the text of one image document
DocumentValue = list[LessonRecord] | str
EntriesResult = DocumentValue | list[DocumentValue]


class DSBClient:
    """Client for the DSBmobile GetData endpoint.

    Example:
        async with DSBClient("123456", "secret", ["class", "lesson"]) as dsb:
            entries = await dsb.fetch_entries(images=False)
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        table_mapper: Sequence[str] | None = None,
        *,
        config: DSBConfig | None = None,
        session: DSBSession | None = None,
        image_extractor: ImageTextExtractor | None = None,
        id_provider: IdProvider = new_app_id,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize DSBClient.

        Args:
            username: DSBmobile user id. Defaults to config.username.
            password: DSBmobile password. Defaults to config.password.
            table_mapper: Column attribute names. Defaults to config.table_mapper.
            config: Settings; the process-wide config when omitted.
            session: HTTP session; one is created (and owned) when omitted.
            image_extractor: OCR backend; Tesseract when omitted.
            id_provider: Returns the AppId for each request.
            clock: Returns the request timestamp.

        Raises:
            TypeError: If table_mapper is not a list or tuple of strings.
            ValueError: If table_mapper contains duplicate names.
        """
        self.config = config or get_config()
        self.username = username if username is not None else self.config.username
        self.password = password if password is not None else self.config.password
        self.mapping = ColumnMapping(
            table_mapper if table_mapper is not None else self.config.table_mapper
        )
        self._owns_session = session is None
        self.session = session or DSBSession(self.config)
        self.image_extractor = image_extractor or TesseractImageTextExtractor(
            language=self.config.ocr_language
        )
        self.id_provider = id_provider
        self.clock = clock
        self.dispatcher = DocumentDispatcher(
            self.session, self.mapping, self.image_extractor
        )

    def build_request(self) -> AuthRequest:
        """Fresh AuthRequest with a new AppId and the current time."""
        now = format_timestamp(self.clock())
        return AuthRequest(
            user_id=self.username,
            user_pw=self.password,
            app_version=self.config.app_version,
            language=self.config.language,
            os_version=self.config.os_version,
            app_id=self.id_provider(),
            device=self.config.device,
            bundle_id=self.config.bundle_id,
            date=now,
            last_update=now,
        )

    async def fetch_leaves(self) -> list[str]:
        """Call GetData and return the document URLs of the menu tree.

        Raises:
            DecodeError: If the response payload cannot be decoded.
            ApiError: If the server rejected the request.
            EmptyResultError: If the menu holds no documents.
            TransientError: If the service kept failing transiently.
            PermanentError: On a 4xx response.
        """
        request = self.build_request()
        body = PayloadCodec.build_request_body(request)
        log.info("get_data_started", url=self.config.data_url, user=self.username)

        raw = await self.session.post_json(self.config.data_url, body)
        envelope = PayloadCodec.decode(raw)
        leaves = collect_leaves(envelope)

        log.info("get_data_completed", documents=len(leaves))
        return leaves

    async def fetch_results(self, images: bool | None = None) -> list[DocumentResult]:
        """Fetch every document and return per-document outcomes.

        Failed documents are included with their error; ignored URLs are not.
        """
        images = self.config.images if images is None else images
        leaves = await self.fetch_leaves()
        return await self.dispatcher.dispatch(leaves, images_enabled=images)

    async def fetch_entries(self, images: bool | None = None) -> EntriesResult:
        """Fetch and parse all substitution documents.

        Args:
            images: Run OCR on .jpg documents. Defaults to config.images.

        Returns:
            The single document's value when exactly one document succeeded,
            otherwise the list of values in menu order (possibly empty).
        """
        results = await self.fetch_results(images)
        values = [result.value for result in results if result.ok]

        failed = len(results) - len(values)
        log.info("entries_fetched", documents=len(values), failed=failed)

        if len(values) == 1:
            return values[0]
        return values

    async def aclose(self) -> None:
        if self._owns_session:
            await self.session.aclose()

    async def __aenter__(self) -> "DSBClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
