"""Error hierarchy for the DSBmobile client.

Protocol-level failures (transport, decoding, server-reported errors, empty
menus) abort a fetch. Document-level failures (one page or image that cannot
be fetched, parsed or read) are caught at the dispatch boundary and only drop
that document from the output.

The transient/permanent split lets tenacity classify what the session should
retry:
    AsyncRetrying(retry=retry_if_exception_type(TransientError), ...)
"""


class DSBError(Exception):
    """Base exception for all DSBmobile client errors."""

    pass


class TransientError(DSBError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, connection resets, 5xx responses.
    """

    pass


class RateLimitError(TransientError):
    """Server answered 429 - retried like any transient failure."""

    pass


class PermanentError(DSBError):
    """Failure that won't succeed on retry.

    Examples: 4xx responses, a payload that cannot be decoded.
    """

    pass


class DecodeError(PermanentError):
    """Response payload was not valid base64, compressed data or JSON."""

    pass


class ApiError(PermanentError):
    """Server reported a non-zero result code.

    The exception message is the server's ResultStatusInfo, unchanged.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class EmptyResultError(PermanentError):
    """Menu tree contained no document references."""

    pass


class DocumentError(DSBError):
    """A single document could not be processed.

    Never fatal for a fetch: the dispatcher records it and moves on.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class DocumentFetchError(DocumentError):
    """Document download failed after retries."""

    pass


class DocumentParseError(DocumentError):
    """Timetable markup did not have the expected shape."""

    pass


class OcrError(DocumentError):
    """Image could not be turned into text."""

    pass


class InvalidImageResponseError(OcrError):
    """Image URL answered with a non-image content type."""

    pass
