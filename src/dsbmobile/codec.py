"""PayloadCodec - wire encoding for the GetData endpoint.

Outgoing: AuthRequest -> compact JSON -> base64 -> {"Data": ..., "DataType": 1}.
Incoming: {"d": base64(deflate(json))} -> ResponseEnvelope.
"""

import base64
import binascii
import json
import zlib
from typing import Any

from pydantic import ValidationError

from dsbmobile.errors import ApiError, DecodeError
from dsbmobile.logging import get_logger
from dsbmobile.models import AuthRequest, CompressedEnvelope, ResponseEnvelope

log = get_logger(__name__)

DATA_TYPE = 1

# zlib header or gzip header, detected automatically
_INFLATE_WBITS = zlib.MAX_WBITS | 32


class PayloadCodec:
    """Encodes outgoing requests and decodes GetData responses."""

    @staticmethod
    def encode(request: AuthRequest) -> CompressedEnvelope:
        """Wrap an AuthRequest the way the server expects it. No I/O."""
        payload = request.model_dump_json(by_alias=True)
        data = base64.b64encode(payload.encode("utf-8")).decode("ascii")
        return CompressedEnvelope(data=data, data_type=DATA_TYPE)

    @classmethod
    def build_request_body(cls, request: AuthRequest) -> dict[str, Any]:
        """Full JSON body of the POST: {"req": {"Data": ..., "DataType": 1}}."""
        return {"req": cls.encode(request).model_dump(by_alias=True)}

    @staticmethod
    def decode(raw_body: Any) -> ResponseEnvelope:
        """Decode a GetData response body.

        Args:
            raw_body: Parsed JSON of the HTTP response (a dict with "d").

        Returns:
            ResponseEnvelope with a zero result code.

        Raises:
            DecodeError: If any stage (field lookup, base64, inflate, UTF-8,
                JSON, envelope shape) fails.
            ApiError: If the server reported a non-zero Resultcode.
        """
        if not isinstance(raw_body, dict) or "d" not in raw_body:
            raise DecodeError("Response body has no 'd' field")
        encoded = raw_body["d"]
        if not isinstance(encoded, str):
            raise DecodeError(f"Field 'd' is {type(encoded).__name__}, expected str")

        try:
            compressed = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Payload is not valid base64: {e}") from e

        try:
            text = zlib.decompress(compressed, _INFLATE_WBITS).decode("utf-8")
        except zlib.error as e:
            raise DecodeError(f"Payload could not be decompressed: {e}") from e
        except UnicodeDecodeError as e:
            raise DecodeError(f"Payload is not UTF-8: {e}") from e

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Payload is not valid JSON: {e}") from e

        try:
            envelope = ResponseEnvelope.model_validate(document)
        except ValidationError as e:
            raise DecodeError(f"Unexpected response shape: {e}") from e

        if not envelope.ok:
            log.warning(
                "api_error",
                result_code=envelope.result_code,
                status=envelope.result_status_info,
            )
            raise ApiError(
                envelope.result_status_info or "", code=envelope.result_code
            )

        log.debug("response_decoded", menu_items=len(envelope.result_menu_items))
        return envelope
