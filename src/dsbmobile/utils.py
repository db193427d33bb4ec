"""Request identity and timestamp providers.

The request builder takes these as injected callables so tests can pin the
AppId and the Date/LastUpdate pair.
"""

import uuid
from collections.abc import Callable
from datetime import datetime, timezone

IdProvider = Callable[[], str]
Clock = Callable[[], datetime]


def new_app_id() -> str:
    """Random UUID-v4 string, fresh for every request."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 at second precision, UTC, with a Z suffix.

    Naive datetimes are taken to be UTC already.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.replace(microsecond=0, tzinfo=None).isoformat() + "Z"
