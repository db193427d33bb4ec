"""Client configuration loaded from environment variables.

Every field can be set with a DSB_ prefixed variable (DSB_USERNAME,
DSB_TABLE_MAPPER='["class", "lesson"]', ...) or from a local .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_TABLE_MAPPER: tuple[str, ...] = (
    "type",
    "class",
    "lesson",
    "subject",
    "room",
    "new_subject",
    "new_teacher",
    "teacher",
)


class DSBConfig(BaseSettings):
    """DSBmobile client configuration.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Credentials (passed through to the service, never stored elsewhere)
    username: str = Field(default="", description="DSBmobile user id")
    password: str = Field(default="", description="DSBmobile password")

    # Service endpoint and the app identity the server expects
    data_url: str = Field(
        default="https://app.dsbcontrol.de/JsonHandler.ashx/GetData",
        description="GetData endpoint of the DSBmobile JSON handler",
    )
    app_version: str = Field(default="2.5.9", description="Reported app version")
    language: str = Field(default="de", description="Reported client language")
    os_version: str = Field(default="28 8.0", description="Reported OS version")
    device: str = Field(default="SM-G930F", description="Reported device model")
    bundle_id: str = Field(
        default="de.heinekingmedia.dsbmobile",
        description="Reported app bundle id",
    )

    # Parsing
    table_mapper: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TABLE_MAPPER),
        description="Attribute names for timetable columns, in column order",
    )
    images: bool = Field(
        default=True,
        description="Run OCR on image documents by default",
    )
    ocr_language: str = Field(
        default="deu",
        description="Tesseract language code for image documents",
    )

    # Transport
    request_timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds for every request",
    )
    max_attempts: int = Field(
        default=3,
        description="Attempts per request before a transient error is raised",
    )
    retry_wait: float = Field(
        default=2.0,
        description="Seconds to wait between attempts",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "DSB_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: DSBConfig | None = None


def get_config() -> DSBConfig:
    """Get the client configuration singleton.

    Returns:
        DSBConfig: Client configuration instance
    """
    global _config
    if _config is None:
        _config = DSBConfig()
    return _config
