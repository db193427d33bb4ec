"""Pydantic models for the DSBmobile wire format and parsed output.

Wire models keep the service's PascalCase names as aliases; Python code uses
snake_case attributes. Dump with by_alias=True to get the wire shape back.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# One parsed timetable row: attribute name -> cell text
LessonRecord = dict[str, str]

CLASS_ATTRIBUTE = "class"
PLACEHOLDER = "---"


class AuthRequest(BaseModel):
    """Credentials and client metadata sent inside every GetData call."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="UserId")
    user_pw: str = Field(alias="UserPw")
    app_version: str = Field(alias="AppVersion")
    language: str = Field(alias="Language")
    os_version: str = Field(alias="OsVersion")
    app_id: str = Field(alias="AppId")
    device: str = Field(alias="Device")
    bundle_id: str = Field(alias="BundleId")
    date: str = Field(alias="Date")
    last_update: str = Field(alias="LastUpdate")


class CompressedEnvelope(BaseModel):
    """Outgoing `req` object: base64 of the JSON-encoded AuthRequest."""

    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(alias="Data")
    data_type: int = Field(default=1, alias="DataType")


def _as_node_list(value: Any) -> Any:
    # The service sends either one node or a list of nodes
    if value is None:
        return []
    if isinstance(value, (dict, BaseModel)):
        return [value]
    return value


class MenuNode(BaseModel):
    """One node of the ResultMenuItems tree.

    `Childs` arrives as a single node or a list; it is always a list here.
    A `Root` wrapper, as used one level below ResultMenuItems, counts as the
    node's first child. Leaves carry the document URL in `Detail`.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = Field(default=None, alias="Title")
    detail: str | None = Field(default=None, alias="Detail")
    root_node: "MenuNode | None" = Field(default=None, alias="Root")
    childs: list["MenuNode"] = Field(default_factory=list, alias="Childs")

    @field_validator("childs", mode="before")
    @classmethod
    def _normalize_childs(cls, value: Any) -> Any:
        return _as_node_list(value)

    @property
    def children(self) -> list["MenuNode"]:
        if self.root_node is None:
            return self.childs
        return [self.root_node, *self.childs]

    @property
    def is_leaf(self) -> bool:
        return self.root_node is None and not self.childs


class ResponseEnvelope(BaseModel):
    """Decoded GetData response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    result_code: int = Field(
        validation_alias=AliasChoices("Resultcode", "ResultCode", "result_code"),
    )
    result_status_info: str | None = Field(default=None, alias="ResultStatusInfo")
    result_menu_items: list[MenuNode] = Field(
        default_factory=list, alias="ResultMenuItems"
    )

    @field_validator("result_menu_items", mode="before")
    @classmethod
    def _normalize_items(cls, value: Any) -> Any:
        return _as_node_list(value)

    @property
    def ok(self) -> bool:
        return self.result_code == 0


class ColumnMapping:
    """Ordered, unique attribute names for timetable columns.

    The position of "class" is looked up once; rows are split on that column.
    """

    __slots__ = ("_names", "_class_index")

    def __init__(self, names: Sequence[str]) -> None:
        if not isinstance(names, (list, tuple)):
            raise TypeError(
                f"Column mapping must be a list of names, got {type(names).__name__}"
            )
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"Column name {name!r} is not a string")
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate column names: {duplicates}")

        self._names: tuple[str, ...] = tuple(names)
        self._class_index: int | None = (
            self._names.index(CLASS_ATTRIBUTE)
            if CLASS_ATTRIBUTE in self._names
            else None
        )

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def class_index(self) -> int | None:
        """Index of the "class" column, or None when there is none."""
        return self._class_index

    def attribute_for(self, index: int) -> str:
        """Attribute name for a cell position; `col{index}` past the mapping."""
        if index < len(self._names):
            return self._names[index]
        return f"col{index}"

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnMapping):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"ColumnMapping({list(self._names)!r})"


class DocumentKind(str, Enum):
    TABLE = "table"
    IMAGE = "image"
    IGNORED = "ignored"


class DocumentRef(BaseModel):
    """A leaf URL and how it will be processed."""

    url: str
    kind: DocumentKind


class DocumentResult(BaseModel):
    """Outcome of processing one document.

    `value` holds the parsed records for a timetable page or the recognized
    text for an image; it is None when `error` is set.
    """

    ref: DocumentRef
    value: list[LessonRecord] | str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
