"""TimetablePage - extracts substitution entries from an Untis "Monitor" page.

DSB serves substitution plans as HTML exported by Untis. One file may hold
several days, each laid out as:

  table.mon_head
    td > p -> "<school><br/>... Stand: 12.03.2020 08:44"
  div.mon_title -> "12.3.2020 Donnerstag, Woche A"
  table.mon_list
    tr.list -> th per column (discarded)
    tr.list odd|even -> td per column, in the order of the column mapping

The i-th table.mon_list belongs to the i-th table.mon_head and the i-th
div.mon_title. Cells holding only &nbsp; become the "---" placeholder.
A class cell like "10a, 10b" yields one record per class.
"""

from bs4 import BeautifulSoup, Tag

from dsbmobile.errors import DocumentParseError
from dsbmobile.logging import get_logger
from dsbmobile.models import CLASS_ATTRIBUTE, PLACEHOLDER, ColumnMapping, LessonRecord

log = get_logger(__name__)

NBSP = "\xa0"
STAND_MARKER = "Stand: "
CLASS_SEPARATOR = ", "


class TimetablePage:
    """One fetched timetable document."""

    HEADER_TABLE = "table.mon_head"
    TITLE = "div.mon_title"
    LIST_TABLE = "table.mon_list"

    def __init__(
        self, html: str | bytes, mapping: ColumnMapping, url: str | None = None
    ) -> None:
        self.html = html
        self.mapping = mapping
        self.url = url

    def extract(self) -> list[LessonRecord]:
        """Parse every day block on the page.

        Returns:
            Records in table order, then row order, then class order.

        Raises:
            DocumentParseError: If a table has no matching header or title,
                the header lacks the "Stand: " marker, or the title lacks a
                date and weekday.
        """
        soup = BeautifulSoup(self.html, "html.parser")
        tables = soup.select(self.LIST_TABLE)
        headers = soup.select(self.HEADER_TABLE)
        titles = soup.select(self.TITLE)

        records: list[LessonRecord] = []
        for index, table in enumerate(tables):
            if index >= len(headers) or index >= len(titles):
                raise DocumentParseError(
                    f"Table {index} has no matching header/title block", url=self.url
                )
            updated = self._parse_updated(headers[index])
            date, day = self._parse_title(titles[index])
            records.extend(self._parse_table(table, date, day, updated))

        log.debug(
            "timetable_parsed", url=self.url, tables=len(tables), entries=len(records)
        )
        return records

    def _parse_updated(self, header: Tag) -> str:
        """Return the as-of timestamp following "Stand: "."""
        text = header.get_text()
        _, marker, rest = text.partition(STAND_MARKER)
        if not marker:
            raise DocumentParseError(
                f"Header has no {STAND_MARKER.strip()!r} marker", url=self.url
            )
        lines = rest.strip().splitlines()
        return lines[0].strip() if lines else ""

    def _parse_title(self, title: Tag) -> tuple[str, str]:
        """Split "12.3.2020 Donnerstag, Woche A" into date and weekday."""
        tokens = title.get_text().split()
        if len(tokens) < 2:
            raise DocumentParseError(
                f"Title {title.get_text()!r} has no date and weekday", url=self.url
            )
        return tokens[0], tokens[1].rstrip(",")

    def _parse_table(
        self, table: Tag, date: str, day: str, updated: str
    ) -> list[LessonRecord]:
        records: list[LessonRecord] = []
        # First row holds the column headers
        for row in table.find_all("tr")[1:]:
            cells = [cell.get_text() for cell in row.find_all("td")]
            if len(cells) < 2:
                continue
            for class_token in self._class_tokens(cells):
                record: LessonRecord = {"date": date, "day": day, "updated": updated}
                for i, text in enumerate(cells):
                    attribute = self.mapping.attribute_for(i)
                    if text == NBSP:
                        record[attribute] = PLACEHOLDER
                    elif attribute == CLASS_ATTRIBUTE:
                        record[attribute] = class_token
                    else:
                        record[attribute] = text
                records.append(record)
        return records

    def _class_tokens(self, cells: list[str]) -> list[str]:
        class_index = self.mapping.class_index
        if class_index is None or class_index >= len(cells):
            return [PLACEHOLDER]
        return cells[class_index].split(CLASS_SEPARATOR)


def parse_timetable(
    html: str | bytes, mapping: ColumnMapping, url: str | None = None
) -> list[LessonRecord]:
    """Parse one timetable document into lesson records.

    Pass raw bytes when the page's encoding is only declared in a meta tag.
    """
    return TimetablePage(html, mapping, url=url).extract()
