"""
TimetablePage tests - header metadata, class splitting and placeholders.
"""
import pytest

from dsbmobile.config import DEFAULT_TABLE_MAPPER
from dsbmobile.errors import DocumentParseError
from dsbmobile.models import ColumnMapping
from dsbmobile.pages.timetable import parse_timetable

from dsb_builder import STANDARD_ROWS, day_block, row, timetable_page

MAPPING = ColumnMapping(list(DEFAULT_TABLE_MAPPER))


class TestTimetableParsing:

    def test_header_metadata(self):
        records = parse_timetable(timetable_page(day_block(rows=STANDARD_ROWS)), MAPPING)

        assert {r["date"] for r in records} == {"12.3.2020"}
        assert {r["day"] for r in records} == {"Donnerstag"}
        assert {r["updated"] for r in records} == {"12.03.2020 08:44"}

    def test_multi_class_cell_yields_one_record_per_class(self):
        html = timetable_page(day_block(rows=[STANDARD_ROWS[0]]))

        first, second = parse_timetable(html, MAPPING)

        assert first["class"] == "10a"
        assert second["class"] == "10b"
        assert {k: v for k, v in first.items() if k != "class"} == {
            k: v for k, v in second.items() if k != "class"
        }
        assert first == {
            "date": "12.3.2020",
            "day": "Donnerstag",
            "updated": "12.03.2020 08:44",
            "type": "Vertretung",
            "class": "10a",
            "lesson": "3",
            "subject": "MA",
            "room": "R101",
            "new_subject": "MA",
            "new_teacher": "MUE",
            "teacher": "SCH",
        }

    def test_nbsp_cells_become_placeholder_for_every_attribute(self):
        html = timetable_page(day_block(rows=[STANDARD_ROWS[1]]))

        (record,) = parse_timetable(html, MAPPING)

        assert record["room"] == "---"
        assert record["new_subject"] == "---"
        assert record["new_teacher"] == "---"
        assert record["subject"] == "DE"

    def test_nbsp_class_cell(self):
        html = timetable_page(day_block(rows=[row("Pausenaufsicht", "&nbsp;", "2", "-")]))

        (record,) = parse_timetable(html, MAPPING)

        assert record["class"] == "---"

    def test_without_class_column_one_record_per_row(self):
        mapping = ColumnMapping(["type", "classes", "lesson"])
        html = timetable_page(day_block(rows=[STANDARD_ROWS[0]]))

        (record,) = parse_timetable(html, mapping)

        assert record["classes"] == "10a, 10b"
        assert "class" not in record

    def test_cells_beyond_mapping_get_positional_names(self):
        mapping = ColumnMapping(["type", "class"])
        html = timetable_page(day_block(rows=[row("Raum", "5b", "4", "Bio")]))

        (record,) = parse_timetable(html, mapping)

        assert record["col2"] == "4"
        assert record["col3"] == "Bio"

    def test_row_ending_before_class_column(self):
        mapping = ColumnMapping(["type", "lesson", "subject", "class"])
        html = timetable_page(day_block(rows=[row("Entfall", "3")]))

        (record,) = parse_timetable(html, mapping)

        assert record["type"] == "Entfall"
        assert record["lesson"] == "3"
        assert record["date"] == "12.3.2020"
        assert "class" not in record

    def test_short_rows_are_skipped(self):
        rows = [
            row("Keine Vertretungen"),
            STANDARD_ROWS[1],
            '<tr class="list"><td class="list" colspan="8">&nbsp;</td></tr>',
        ]
        html = timetable_page(day_block(rows=rows))

        records = parse_timetable(html, MAPPING)

        assert [r["class"] for r in records] == ["7c"]

    def test_only_header_row(self):
        assert parse_timetable(timetable_page(day_block(rows=[])), MAPPING) == []

    def test_multiple_days_in_table_order(self):
        html = timetable_page(
            day_block(rows=[row("Entfall", "5a", "1", "EN")]),
            day_block(
                title="13.3.2020 Freitag, Woche A",
                stand="12.03.2020 15:02",
                rows=[row("Vertretung", "6b, 6c", "2", "SP")],
            ),
        )

        records = parse_timetable(html, MAPPING)

        assert [(r["day"], r["class"]) for r in records] == [
            ("Donnerstag", "5a"),
            ("Freitag", "6b"),
            ("Freitag", "6c"),
        ]
        assert records[-1]["updated"] == "12.03.2020 15:02"
        assert records[-1]["date"] == "13.3.2020"

    def test_latin1_bytes_with_meta_charset(self):
        html = timetable_page(day_block(rows=[row("Entfall", "9a", "6", "Erdkunde", "&nbsp;", "&nbsp;", "&nbsp;", "MÜL")]))

        (record,) = parse_timetable(html.encode("iso-8859-1"), MAPPING)

        assert record["teacher"] == "MÜL"

    def test_no_tables_yields_no_records(self):
        assert parse_timetable("<html><body><p>Keine Pläne</p></body></html>", MAPPING) == []


class TestMalformedTimetable:

    def test_missing_header_block(self):
        html = timetable_page(
            '<div class="mon_title">12.3.2020 Donnerstag</div>'
            '<table class="mon_list"><tr><th>Art</th></tr></table>'
        )

        with pytest.raises(DocumentParseError):
            parse_timetable(html, MAPPING, url="https://example.org/x.htm")

    def test_missing_stand_marker(self):
        block = day_block(rows=STANDARD_ROWS).replace("Stand:", "Zeit:")

        with pytest.raises(DocumentParseError, match="Stand"):
            parse_timetable(timetable_page(block), MAPPING)

    def test_title_without_weekday(self):
        block = day_block(title="12.3.2020", rows=STANDARD_ROWS)

        with pytest.raises(DocumentParseError) as excinfo:
            parse_timetable(timetable_page(block), MAPPING, url="https://example.org/y.htm")

        assert excinfo.value.url == "https://example.org/y.htm"
