"""
Parser for the bundled Met catalog CSV.

The file is uncontrolled external data, so parsing is best effort: the
header line is skipped without validation, rows that are too short for the
configured column layout are dropped, and nothing raises.
"""

from __future__ import annotations

import logging
from typing import Any

from artlog.schemas.catalog import BOOLEAN_FIELDS, COLUMN_LAYOUTS, CatalogRecord, ColumnLayout
from artlog.schemas.enums import CatalogLayout

logger = logging.getLogger(__name__)

__all__ = ["split_line", "DelimitedCatalogParser"]

QUOTE = '"'
DELIMITER = ","


def split_line(line: str) -> list[str]:
    """
    Split one CSV line into fields.

    A double quote toggles quoted mode and is dropped; commas inside quotes
    are kept. Doubled quotes are not unescaped.

        >>> split_line('"Smith, John",1949,Oil')
        ['Smith, John', '1949', 'Oil']
    """
    fields = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


class DelimitedCatalogParser:
    """
    Turns raw catalog text into CatalogRecords for one fixed column layout.

    Usage:
        parser = DelimitedCatalogParser(CatalogLayout.CURRENT_53)
        records = parser.parse(csv_text)
    """

    def __init__(self, layout: CatalogLayout = CatalogLayout.CURRENT_53):
        self.layout = layout
        self._columns: ColumnLayout = COLUMN_LAYOUTS[layout]

    @property
    def min_fields(self) -> int:
        return self._columns.min_fields

    def parse(self, raw_text: str) -> list[CatalogRecord]:
        """Parse every data row; short rows are skipped."""
        lines = raw_text.split("\n")
        records = []
        skipped = 0

        # First line is the header
        for line in lines[1:]:
            line = line.removesuffix("\r")
            if not line:
                continue

            record = self.parse_row(split_line(line))
            if record is None:
                skipped += 1
                continue
            records.append(record)

        if skipped:
            logger.info(f"Skipped {skipped} catalog rows shorter than {self.min_fields} fields")

        return records

    def parse_row(self, fields: list[str]) -> CatalogRecord | None:
        """Map split fields onto a record, or None if the row is too short."""
        if len(fields) < self.min_fields:
            return None

        values: dict[str, Any] = {
            name: fields[index] for name, index in self._columns.required.items()
        }
        for name, index in self._columns.optional.items():
            values[name] = fields[index] if index < len(fields) else ""

        for name in BOOLEAN_FIELDS & values.keys():
            values[name] = values[name].lower() == "true"

        return CatalogRecord(**values)
