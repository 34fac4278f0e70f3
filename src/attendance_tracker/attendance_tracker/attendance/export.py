from __future__ import annotations

import csv
import io
from datetime import date
from typing import Optional, Sequence

from ..classrooms.model import Classroom
from ..common.datetime_utils import format_iso_date
from ..core.constants import (
    ALL_CLASSROOMS,
    CSV_FILENAME_PREFIX,
    CSV_HEADERS,
    CSV_MIMETYPE,
    UNKNOWN_CLASSROOM,
)
from ..core.exceptions import EmptyExportError
from .model import AttendanceRecord, CsvExport


def export_filename(selection: Optional[str], today: date) -> str:
    return f"{CSV_FILENAME_PREFIX}_{selection or ALL_CLASSROOMS}_{today.strftime('%Y-%m-%d')}.csv"


def render_csv(records: Sequence[AttendanceRecord], classrooms: Sequence[Classroom]) -> str:
    """One quoted line per record under a fixed header, ``\\n`` separated.

    Embedded double quotes are doubled by the csv module so names with quotes
    stay in their column.
    """

    names = {c.id: c.name for c in classrooms}

    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for r in records:
        writer.writerow(
            [
                format_iso_date(r.date),
                names.get(r.classroom_id, UNKNOWN_CLASSROOM),
                r.student_name,
                r.student_roll,
                r.student_email or "",
                r.status,
            ]
        )
    return out.getvalue().removesuffix("\n")


def build_csv_export(
    records: Sequence[AttendanceRecord],
    classrooms: Sequence[Classroom],
    *,
    selection: Optional[str],
    today: date,
) -> CsvExport:
    if not records:
        raise EmptyExportError("No data to export")

    return CsvExport(
        filename=export_filename(selection, today),
        content=render_csv(records, classrooms),
        mimetype=CSV_MIMETYPE,
    )
