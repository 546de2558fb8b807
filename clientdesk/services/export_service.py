"""
Plain-text exports shared by the time tracking and report pages.

CSV follows the usual spreadsheet convention: a value is quoted only when
it contains a comma, a double quote or a line break, and embedded quotes
are doubled.
"""

import csv
import io
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from clientdesk.domain.errors import InvalidInputError
from clientdesk.i18n import tr

logger = logging.getLogger(__name__)


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def to_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """Render a header row plus data rows, lines joined by '\\n'"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(v) for v in row])
    return buffer.getvalue().rstrip("\n")


def records_to_csv(records: List[Mapping[str, Any]]) -> str:
    """
    CSV from a list of dicts; the first record's keys are the columns.

    Raises:
        InvalidInputError: when there is nothing to export
    """
    if not records:
        raise InvalidInputError(tr("report.no_data"))
    headers = list(records[0].keys())
    return to_csv(headers, ([r.get(h) for h in headers] for r in records))


def export_filename(name: str, extension: str, today: Optional[date] = None) -> str:
    """e.g. invoices_report_2026-01-31.csv"""
    today = today or date.today()
    return f"{name}_{today.isoformat()}.{extension}"


def save_export(content, filename: str, directory: Path) -> Path:
    """Write str or bytes content below directory, return the path"""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
    logger.info(f"Export written to {path}")
    return path
