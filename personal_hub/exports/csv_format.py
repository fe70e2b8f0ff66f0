from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime
from typing import Any

from personal_hub.core.clock import isoformat, utcnow

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return isoformat(value) or ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return "; ".join(format_value(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def rows_to_csv(columns: list[str], rows: list[dict[str, Any]]) -> str:
    """Header row plus one line per record; quoting follows RFC 4180."""
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=",", quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(columns)
    for row in rows:
        writer.writerow([format_value(row.get(col)) for col in columns])
    return buf.getvalue()


def export_metadata(record_count: int, filters: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    return {
        "exportDate": isoformat(now or utcnow()),
        "recordCount": record_count,
        "filters": {key: value for key, value in filters.items() if value is not None},
    }


def export_filename(entity: str, fmt: str, now: datetime | None = None) -> str:
    day = (now or utcnow()).date().isoformat()
    return f"{entity}-export-{day}.{fmt}"


def download_headers(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"', **NO_CACHE_HEADERS}
