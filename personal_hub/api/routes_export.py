from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from loguru import logger
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.core.clock import utcnow
from personal_hub.core.errors import NotFoundError
from personal_hub.db.models import User
from personal_hub.db.session import get_db
from personal_hub.exports.csv_format import download_headers, export_filename, export_metadata, rows_to_csv
from personal_hub.exports.entity_export import EXPORTERS, applied_filters, filters_from_params

router = APIRouter()


@router.get("/export/{entity}")
def export_entity(
    entity: str,
    format: Literal["json", "csv"] = Query(default="json"),
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    status: str | None = Query(default=None),
    priority: str | None = Query(default=None),
    type: str | None = Query(default=None),
    all_day: bool | None = Query(default=None, alias="allDay"),
    tags: str | None = Query(default=None),
    session_type: str | None = Query(default=None, alias="sessionType"),
    completed: bool | None = Query(default=None),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> Response:
    if entity not in EXPORTERS:
        raise NotFoundError("Export type")
    exporter, columns = EXPORTERS[entity]
    applied = applied_filters(
        entity,
        {
            "dateFrom": date_from,
            "dateTo": date_to,
            "status": status,
            "priority": priority,
            "type": type,
            "allDay": all_day,
            "tags": tags,
            "sessionType": session_type,
            "completed": completed,
        },
    )
    rows = exporter(db, user.id, filters_from_params(applied))
    now = utcnow()
    headers = download_headers(export_filename(entity, format, now))
    logger.info("Export entity={} format={} rows={} user_id={}", entity, format, len(rows), user.id)

    if format == "csv":
        return Response(content=rows_to_csv(columns, rows), media_type="text/csv; charset=utf-8", headers=headers)

    payload = {"metadata": export_metadata(len(rows), applied, now), "data": rows}
    return JSONResponse(content=payload, headers=headers)
