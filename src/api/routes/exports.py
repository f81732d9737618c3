"""Calendar and Excel export endpoints."""

import asyncio
import time
from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from api.dependencies import get_client_ip, verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import TasksRequest
from api.models.responses import ErrorCodes
from core.config import EXCEL_REPORT_NAME, ICS_EXPORT_NAME
from services.calendar import export_to_ics
from services.reports import create_planner_report_bytes

router = APIRouter(prefix="/v1/exports")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _render_ics(tasks: list) -> tuple[bytes, int | None]:
    return export_to_ics(tasks).encode("utf-8"), None


async def _export(
    request: Request,
    body: TasksRequest,
    endpoint: str,
    render: Callable[[list], tuple[bytes, int | None]],
    media_type: str,
    filename: str,
) -> Response:
    """Run an export in a worker thread, mapping errors and logging the request."""
    start_time = time.time()

    request_log = RequestLog(
        endpoint=endpoint,
        method="POST",
        client_ip=get_client_ip(request),
        tasks_evaluated=len(body.tasks),
    )

    try:
        tasks = [task.to_task() for task in body.tasks]
        content, warning_count = await asyncio.to_thread(render, tasks)

        request_log.status_code = 200
        request_log.warnings_generated = warning_count

        return Response(
            content=content,
            media_type=media_type,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    except ValueError as e:
        # Tasks that cannot be exported
        details = [line.strip() for line in str(e).split("\n") if line.strip()]
        request_log.status_code = 422
        request_log.error_code = ErrorCodes.VALIDATION_ERROR
        request_log.error_message = "Task validation failed"
        for detail in details:
            request_log.details.append(("validation_error", detail))

        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Task validation failed",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": details,
            },
        )

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        try:
            log_request(request_log)
        except Exception:
            # Don't fail the request if logging fails
            pass


@router.post("/ics")
async def export_ics_endpoint(
    request: Request,
    body: TasksRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Return the tasks as an iCalendar attachment."""
    return await _export(
        request,
        body,
        endpoint="/v1/exports/ics",
        render=_render_ics,
        media_type="text/calendar",
        filename=ICS_EXPORT_NAME,
    )


@router.post("/xlsx")
async def export_xlsx_endpoint(
    request: Request,
    body: TasksRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Return the workload report (tasks, warnings, weekly hours) as Excel."""
    return await _export(
        request,
        body,
        endpoint="/v1/exports/xlsx",
        render=create_planner_report_bytes,
        media_type=XLSX_MEDIA_TYPE,
        filename=EXCEL_REPORT_NAME,
    )
