"""Constraint check endpoint."""

import time

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_client_ip, verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import ConstraintCheckRequest, TaskModel
from api.models.responses import ConstraintCheckResponse, ErrorCodes, WarningResponse
from core.constraints import check_constraints

router = APIRouter(prefix="/v1")


@router.post("/constraints/check", response_model=ConstraintCheckResponse)
async def check_constraints_endpoint(
    request: Request,
    body: ConstraintCheckRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Evaluate the full task list and return the current warnings.

    Warnings whose (task_id, type) pair appears in `dismissed` are left out.
    The check is stateless: clients resend their dismissals with each call.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/constraints/check",
        method="POST",
        client_ip=get_client_ip(request),
        tasks_evaluated=len(body.tasks),
    )

    try:
        tasks = [task.to_task() for task in body.tasks]
        dismissed = {(key.task_id, key.type) for key in body.dismissed}

        warnings = [
            warning
            for warning in check_constraints(tasks)
            if warning.dismissal_key not in dismissed
        ]

        request_log.status_code = 200
        request_log.warnings_generated = len(warnings)
        for warning in warnings:
            request_log.details.append(("warning", f"{warning.type}: {warning.message}"))

        return ConstraintCheckResponse(
            warnings=[
                WarningResponse(
                    message=warning.message,
                    type=warning.type,
                    task_id=warning.task["id"],
                    task=TaskModel(**warning.task),
                )
                for warning in warnings
            ],
            count=len(warnings),
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
