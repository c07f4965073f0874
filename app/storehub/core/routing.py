from __future__ import annotations

import json
import logging
import time
from typing import Callable

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import ClientDisconnect

from app.storehub.core.context import get_request_context
from app.storehub.core.error_catalog import AppError, ErrorCatalog
from app.storehub.services.audit import AuditEntryData, AuditLabel, build_audit_details, outcome_for_status

logger = logging.getLogger(__name__)


async def _json_body(request: Request):
    try:
        raw = await request.body()
    except ClientDisconnect:
        return None
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


class AuditedRoute(APIRoute):
    """Route class that records an audit entry for endpoints carrying an ``audit_label``.

    The wrapper observes the final status (including rejections raised by
    authentication and guard dependencies) and never alters the response.
    """

    def get_route_handler(self) -> Callable:
        original_handler = super().get_route_handler()
        label: AuditLabel | None = getattr(self.endpoint, "audit_label", None)
        if label is None:
            return original_handler

        async def audited_handler(request: Request) -> Response:
            started = time.perf_counter()
            status_code = ErrorCatalog.INTERNAL_ERROR.status_code
            response_size = 0
            error: str | None = None
            try:
                response = await original_handler(request)
                status_code = response.status_code
                response_size = len(getattr(response, "body", b"") or b"")
                return response
            except AppError as exc:
                status_code = exc.error.status_code
                error = exc.message
                raise
            except StarletteHTTPException as exc:
                status_code = exc.status_code
                error = str(exc.detail)
                raise
            except RequestValidationError:
                status_code = ErrorCatalog.VALIDATION_ERROR.status_code
                error = ErrorCatalog.VALIDATION_ERROR.message
                raise
            except Exception as exc:
                error = str(exc) or exc.__class__.__name__
                raise
            finally:
                await _record_audit(
                    request,
                    label,
                    status_code=status_code,
                    response_size=response_size,
                    duration_ms=int((time.perf_counter() - started) * 1000),
                    error=error,
                )

        return audited_handler


async def _record_audit(
    request: Request,
    label: AuditLabel,
    *,
    status_code: int,
    response_size: int,
    duration_ms: int,
    error: str | None,
) -> None:
    try:
        recorder = getattr(request.app.state, "audit_recorder", None)
        if recorder is None:
            return
        context = get_request_context(request)
        resource_id = None
        if label.resource_id is not None:
            try:
                resource_id = label.resource_id(request)
            except Exception:
                logger.warning("Failed to get resource ID for audit log", exc_info=True)
        details = build_audit_details(
            context,
            method=request.method,
            path=request.url.path,
            query=dict(request.query_params),
            body=await _json_body(request),
            status_code=status_code,
            response_size=response_size,
        )
        entry = AuditEntryData(
            action=label.action,
            resource=label.resource,
            status=outcome_for_status(status_code),
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details,
            ip_address=context.client_ip,
            user_agent=context.user_agent,
            duration=duration_ms,
            error=error,
        )
        await run_in_threadpool(recorder.record, entry)
    except Exception:
        logger.exception("Audit logging error")
