"""Cleanup 기능 API 라우터입니다. 고아 업로드 파일 정리 작업의 실행, 상태 조회, 미리보기, 스케줄러 제어를 제공합니다."""

import logging
from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from backoffice.middleware.auth_middleware import require_roles
from backoffice.models.user import User
from backoffice.config import settings
from backoffice.schemas.cleanup import (
    CleanupPreviewOut,
    CleanupRunOut,
    CleanupStatusOut,
    CleanupTriggerOut,
    SchedulerStartOut,
    SchedulerStopOut,
)
from backoffice.schemas.common import ApiResponse, ok
from backoffice.services.cleanup_scheduler import CleanupScheduler, get_cleanup_scheduler
from backoffice.services.cleanup_service import CleanupService, get_cleanup_service
from backoffice.utils.background import spawn_background

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cleanup", tags=["cleanup"])


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.post("/trigger", response_model=ApiResponse[CleanupTriggerOut])
async def trigger_cleanup(
    service: CleanupService = Depends(get_cleanup_service),
    _current_user: User = Depends(require_roles("admin")),
):
    logger.info("[cleanup] manual cleanup requested via API")
    spawn_background(service.manual_cleanup(), name="manual-cleanup")
    return ok(
        "Cleanup process started successfully",
        CleanupTriggerOut(
            message="Cleanup process has been initiated. Check logs for progress.",
            timestamp=_now(),
        ),
    )


@router.get("/status", response_model=ApiResponse[CleanupStatusOut])
async def cleanup_status(
    service: CleanupService = Depends(get_cleanup_service),
    scheduler: CleanupScheduler = Depends(get_cleanup_scheduler),
    _current_user: User = Depends(require_roles("admin")),
):
    last_result = service.last_result
    return ok(
        "Cleanup service status retrieved successfully",
        CleanupStatusOut(
            is_running=service.is_running,
            scheduler_active=scheduler.is_active,
            last_run=service.last_run_at,
            last_result=CleanupRunOut(**asdict(last_result)) if last_result else None,
            next_scheduled_run=scheduler.next_run if scheduler.is_active else None,
            schedule=settings.cleanup_schedule_label(),
            uploads_directory=service.upload_dir,
        ),
    )


@router.get("/preview", response_model=ApiResponse[CleanupPreviewOut])
async def cleanup_preview(
    service: CleanupService = Depends(get_cleanup_service),
    _current_user: User = Depends(require_roles("admin")),
):
    logger.info("[cleanup] orphaned files preview requested")
    try:
        preview = await service.preview()
    except Exception:
        logger.exception("[cleanup] failed to generate orphaned files preview")
        raise HTTPException(status_code=500, detail="Failed to generate orphaned files preview")

    return ok(
        "Orphaned files preview generated successfully",
        CleanupPreviewOut(**asdict(preview), timestamp=_now()),
    )


@router.post("/scheduler/start", response_model=ApiResponse[SchedulerStartOut])
async def start_scheduler(
    scheduler: CleanupScheduler = Depends(get_cleanup_scheduler),
    _current_user: User = Depends(require_roles("admin")),
):
    next_run = scheduler.start()
    return ok(
        "Cleanup scheduler started successfully",
        SchedulerStartOut(
            message="Cleanup scheduler is now active",
            next_run=next_run,
            timestamp=_now(),
        ),
    )


@router.post("/scheduler/stop", response_model=ApiResponse[SchedulerStopOut])
async def stop_scheduler(
    scheduler: CleanupScheduler = Depends(get_cleanup_scheduler),
    _current_user: User = Depends(require_roles("admin")),
):
    scheduler.stop()
    return ok(
        "Cleanup scheduler stopped successfully",
        SchedulerStopOut(message="Cleanup scheduler has been stopped", timestamp=_now()),
    )
