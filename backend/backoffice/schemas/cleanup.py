"""Cleanup 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Dict, List, Optional

from backoffice.schemas.common import CamelModel


class CleanupTriggerOut(CamelModel):
    message: str
    timestamp: datetime


class CleanupRunOut(CamelModel):
    orphan_count: int
    deleted_count: int
    errors: List[Dict[str, str]]
    duration_ms: int


class CleanupStatusOut(CamelModel):
    is_running: bool
    scheduler_active: bool
    last_run: Optional[datetime] = None
    last_result: Optional[CleanupRunOut] = None
    next_scheduled_run: Optional[datetime] = None
    schedule: str
    uploads_directory: str


class CleanupPreviewOut(CamelModel):
    total_files_in_uploads: int
    referenced_files: int
    orphaned_files: int
    orphaned_file_list: List[str]
    estimated_space_saved: int  # bytes
    timestamp: datetime


class SchedulerStartOut(CamelModel):
    message: str
    next_run: datetime
    timestamp: datetime


class SchedulerStopOut(CamelModel):
    message: str
    timestamp: datetime
