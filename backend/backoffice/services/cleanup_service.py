"""Cleanup Service 도메인 서비스 레이어입니다. 업로드 디렉터리에서 DB가 참조하지 않는 고아 파일을 찾아 삭제합니다."""

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from backoffice.config import settings
from backoffice.database import SessionLocal, ensure_connection
from backoffice.services.reference_scanner import collect_referenced_filenames

logger = logging.getLogger(__name__)


@dataclass
class DeletionReport:
    deleted_count: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class CleanupResult:
    orphan_count: int
    deleted_count: int
    errors: List[Dict[str, str]]
    duration_ms: int


@dataclass
class CleanupPreview:
    total_files_in_uploads: int
    referenced_files: int
    orphaned_files: int
    orphaned_file_list: List[str]
    estimated_space_saved: int


def list_uploaded_files(upload_dir: str, sentinel_filename: str) -> set[str]:
    # OSError (missing directory, permissions) propagates to the caller.
    with os.scandir(upload_dir) as entries:
        return {
            entry.name
            for entry in entries
            if entry.name != sentinel_filename and entry.is_file()
        }


def resolve_orphans(uploaded: Iterable[str], referenced: Iterable[str]) -> set[str]:
    return set(uploaded) - set(referenced)


def delete_orphans(upload_dir: str, orphans: Iterable[str]) -> DeletionReport:
    report = DeletionReport()
    for filename in orphans:
        try:
            os.remove(os.path.join(upload_dir, filename))
        except OSError as exc:
            logger.error("[cleanup] failed to delete %s: %s", filename, exc)
            report.errors.append({"filename": filename, "error": str(exc)})
            continue
        report.deleted_count += 1
        logger.info("[cleanup] deleted orphaned file: %s", filename)
    return report


def total_size(upload_dir: str, filenames: Iterable[str]) -> int:
    size = 0
    for filename in filenames:
        try:
            size += os.path.getsize(os.path.join(upload_dir, filename))
        except OSError:
            continue
    return size


class CleanupService:
    """Owns the run-lock and sequences scan, listing, resolution and deletion."""

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        session_factory=None,
        sentinel_filename: Optional[str] = None,
        recheck_references: Optional[bool] = None,
    ):
        self.upload_dir = os.path.abspath(upload_dir or settings.UPLOAD_DIR)
        self.session_factory = session_factory or SessionLocal
        self.sentinel_filename = sentinel_filename or settings.CLEANUP_SENTINEL_FILENAME
        self.recheck_references = (
            settings.CLEANUP_RECHECK_REFERENCES if recheck_references is None else recheck_references
        )
        self.is_running = False
        self.last_run_at: Optional[datetime] = None
        self.last_result: Optional[CleanupResult] = None

    def _scan_references(self) -> set[str]:
        db = self.session_factory()
        try:
            return collect_referenced_filenames(db)
        finally:
            db.close()

    async def get_referenced_images(self) -> set[str]:
        return await asyncio.to_thread(self._scan_references)

    async def get_uploaded_files(self) -> set[str]:
        files = await asyncio.to_thread(list_uploaded_files, self.upload_dir, self.sentinel_filename)
        logger.info("[cleanup] found %d files in %s", len(files), self.upload_dir)
        return files

    async def delete_orphans(self, orphans: Iterable[str]) -> DeletionReport:
        report = await asyncio.to_thread(delete_orphans, self.upload_dir, list(orphans))
        if report.errors:
            logger.warning("[cleanup] failed to delete %d files: %s", len(report.errors), report.errors)
        return report

    async def _drop_newly_referenced(self, orphans: set[str]) -> set[str]:
        fresh = await self.get_referenced_images()
        deletable = resolve_orphans(orphans, fresh)
        kept = len(orphans) - len(deletable)
        if kept:
            logger.warning("[cleanup] %d files were referenced during the run and will be kept", kept)
        return deletable

    async def perform_cleanup(self) -> Optional[CleanupResult]:
        if self.is_running:
            logger.warning("[cleanup] cleanup is already running, skipping")
            return None

        self.is_running = True
        started_at = datetime.now(timezone.utc)
        started = time.monotonic()
        try:
            logger.info("[cleanup] starting orphaned upload cleanup")
            await asyncio.to_thread(ensure_connection, self.session_factory)

            referenced, uploaded = await asyncio.gather(
                self.get_referenced_images(),
                self.get_uploaded_files(),
            )
            orphans = resolve_orphans(uploaded, referenced)
            logger.info("[cleanup] found %d orphaned files", len(orphans))

            report = DeletionReport()
            if orphans:
                deletable = orphans
                if self.recheck_references:
                    deletable = await self._drop_newly_referenced(orphans)
                report = await self.delete_orphans(deletable)
                logger.info("[cleanup] cleanup completed: %d files deleted", report.deleted_count)
            else:
                logger.info("[cleanup] no orphaned files found")

            duration_ms = int((time.monotonic() - started) * 1000)
            logger.info("[cleanup] cleanup finished in %dms", duration_ms)
            self.last_result = CleanupResult(
                orphan_count=len(orphans),
                deleted_count=report.deleted_count,
                errors=report.errors,
                duration_ms=duration_ms,
            )
            return self.last_result
        except Exception:
            logger.exception("[cleanup] cleanup run failed")
            return None
        finally:
            self.last_run_at = started_at
            self.is_running = False

    async def manual_cleanup(self) -> Optional[CleanupResult]:
        logger.info("[cleanup] manual cleanup triggered")
        return await self.perform_cleanup()

    async def preview(self) -> CleanupPreview:
        referenced, uploaded = await asyncio.gather(
            self.get_referenced_images(),
            self.get_uploaded_files(),
        )
        orphans = sorted(resolve_orphans(uploaded, referenced))
        space = await asyncio.to_thread(total_size, self.upload_dir, orphans)
        return CleanupPreview(
            total_files_in_uploads=len(uploaded),
            referenced_files=len(referenced),
            orphaned_files=len(orphans),
            orphaned_file_list=orphans,
            estimated_space_saved=space,
        )


cleanup_service = CleanupService()


def get_cleanup_service() -> CleanupService:
    return cleanup_service
