"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./backoffice.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # File upload
    UPLOAD_DIR: str = str(Path(__file__).resolve().parents[1] / "uploads")

    # Orphaned upload cleanup
    CLEANUP_SENTINEL_FILENAME: str = ".gitkeep"
    CLEANUP_SCHEDULER_ENABLED: bool = True
    # 00:00 IST == 18:30 UTC (previous day)
    CLEANUP_SCHEDULE_HOUR_UTC: int = 18
    CLEANUP_SCHEDULE_MINUTE_UTC: int = 30
    # Re-scan references right before deleting to narrow the scan/delete race.
    CLEANUP_RECHECK_REFERENCES: bool = True

    def cleanup_schedule_label(self) -> str:
        return (
            f"Daily at {self.CLEANUP_SCHEDULE_HOUR_UTC:02d}:"
            f"{self.CLEANUP_SCHEDULE_MINUTE_UTC:02d} UTC"
        )

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
