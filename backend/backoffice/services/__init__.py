"""서비스 레이어 패키지 초기화 모듈입니다."""

from backoffice.services import (
    auth_service,
    reference_scanner,
    cleanup_service,
    cleanup_scheduler,
)
