"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 업로드 정적 서빙, 정리 스케줄러 수명주기를 등록합니다."""

import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from backoffice.config import settings
from backoffice.database import Base, engine
import backoffice.models  # noqa: F401 - 모델 import로 metadata 등록
from backoffice.routers import auth, cleanup
from backoffice.schemas.common import error
from backoffice.services.cleanup_scheduler import cleanup_scheduler

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Store Back-office API",
    description="E-commerce back-office API: catalog, content and upload maintenance",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_envelope(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error(str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


# Register all routers
app.include_router(auth.router)
app.include_router(cleanup.router)


@app.on_event("startup")
async def on_startup():
    Base.metadata.create_all(bind=engine)
    if settings.CLEANUP_SCHEDULER_ENABLED:
        cleanup_scheduler.start()
    else:
        logger.info("[startup] cleanup scheduler disabled by configuration")


@app.on_event("shutdown")
async def on_shutdown():
    cleanup_scheduler.stop()


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Store Back-office API"}


# Static file serving for uploads
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
