import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from traveled.config import settings
from traveled.database import check_db_connection
from traveled.logging_config import setup_logging
from traveled.middleware import (
    ErrorHandlingMiddleware,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    register_exception_handlers,
)
from traveled.routers.export import router as export_router
from traveled.routers.health import router as health_router
from traveled.routers.prefecture_ratings import router as prefecture_ratings_router
from traveled.routers.regions import router as regions_router
from traveled.routers.shares import router as shares_router
from traveled.routers.stats import router as stats_router
from traveled.routers.visits import router as visits_router

# 로깅 설정 초기화
setup_logging(
    log_dir=settings.log_dir,
    log_level="DEBUG" if settings.debug else settings.log_level,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    # Startup
    logging.info(f"🚀 {settings.app_name} v{settings.app_version} 시작")
    logging.info(f"환경: {settings.environment}")
    logging.info(f"디버그 모드: {settings.debug}")
    logging.info(f"스토리지: {settings.storage_backend} / Rate limit: {settings.rate_limit_backend}")

    db_ok, db_msg = check_db_connection()
    if db_ok:
        logging.info(db_msg)
    else:
        logging.warning(f"⚠️  {db_msg}")

    # 개발 환경에서만 자동으로 테이블 생성 및 기준 데이터 적재
    if settings.debug:
        try:
            from traveled.init_data import init_database

            logging.info("데이터베이스 초기화 시작...")
            init_database()
            logging.info("데이터베이스 초기화 완료")
        except Exception as e:
            logging.error(f"⚠️  초기화 중 오류 발생: {e}", exc_info=True)

    yield

    # Shutdown
    logging.info(f"🛑 {settings.app_name} 종료")


app = FastAPI(
    title=settings.app_name,
    description="Japan prefecture travel tracker API",
    version=settings.app_version,
    lifespan=lifespan,
)

# 미들웨어 추가 (나중에 추가한 것이 바깥쪽)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RateLimitMiddleware)  # /api/* 일반 Rate limit
app.add_middleware(ErrorHandlingMiddleware)  # 요청 ID, 요청 로깅, 처리되지 않은 예외

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
)

register_exception_handlers(app)

# 라우터 등록 (API prefix 통일)
app.include_router(health_router, prefix="/api")
app.include_router(regions_router, prefix="/api")
app.include_router(visits_router, prefix="/api")
app.include_router(prefecture_ratings_router, prefix="/api")
app.include_router(stats_router, prefix="/api")
app.include_router(export_router, prefix="/api")
app.include_router(shares_router, prefix="/api")

# 로컬 스토리지 사용 시 공유 이미지 정적 서빙
if settings.storage_backend == "local":
    app.mount(
        settings.media_url_prefix,
        StaticFiles(directory=settings.media_dir, check_dir=False),
        name="media",
    )


@app.get("/")
async def root():
    return {"message": f"{settings.app_name} is running!"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app", host=settings.host, port=settings.port, reload=settings.debug
    )
