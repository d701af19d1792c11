import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from traveled.config import settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.database_url


def _engine_options() -> dict:
    """DB 종류별 엔진 옵션"""
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": 10,
        "max_overflow": 15,
        "pool_timeout": 60,
        "pool_pre_ping": True,  # 연결 상태 확인 활성화
        "pool_recycle": 1800,  # 30분마다 연결 재생성
        "connect_args": {
            "connect_timeout": 30,
            "application_name": "traveled",
            "options": "-c statement_timeout=30000",  # 쿼리 타임아웃 (30초)
        },
    }


engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=settings.debug,
    **_engine_options(),
)

# 세션 팩토리 생성
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base 클래스
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        db.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        db.close()


def check_db_connection():
    """데이터베이스 연결 상태 확인"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1")).fetchone()
        return True, "Database connection successful"
    except Exception as e:
        return False, f"Database connection failed: {str(e)}"
    finally:
        db.close()
